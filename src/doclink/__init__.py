"""Doclink - documentation pages with alias cross-references."""
