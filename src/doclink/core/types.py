"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/guide", "/graphql/reference")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Opaque stable document identifier (e.g., "oiviev0xi7")
Alias = NewType("Alias", str)
