"""Live reload support."""

from doclink.live.reload import LiveReloadManager

__all__ = ["LiveReloadManager"]
