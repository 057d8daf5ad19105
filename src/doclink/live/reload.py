"""WebSocket-based live reload for development mode.

Monitors content files for changes, rebuilds the document store, and
notifies connected clients via WebSocket.
"""

import asyncio
import json
import logging
import weakref
from pathlib import Path

from aiohttp import WSMsgType, web
from watchfiles import Change, awatch

from doclink.core.errors import DoclinkError
from doclink.core.frontmatter import path_from_source
from doclink.core.store import StoreLoader

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Manages WebSocket connections and file watching for live reload.

    Each change batch triggers one store rebuild. A rebuild that fails
    leaves the previous store in place and reports the error to clients.
    """

    def __init__(
        self,
        loader: StoreLoader,
        watch_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the live reload manager.

        Args:
            loader: StoreLoader whose source directory is watched
            watch_patterns: Glob patterns to watch (default: ["**/*.md"])
        """
        self._loader = loader
        self._watch_patterns = watch_patterns or ["**/*.md"]
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._watch_task: asyncio.Task[None] | None = None

    @property
    def connection_count(self) -> int:
        """Number of connected WebSocket clients."""
        return len(self._connections)

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher and close all connections."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.warning(f"File watcher had stopped with an error: {e!r}")
            self._watch_task = None

        for ws in list(self._connections):
            await ws.close()

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection for live reload."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def _watch_files(self) -> None:
        try:
            async for changes in awatch(self._loader.source_dir):
                await self.process_changes(changes)
        except Exception:
            logger.exception("File watcher stopped, live reload disabled")
            raise

    async def process_changes(self, changes: set[tuple[Change, str]]) -> None:
        """Rebuild the store for a batch of file changes.

        Args:
            changes: Change type and absolute path pairs from watchfiles
        """
        changed = [
            Path(path_str)
            for _, path_str in changes
            if self._matches_patterns(Path(path_str))
        ]
        if not changed:
            return

        try:
            store = await asyncio.to_thread(self._loader.reload)
        except DoclinkError as e:
            logger.warning(f"Reload failed, keeping previous documents: {e}")
            await self._broadcast({"type": "error", "message": str(e)})
            return

        for path in sorted(changed):
            doc = store.by_source(path.relative_to(self._loader.source_dir))
            await self._broadcast(
                {
                    "type": "reload",
                    "alias": doc.alias if doc else None,
                    "path": doc.path if doc else self._to_doc_path(path),
                },
            )

    def _matches_patterns(self, path: Path) -> bool:
        try:
            relative = path.relative_to(self._loader.source_dir)
        except ValueError:
            return False

        for pattern in self._watch_patterns:
            if relative.match(pattern):
                return True
            # "**/" also matches files directly under the source root
            if pattern.startswith("**/") and relative.match(pattern[3:]):
                return True
        return False

    def _to_doc_path(self, file_path: Path) -> str:
        """Convert a file system path to the default document path."""
        return path_from_source(file_path.relative_to(self._loader.source_dir))

    async def _broadcast(self, payload: dict[str, str | None]) -> None:
        if not self._connections:
            return

        message = json.dumps(payload)

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass


def create_live_reload_routes(manager: LiveReloadManager) -> list[web.RouteDef]:
    """Create routes for live reload WebSocket."""
    return [web.get("/ws/live-reload", manager.handle_websocket)]
