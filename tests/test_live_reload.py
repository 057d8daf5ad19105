"""Tests for live reload."""

import asyncio
import json
from pathlib import Path

import pytest
from watchfiles import Change

from doclink.config import Config
from doclink.core.store import StoreLoader
from doclink.live import LiveReloadManager
from doclink.server import create_app, live_reload_key


class FakeWebSocket:
    """Collects messages sent to a client."""

    closed = False

    def __init__(self) -> None:
        self.messages: list[dict[str, str | None]] = []

    async def send_str(self, data: str) -> None:
        self.messages.append(json.loads(data))


@pytest.fixture
def loader(docs_dir: Path, write_page) -> StoreLoader:
    write_page("guide.md", alias="g1")
    loader = StoreLoader(docs_dir)
    loader.load()
    return loader


@pytest.fixture
def manager(loader: StoreLoader) -> LiveReloadManager:
    return LiveReloadManager(loader, watch_patterns=["**/*.md"])


@pytest.fixture
def client_ws(manager: LiveReloadManager) -> FakeWebSocket:
    ws = FakeWebSocket()
    manager._connections.add(ws)  # type: ignore[arg-type]
    return ws


class TestProcessChanges:
    """Tests for LiveReloadManager.process_changes()."""

    @pytest.mark.asyncio
    async def test__modified_page__swaps_store_and_notifies(
        self,
        docs_dir: Path,
        write_page,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        """Rebuild store and send reload with the new alias."""
        old = loader.load()
        path = write_page("guide.md", alias="g2", path="/getting-started")

        await manager.process_changes({(Change.modified, str(path))})

        assert loader.load() is not old
        assert "g2" in loader.load()
        assert client_ws.messages == [
            {"type": "reload", "alias": "g2", "path": "/getting-started"},
        ]

    @pytest.mark.asyncio
    async def test__deleted_page__notifies_without_alias(
        self,
        docs_dir: Path,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        """Drop deleted documents from the rebuilt store."""
        path = docs_dir / "guide.md"
        path.unlink()

        await manager.process_changes({(Change.deleted, str(path))})

        assert "g1" not in loader.load()
        assert client_ws.messages == [
            {"type": "reload", "alias": None, "path": "/guide"},
        ]

    @pytest.mark.asyncio
    async def test__broken_change__keeps_previous_store(
        self,
        write_page,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        """Keep old store and report the error to clients."""
        old = loader.load()
        path = write_page("other.md", alias="g1")

        await manager.process_changes({(Change.added, str(path))})

        assert loader.load() is old
        assert len(client_ws.messages) == 1
        assert client_ws.messages[0]["type"] == "error"
        assert "Duplicate alias 'g1'" in str(client_ws.messages[0]["message"])

    @pytest.mark.asyncio
    async def test__unmatched_file__ignored(
        self,
        docs_dir: Path,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        """Ignore files outside watch patterns."""
        old = loader.load()
        other = docs_dir / "image.png"
        other.write_bytes(b"")

        await manager.process_changes({(Change.added, str(other))})

        assert loader.load() is old
        assert client_ws.messages == []

    @pytest.mark.asyncio
    async def test__file_outside_source_dir__ignored(
        self,
        tmp_path: Path,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        old = loader.load()

        await manager.process_changes({(Change.added, str(tmp_path / "x.md"))})

        assert loader.load() is old
        assert client_ws.messages == []

    @pytest.mark.asyncio
    async def test__nested_pattern__matches(
        self,
        write_page,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        path = write_page("graphql/reference.md", alias="r")

        await manager.process_changes({(Change.added, str(path))})

        assert client_ws.messages == [
            {"type": "reload", "alias": "r", "path": "/graphql/reference"},
        ]


class TestLiveReloadWebSocket:
    """Tests for the /ws/live-reload endpoint."""

    @pytest.mark.asyncio
    async def test__client_receives_reload(
        self, write_page, test_config: Config, aiohttp_client
    ) -> None:
        write_page("guide.md", alias="g1")
        config = test_config.with_overrides(live_reload_enabled=True)
        app = create_app(config)
        client = await aiohttp_client(app)

        ws = await client.ws_connect("/ws/live-reload")
        manager = app[live_reload_key]
        for _ in range(100):
            if manager.connection_count:
                break
            await asyncio.sleep(0.01)

        path = write_page("guide.md", alias="g2")
        await manager.process_changes({(Change.modified, str(path.resolve()))})
        message = await ws.receive_json(timeout=5)
        await ws.close()

        assert message == {"type": "reload", "alias": "g2", "path": "/guide"}


class TestReloadFailures:
    """Tests for rebuild failures outside front matter errors."""

    @pytest.mark.asyncio
    async def test__invalid_utf8__reports_error_and_keeps_store(
        self,
        docs_dir: Path,
        loader: StoreLoader,
        manager: LiveReloadManager,
        client_ws: FakeWebSocket,
    ) -> None:
        """Undecodable content is reported like any other parse failure."""
        old = loader.load()
        bad = docs_dir / "b.md"
        bad.write_bytes(b"---\nalias: b\n---\n\xff\xfe body")

        await manager.process_changes({(Change.modified, str(bad))})

        assert loader.load() is old
        assert len(client_ws.messages) == 1
        assert client_ws.messages[0]["type"] == "error"
        assert "invalid UTF-8" in str(client_ws.messages[0]["message"])

    @pytest.mark.asyncio
    async def test__stop__tolerates_failed_watch_task(
        self, manager: LiveReloadManager
    ) -> None:
        """Stopping after the watcher died doesn't re-raise its error."""

        async def crash() -> None:
            raise RuntimeError("watcher crashed")

        task = asyncio.create_task(crash())
        await asyncio.wait([task])
        manager._watch_task = task

        await manager.stop()

        assert manager._watch_task is None
