"""Tests for documents API endpoints."""

from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient

from doclink.config import Config
from doclink.core.errors import DuplicateAliasError
from doclink.core.resolver import LinkPolicy
from doclink.server import create_app


@pytest.fixture
def pages(write_page) -> None:
    write_page(
        "graphql/reference.md",
        "# GraphQL API\n\nTry the [playground](!alias-oiviev0xi7#playground).\n",
        alias="oiviev0xi7",
        path="/graphql/reference",
        layout="REFERENCE",
        shorttitle="Reference",
        tags=["graphql"],
        simple_relay_twin="c0mp4r3",
    )
    write_page(
        "relay-vs-apollo.md",
        "# Relay vs Apollo\n\n[Reference](!alias-oiviev0xi7) and [old](!alias-gone).\n",
        alias="c0mp4r3",
        tags=["graphql", "comparison"],
        related={"further": ["oiviev0xi7", "gone"], "more": ["oiviev0xi7"]},
    )


@pytest.fixture
async def client(pages, test_config: Config, aiohttp_client) -> TestClient:
    return await aiohttp_client(create_app(test_config))


class TestListDocuments:
    """Tests for GET /api/documents."""

    @pytest.mark.asyncio
    async def test__returns_all_in_load_order(self, client: TestClient) -> None:
        response = await client.get("/api/documents")

        assert response.status == 200
        data = await response.json()
        assert [item["alias"] for item in data["items"]] == ["oiviev0xi7", "c0mp4r3"]
        assert data["items"][0]["layout"] == "REFERENCE"
        assert data["items"][0]["short_title"] == "Reference"
        assert "body" not in data["items"][0]

    @pytest.mark.asyncio
    async def test__tag_filter(self, client: TestClient) -> None:
        response = await client.get("/api/documents", params={"tag": "comparison"})

        data = await response.json()
        assert [item["alias"] for item in data["items"]] == ["c0mp4r3"]


class TestGetDocument:
    """Tests for GET /api/documents/{alias}."""

    @pytest.mark.asyncio
    async def test__resolves_body_references(self, client: TestClient) -> None:
        """Return body with alias tokens replaced by paths."""
        response = await client.get("/api/documents/oiviev0xi7")

        assert response.status == 200
        data = await response.json()
        document = data["document"]
        assert document["path"] == "/graphql/reference"
        assert "(/graphql/reference#playground)" in document["body"]
        assert document["twin_path"] == "/relay-vs-apollo"
        assert data["warnings"] == []

    @pytest.mark.asyncio
    async def test__unresolved_reference__warns(self, client: TestClient) -> None:
        """Leave unknown tokens in place under warn policy."""
        response = await client.get("/api/documents/c0mp4r3")

        assert response.status == 200
        data = await response.json()
        assert "(/graphql/reference)" in data["document"]["body"]
        assert "(!alias-gone)" in data["document"]["body"]
        assert data["warnings"] == ["Unresolved alias reference: !alias-gone"]
        assert data["document"]["twin_path"] is None

    @pytest.mark.asyncio
    async def test__missing_document__returns_404(self, client: TestClient) -> None:
        response = await client.get("/api/documents/nonexistent")

        assert response.status == 404
        data = await response.json()
        assert data == {"error": "Document not found", "alias": "nonexistent"}


class TestGetRelated:
    """Tests for GET /api/documents/{alias}/related."""

    @pytest.mark.asyncio
    async def test__returns_resolved_related(self, client: TestClient) -> None:
        response = await client.get("/api/documents/c0mp4r3/related")

        assert response.status == 200
        data = await response.json()
        assert [doc["alias"] for doc in data["further"]] == ["oiviev0xi7"]
        assert [doc["alias"] for doc in data["more"]] == ["oiviev0xi7"]
        assert len(data["warnings"]) == 1
        assert "'gone'" in data["warnings"][0]

    @pytest.mark.asyncio
    async def test__missing_document__returns_404(self, client: TestClient) -> None:
        response = await client.get("/api/documents/nonexistent/related")

        assert response.status == 404


class TestErrorPolicy:
    """Tests for the error link policy."""

    @pytest.mark.asyncio
    async def test__unresolved_reference__returns_422(
        self, pages, test_config: Config, aiohttp_client
    ) -> None:
        config = test_config.with_overrides(policy=LinkPolicy.ERROR)
        client = await aiohttp_client(create_app(config))

        response = await client.get("/api/documents/c0mp4r3")

        assert response.status == 422
        data = await response.json()
        assert data == {
            "error": "Unresolved alias reference",
            "token": "!alias-gone",
        }


class TestCreateApp:
    """Tests for create_app()."""

    def test__broken_content__raises(
        self, docs_dir: Path, write_page, test_config: Config
    ) -> None:
        """Refuse to build an app over a broken content set."""
        write_page("a.md", alias="same")
        write_page("b.md", alias="same")

        with pytest.raises(DuplicateAliasError):
            create_app(test_config)
