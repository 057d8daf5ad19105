"""Documents API endpoints.

Serves document records, alias-resolved bodies, and related documents.
"""

from aiohttp import web

from doclink.app_keys import policy_key, store_loader_key
from doclink.core.errors import UnresolvedAliasError
from doclink.core.related import RelatedLinker
from doclink.core.resolver import AliasResolver


def create_documents_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/documents", list_documents),
        web.get("/api/documents/{alias}", get_document),
        web.get("/api/documents/{alias}/related", get_related),
    ]


async def list_documents(request: web.Request) -> web.Response:
    store = request.app[store_loader_key].load()
    tag = request.query.get("tag")
    documents = store.by_tag(tag) if tag else store.all()
    return web.json_response({"items": [doc.to_dict() for doc in documents]})


async def get_document(request: web.Request) -> web.Response:
    alias = request.match_info["alias"]
    store = request.app[store_loader_key].load()

    doc = store.find(alias)
    if doc is None:
        return _not_found(alias)

    resolver = AliasResolver(store, request.app[policy_key])
    try:
        resolved = resolver.resolve_text(doc.body)
    except UnresolvedAliasError as e:
        return web.json_response(
            {"error": "Unresolved alias reference", "token": e.token},
            status=422,
        )

    twin = RelatedLinker(store).twin_of(doc)

    record = dict(doc.to_dict())
    record["body"] = resolved.text
    record["twin_path"] = twin.path if twin else None
    return web.json_response({"document": record, "warnings": resolved.warnings})


async def get_related(request: web.Request) -> web.Response:
    alias = request.match_info["alias"]
    store = request.app[store_loader_key].load()

    doc = store.find(alias)
    if doc is None:
        return _not_found(alias)

    related = RelatedLinker(store).related_of(doc)
    return web.json_response(related.to_dict())


def _not_found(alias: str) -> web.Response:
    return web.json_response(
        {"error": "Document not found", "alias": alias},
        status=404,
    )
