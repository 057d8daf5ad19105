"""Alias resolution endpoint."""

from aiohttp import web

from doclink.app_keys import store_loader_key
from doclink.core.errors import UnresolvedAliasError
from doclink.core.resolver import AliasResolver


def create_resolve_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/resolve", resolve_token),
    ]


async def resolve_token(request: web.Request) -> web.Response:
    token = request.query.get("token")
    if not token:
        return web.json_response(
            {"error": "Missing 'token' query parameter"},
            status=400,
        )

    resolver = AliasResolver(request.app[store_loader_key].load())
    try:
        path = resolver.resolve(token)
    except ValueError:
        return web.json_response(
            {"error": "Not an alias reference", "token": token},
            status=400,
        )
    except UnresolvedAliasError:
        return web.json_response(
            {"error": "Unresolved alias reference", "token": token},
            status=404,
        )

    return web.json_response({"token": token, "path": path})
