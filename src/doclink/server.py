"""aiohttp server for Doclink.

Application factory and route registration for the read-only JSON API.
"""

from aiohttp import web

from doclink.api.documents import create_documents_routes
from doclink.api.resolve import create_resolve_routes
from doclink.app_keys import policy_key, store_loader_key
from doclink.config import Config
from doclink.core.store import StoreLoader
from doclink.live import LiveReloadManager
from doclink.live.reload import create_live_reload_routes

live_reload_key = web.AppKey("live_reload_manager", LiveReloadManager)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Documents are loaded eagerly so a broken content set fails before the
    server starts.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application

    Raises:
        ParseError: If any source has malformed front matter
        DuplicateAliasError: If two sources share an alias
    """
    app = web.Application()

    loader = StoreLoader(config.docs.source_dir.resolve())
    loader.load()

    app[store_loader_key] = loader
    app[policy_key] = config.links.policy

    app.router.add_routes(create_documents_routes())
    app.router.add_routes(create_resolve_routes())

    if config.live_reload.enabled:
        manager = LiveReloadManager(
            loader,
            watch_patterns=config.live_reload.watch_patterns,
        )
        app[live_reload_key] = manager
        app.router.add_routes(create_live_reload_routes(manager))
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    return app


async def _start_live_reload(app: web.Application) -> None:
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    await app[live_reload_key].stop()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
