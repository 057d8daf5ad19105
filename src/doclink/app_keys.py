"""Application keys for type-safe app configuration access."""

from aiohttp import web

from doclink.core.resolver import LinkPolicy
from doclink.core.store import StoreLoader

store_loader_key = web.AppKey("store_loader", StoreLoader)
policy_key = web.AppKey("policy", LinkPolicy)
