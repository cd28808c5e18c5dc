"""
Routing layer: rewrite rules, request classification, legacy URL
translation and nav-menu items for registered actions.
"""
from __future__ import annotations

from typing import Optional

from ..actions.registry import ActionRegistry
from ..config import RouterSettings
from ..utils.crypto import TokenService
from .classifier import ContentQuery, Post, RequestClassifier
from .context import RequestContext
from .host import HostUrls
from .nav_menus import NavMenuAdapter, NavMenuItem
from .rewrite import RewriteInstaller, RewriteTable
from .translator import ACTION_ALIASES, LEGACY_ENDPOINTS, LegacyUrlTranslator


def build_host_urls(
    settings: RouterSettings,
    registry: ActionRegistry,
    context: Optional[RequestContext] = None,
    tokens: Optional[TokenService] = None,
) -> HostUrls:
    """Host URL generators for one request with the translator attached."""
    host = HostUrls(settings, context, tokens)
    host.translator = LegacyUrlTranslator(registry, host)
    return host


__all__ = [
    "ACTION_ALIASES",
    "ContentQuery",
    "HostUrls",
    "LEGACY_ENDPOINTS",
    "LegacyUrlTranslator",
    "NavMenuAdapter",
    "NavMenuItem",
    "Post",
    "RequestClassifier",
    "RequestContext",
    "RewriteInstaller",
    "RewriteTable",
    "build_host_urls",
]
