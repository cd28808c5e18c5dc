"""
authroutes: permalink routing for login, registration and password actions.
"""
from .actions import Action, ActionRegistry, build_default_registry
from .config import RouterSettings, get_settings
from .routing import (
    HostUrls,
    LegacyUrlTranslator,
    NavMenuAdapter,
    RequestClassifier,
    RequestContext,
    RewriteInstaller,
    RewriteTable,
    build_host_urls,
)

__version__ = "1.0.0"

__all__ = [
    "Action",
    "ActionRegistry",
    "HostUrls",
    "LegacyUrlTranslator",
    "NavMenuAdapter",
    "RequestClassifier",
    "RequestContext",
    "RewriteInstaller",
    "RewriteTable",
    "RouterSettings",
    "build_default_registry",
    "build_host_urls",
    "get_settings",
]
