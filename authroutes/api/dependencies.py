from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status

from ..actions.registry import ActionRegistry
from ..config import RouterSettings
from ..routing import build_host_urls
from ..routing.context import RequestContext
from ..routing.host import HostUrls
from ..routing.rewrite import RewriteInstaller, RewriteTable
from ..storage.rewrite_store import RewriteRuleStore, load_or_build
from ..utils.crypto import TokenService

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _state(request: Request, name: str) -> Any:
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"{name} not initialized")
    return value


def get_settings(request: Request) -> RouterSettings:
    return _state(request, "settings")


def get_tokens(request: Request) -> TokenService:
    return _state(request, "tokens")


def get_store(request: Request) -> RewriteRuleStore:
    return _state(request, "rewrite_store")


def get_current_user(
    request: Request,
    settings: RouterSettings = Depends(get_settings),
    tokens: TokenService = Depends(get_tokens),
) -> Optional[str]:
    """Login of the visitor, from the signed logged-in cookie."""
    return tokens.validate_auth_cookie(request.cookies.get(settings.auth_cookie_name))


def get_registry(request: Request, user: Optional[str] = Depends(get_current_user)) -> ActionRegistry:
    """Actions for this request; nav-menu visibility depends on the login state."""
    return _state(request, "registry_factory")(user is not None)


async def get_context(request: Request, settings: RouterSettings = Depends(get_settings)) -> RequestContext:
    form = None
    content_type = request.headers.get("content-type", "")
    if request.method == "POST" and content_type.startswith(FORM_CONTENT_TYPES):
        form = dict(await request.form())
    return RequestContext.from_request(request, settings, form)


def get_host(
    settings: RouterSettings = Depends(get_settings),
    registry: ActionRegistry = Depends(get_registry),
    context: RequestContext = Depends(get_context),
    tokens: TokenService = Depends(get_tokens),
) -> HostUrls:
    return build_host_urls(settings, registry, context, tokens)


def get_rewrite_table(
    settings: RouterSettings = Depends(get_settings),
    registry: ActionRegistry = Depends(get_registry),
    store: RewriteRuleStore = Depends(get_store),
) -> RewriteTable:
    return load_or_build(store, lambda: RewriteInstaller(registry, settings).install())


def default_head_callbacks() -> Dict[str, list]:
    """The head/redirect callbacks a plain page would run."""
    return {
        "wp_head": [
            "feed_links",
            "feed_links_extra",
            "rsd_link",
            "wlwmanifest_link",
            "parent_post_rel_link",
            "start_post_rel_link",
            "adjacent_posts_rel_link_wp_head",
            "rel_canonical",
            "wp_generator",
        ],
        "template_redirect": ["redirect_canonical"],
    }
