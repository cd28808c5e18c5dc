from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

import structlog
from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.responses import Response

from ..accounts import process_form, username_label
from ..actions import build_default_registry, load_action_overrides
from ..actions.registry import ActionRegistry
from ..config import RouterSettings, get_settings as load_settings
from ..routing.classifier import ContentQuery, RequestClassifier
from ..routing.context import RequestContext
from ..routing.host import HostUrls
from ..routing.rewrite import QUERY_VAR, RewriteTable
from ..storage.rewrite_store import MemoryRewriteRuleStore, RedisRewriteRuleStore, RewriteRuleStore
from ..utils.crypto import TokenService
from ..utils.logger import configure_logging
from ..utils.urls import home_relative_path
from . import internal_admin, internal_nav_menus, internal_urls
from .dependencies import (
    default_head_callbacks,
    get_context,
    get_host,
    get_registry,
    get_rewrite_table,
    get_settings,
    get_tokens,
)
from .schemas import ActionPageResponse, FormResultResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["actions"])


def resolve_query_vars(table: RewriteTable, settings: RouterSettings, context: RequestContext) -> Dict[str, str]:
    """
    Query vars for the request. With permalinks the dispatcher resolves
    them; without, only `?action=` on the home page counts.
    """
    if settings.use_permalinks:
        return table.parse_request(home_relative_path(context.path, settings.home_url), context.query)

    home_path = urlsplit(settings.home_url).path.rstrip("/")
    if context.path.rstrip("/") != home_path:
        return {}
    value = context.query.get(QUERY_VAR)
    return {QUERY_VAR: value} if value else {}


@router.api_route("/{path:path}", methods=["GET", "POST"], response_model=None)
async def front_controller(
    path: str,
    response: Response,
    settings: RouterSettings = Depends(get_settings),
    registry: ActionRegistry = Depends(get_registry),
    context: RequestContext = Depends(get_context),
    host: HostUrls = Depends(get_host),
    tokens: TokenService = Depends(get_tokens),
    table: RewriteTable = Depends(get_rewrite_table),
) -> Any:
    classifier = RequestClassifier(registry, resolve_query_vars(table, settings, context))
    action = classifier.active_action
    if action is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")

    callbacks = classifier.init(default_head_callbacks())
    query = classifier.parse_query(ContentQuery())
    posts = classifier.the_posts([], query)

    logger.info("action_dispatched", action=action.name, path=context.path, method=context.method)
    form = process_form(action.name, context, settings, password_url=host.lostpassword_url())
    if form is not None:
        logger.info("form_processed", action=action.name, ok=form.ok, errors=[e.code for e in form.errors])
        if form.ok and form.auto_login and form.user_login:
            handle_auto_login(response, form.user_login, settings, tokens, context)

    result = action.handle()
    if isinstance(result, Response):
        return result

    return ActionPageResponse(
        action=action.name,
        post=asdict(posts[0]),
        query={
            "is_page": query.is_page,
            "is_singular": query.is_singular,
            "is_single": query.is_single,
            "is_home": query.is_home,
            **query.vars,
        },
        username_label=username_label(action.name, settings),
        form=FormResultResponse.from_result(form) if form is not None else None,
        body_class=classifier.body_class([]),
        templates=classifier.page_templates(),
        head_callbacks=dict(callbacks),
    )


def handle_auto_login(
    response: Response,
    user_login: str,
    settings: RouterSettings,
    tokens: TokenService,
    context: RequestContext,
) -> None:
    """Log a newly registered or activated user straight in."""
    response.set_cookie(
        settings.auth_cookie_name,
        tokens.create_auth_cookie(user_login, settings.auth_cookie_lifetime_seconds),
        max_age=settings.auth_cookie_lifetime_seconds,
        path="/",
        secure=context.is_ssl,
        httponly=True,
    )
    logger.info("auto_login", user_login=user_login)


def registry_factory(
    settings: RouterSettings,
    registry: Optional[ActionRegistry] = None,
) -> Callable[[bool], ActionRegistry]:
    """
    Builds the registry for a request from the visitor's login state. A
    registry handed in explicitly is used as is for every request.
    """
    if registry is not None:
        return lambda user_logged_in: registry

    overrides = load_action_overrides(settings.actions_file)
    return lambda user_logged_in: build_default_registry(settings, user_logged_in=user_logged_in, overrides=overrides)


def build_store(settings: RouterSettings) -> RewriteRuleStore:
    if settings.redis_url:
        return RedisRewriteRuleStore.from_url(settings.redis_url)
    return MemoryRewriteRuleStore()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: RouterSettings = app.state.settings
    logger.info(
        "router_started",
        actions=[action.name for action in app.state.registry_factory(False)],
        permalinks=settings.use_permalinks,
        multisite=settings.multisite,
    )
    yield
    store = app.state.rewrite_store
    if isinstance(store, RedisRewriteRuleStore):
        store.redis.close()


def create_app(
    settings: Optional[RouterSettings] = None,
    registry: Optional[ActionRegistry] = None,
    store: Optional[RewriteRuleStore] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="authroutes",
        description="Permalink routing for login, registration and password actions",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry_factory = registry_factory(settings, registry)
    app.state.tokens = TokenService(settings.secret_key, settings.nonce_lifetime_seconds)
    app.state.rewrite_store = store if store is not None else build_store(settings)

    app.include_router(internal_admin.router)
    app.include_router(internal_nav_menus.router)
    app.include_router(internal_urls.router)
    # Catch-all, must stay last
    app.include_router(router)
    return app
