from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urlsplit

import structlog

from ..actions.registry import ActionRegistry
from ..utils.urls import QueryValue, add_query_arg, parse_query, url_basename
from .context import RequestContext
from .host import HostUrls

logger = structlog.get_logger(__name__)

# Legacy `action` values and the action each one really means
ACTION_ALIASES: Dict[str, str] = {
    "retrievepassword": "lostpassword",
    "rp": "resetpass",
}

Query = Dict[str, QueryValue]
Classification = Tuple[str, Query]


def _classify_login(query: Query) -> Classification:
    action = query.pop("action", "login")
    return ACTION_ALIASES.get(action, action), query


def _classify_signup(query: Query) -> Classification:
    return "signup", query


def _classify_activate(query: Query) -> Classification:
    return "activate", query


LEGACY_ENDPOINTS: Dict[str, Callable[[Dict[str, str]], Classification]] = {
    "wp-login.php": _classify_login,
    "wp-signup.php": _classify_signup,
    "wp-activate.php": _classify_activate,
}


class LegacyUrlTranslator:
    """
    Rewrites the host's login/signup/activation/logout URLs into canonical
    action URLs. Every path through here returns a URL; anything that
    cannot be translated comes back unchanged.
    """

    def __init__(self, registry: ActionRegistry, host: HostUrls):
        self.registry = registry
        self.host = host

    def should_translate(self, context: RequestContext) -> bool:
        # The login endpoint must keep pointing at itself
        if context.is_wp_login:
            return False
        if context.is_admin and not context.is_post_request:
            return False
        if context.is_customize_preview:
            return False
        return True

    def filter_site_url(self, url: str, path: str, scheme: Optional[str], context: RequestContext) -> str:
        return self.translate(url, scheme, context, network=False)

    def filter_network_site_url(self, url: str, path: str, scheme: Optional[str], context: RequestContext) -> str:
        return self.translate(url, scheme, context, network=True)

    def translate(self, url: str, scheme: Optional[str], context: RequestContext, network: bool = False) -> str:
        if not self.should_translate(context):
            return url

        try:
            endpoint = url_basename(url)
            query = parse_query(urlsplit(url).query)
        except ValueError:
            logger.debug("legacy_url_unparseable", url=url)
            return url

        classify = LEGACY_ENDPOINTS.get(endpoint)
        if classify is None:
            return url

        name, query = classify(query)

        action = self.registry.get(name)
        if action is None:
            logger.debug("legacy_url_unknown_action", url=url, action=name)
            return url

        translated = add_query_arg(query, action.get_url(self.host, scheme or "login", network))
        logger.debug("legacy_url_translated", url=url, action=name, network=network, result=translated)
        return translated

    def filter_logout_url(self, url: str, redirect: str = "") -> str:
        if not self.host.use_permalinks:
            return url

        action = self.registry.get("logout")
        if action is None:
            return url

        url = action.get_url(self.host)
        if redirect:
            url = add_query_arg({"redirect_to": redirect}, url)

        return self.host.tokens.nonce_url(url, "log-out")
