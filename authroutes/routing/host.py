from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..config import RouterSettings
from ..utils.crypto import TokenService
from ..utils.urls import add_query_arg, trailingslashit, untrailingslashit
from .context import RequestContext

if TYPE_CHECKING:
    from .translator import LegacyUrlTranslator

_SCHEME_RE = re.compile(r"^\w+://")
_SCHEME_HOST_RE = re.compile(r"^\w+://[^/]*")

# Schemes that follow force_ssl_admin
SECURE_SCHEMES = ("admin", "login", "login_post", "rpc")


class HostUrls:
    """
    The host's URL generators for one request.

    `site_url`, `network_site_url` and `logout_url` build the host's own
    legacy URLs and then hand them to the attached translator, the same
    way the host runs its URL filters.
    """

    def __init__(
        self,
        settings: RouterSettings,
        context: Optional[RequestContext] = None,
        tokens: Optional[TokenService] = None,
    ):
        self.settings = settings
        self.context = context or RequestContext()
        self.tokens = tokens or TokenService(settings.secret_key, settings.nonce_lifetime_seconds)
        self.translator: Optional[LegacyUrlTranslator] = None

    @property
    def use_permalinks(self) -> bool:
        return self.settings.use_permalinks

    # -------------------------
    # Primitives
    # -------------------------

    def set_url_scheme(self, url: str, scheme: Optional[str] = None) -> str:
        if scheme not in ("http", "https", "relative"):
            if scheme in SECURE_SCHEMES and self.settings.force_ssl_admin:
                scheme = "https"
            else:
                scheme = "https" if self.context.is_ssl else "http"

        url = url.strip()
        if url.startswith("//"):
            url = "http:" + url

        if scheme == "relative":
            url = _SCHEME_HOST_RE.sub("", url).lstrip()
            if url.startswith("/"):
                url = "/" + url.lstrip("/ \t\n\r\0\x0b")
            return url

        return _SCHEME_RE.sub(scheme + "://", url, count=1)

    def _append_path(self, base: str, path: str) -> str:
        if path:
            return base + "/" + path.lstrip("/")
        return base

    def build_url(self, path: str = "", scheme: Optional[str] = None, network: bool = False) -> str:
        """home_url / network_home_url"""
        base = self.settings.resolved_network_home_url if network else self.settings.home_url
        return self._append_path(self.set_url_scheme(untrailingslashit(base), scheme), path)

    def trailing_slash(self, path: str) -> str:
        if self.settings.trailing_slash:
            return trailingslashit(path)
        return untrailingslashit(path)

    # -------------------------
    # Filtered URL generators
    # -------------------------

    def unfiltered_site_url(self, path: str = "", scheme: Optional[str] = None) -> str:
        base = self.set_url_scheme(untrailingslashit(self.settings.resolved_site_url), scheme)
        return self._append_path(base, path)

    def site_url(self, path: str = "", scheme: Optional[str] = None) -> str:
        url = self.unfiltered_site_url(path, scheme)
        if self.translator is not None:
            url = self.translator.filter_site_url(url, path, scheme, self.context)
        return url

    def network_site_url(self, path: str = "", scheme: Optional[str] = None) -> str:
        if not self.settings.multisite:
            return self.site_url(path, scheme)

        base = self.set_url_scheme(untrailingslashit(self.settings.resolved_network_home_url), scheme)
        url = self._append_path(base, path)
        if self.translator is not None:
            url = self.translator.filter_network_site_url(url, path, scheme, self.context)
        return url

    def login_url(self, redirect: str = "", force_reauth: bool = False) -> str:
        args = {}
        if redirect:
            args["redirect_to"] = redirect
        if force_reauth:
            args["reauth"] = "1"
        return add_query_arg(args, self.site_url("wp-login.php", "login"))

    def logout_url(self, redirect: str = "") -> str:
        args = {"action": "logout"}
        if redirect:
            args["redirect_to"] = redirect
        url = add_query_arg(args, self.site_url("wp-login.php", "login"))
        url = self.tokens.nonce_url(url, "log-out")
        if self.translator is not None:
            url = self.translator.filter_logout_url(url, redirect)
        return url

    def lostpassword_url(self, redirect: str = "") -> str:
        url = self.network_site_url("wp-login.php?action=lostpassword", "login")
        if redirect:
            url = add_query_arg({"redirect_to": redirect}, url)
        return url

    def registration_url(self) -> str:
        return self.site_url("wp-login.php?action=register", "login")

    def signup_url(self) -> str:
        return self.network_site_url("wp-signup.php")

    def activation_url(self, key: str = "") -> str:
        url = self.network_site_url("wp-activate.php")
        if key:
            url = add_query_arg({"key": key}, url)
        return url
