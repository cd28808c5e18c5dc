from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from starlette.requests import Request

from ..config import RouterSettings

# Query arguments the host's live preview adds to every previewed request
CUSTOMIZE_PREVIEW_ARGS = ("customize_changeset_uuid", "customize_messenger_channel")


@dataclass(frozen=True)
class RequestContext:
    """
    What the current request is, computed once and passed explicitly to
    everything that must behave differently in admin, preview or on the
    host's own login endpoint.
    """

    path: str = "/"
    method: str = "GET"
    scheme: str = "http"
    is_admin: bool = False
    is_customize_preview: bool = False
    query: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, Any] = field(default_factory=dict)

    @property
    def pagenow(self) -> str:
        return posixpath.basename(self.path.rstrip("/"))

    @property
    def is_post_request(self) -> bool:
        return self.method.upper() == "POST"

    @property
    def is_get_request(self) -> bool:
        return self.method.upper() == "GET"

    @property
    def is_wp_login(self) -> bool:
        return self.pagenow == "wp-login.php"

    @property
    def is_ssl(self) -> bool:
        return self.scheme == "https"

    def get_request_value(self, key: str, type: str = "any") -> Any:
        """
        Value of `key` from the POST body, the query string, or either
        (POST first) when `type` is "any".
        """
        type = type.upper()
        sources: Dict[str, Mapping[str, Any]] = {"POST": self.form, "GET": self.query}
        order = [type] if type in sources else ["POST", "GET"]

        value: Any = ""
        for name in order:
            source = sources[name]
            if source and key in source:
                value = source[key]
                break
        return value

    @classmethod
    def from_request(
        cls,
        request: Request,
        settings: RouterSettings,
        form: Optional[Mapping[str, Any]] = None,
    ) -> "RequestContext":
        path = request.url.path or "/"
        query = dict(request.query_params)
        admin_prefix = "/" + settings.admin_path.strip("/")
        return cls(
            path=path,
            method=request.method,
            scheme=request.url.scheme,
            is_admin=path == admin_prefix or path.startswith(admin_prefix + "/"),
            is_customize_preview=any(arg in query for arg in CUSTOMIZE_PREVIEW_ARGS),
            query=query,
            form=dict(form or {}),
        )
