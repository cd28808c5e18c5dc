from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..accounts import FormResult
from ..actions.base_action import Action
from ..routing.host import HostUrls


class ActionResponse(BaseModel):
    name: str
    title: str
    slug: str
    url: str
    network: bool
    show_on_forms: Union[bool, str]
    show_in_widget: bool
    show_in_nav_menus: bool
    show_nav_menu_item: bool

    @classmethod
    def from_action(cls, action: Action, host: HostUrls) -> "ActionResponse":
        return cls(
            name=action.name,
            title=action.title,
            slug=action.slug,
            url=action.get_url(host),
            network=action.network,
            show_on_forms=action.show_on_forms,
            show_in_widget=action.show_in_widget,
            show_in_nav_menus=action.show_in_nav_menus,
            show_nav_menu_item=action.show_nav_menu_item,
        )


class FormErrorResponse(BaseModel):
    code: str
    message: str


class FormResultResponse(BaseModel):
    """Submitted form outcome; the chosen password is never echoed back."""

    ok: bool
    errors: List[FormErrorResponse] = Field(default_factory=list)
    user_login: Optional[str] = None
    user_email: Optional[str] = None
    notification: Optional[Dict[str, str]] = None
    auto_login: bool = False

    @classmethod
    def from_result(cls, result: FormResult) -> "FormResultResponse":
        return cls(
            ok=result.ok,
            errors=[FormErrorResponse(code=e.code, message=e.message) for e in result.errors],
            user_login=result.user_login,
            user_email=result.user_email,
            notification=result.notification,
            auto_login=result.auto_login and result.ok,
        )


class ActionPageResponse(BaseModel):
    action: str
    post: Dict[str, Any]
    query: Dict[str, Any]
    username_label: str = ""
    form: Optional[FormResultResponse] = None
    body_class: List[str] = Field(default_factory=list)
    templates: List[str] = Field(default_factory=list)
    head_callbacks: Dict[str, List[str]] = Field(default_factory=dict)


class RewriteRule(BaseModel):
    pattern: str
    query: str


class RewriteRulesResponse(BaseModel):
    permalinks: bool
    query_vars: List[str]
    rules: List[RewriteRule]


class FlushResponse(BaseModel):
    ok: bool


class UrlResponse(BaseModel):
    url: str
    translated: bool = False
    action: Optional[str] = None
