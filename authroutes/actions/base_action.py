from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from ..utils.urls import add_query_arg, sanitize_key

if TYPE_CHECKING:
    from ..routing.host import HostUrls


class ActionError(Exception):
    """Base class for all action errors."""


class InvalidActionError(ActionError):
    """The action name normalizes to an empty string."""


class DuplicateActionError(ActionError):
    """An action with the same name is already registered."""


class Action:
    """
    One routable endpoint (login, logout, register, lostpassword, ...).

    The name is fixed at construction. Title, slug and handler may be
    changed through their setters; everything else is a plain attribute.
    """

    def __init__(
        self,
        name: str,
        title: str = "",
        slug: str = "",
        handler: Optional[Callable[[], Any]] = None,
        network: bool = False,
        show_on_forms: Union[bool, str] = True,
        show_in_widget: bool = True,
        show_in_nav_menus: bool = True,
        show_nav_menu_item: Optional[bool] = None,
    ):
        self._name = sanitize_key(name)
        if not self._name:
            raise InvalidActionError(f"Invalid action name: {name!r}")

        self._title = ""
        self._slug = ""
        self._handler: Optional[Callable[[], Any]] = None

        if show_nav_menu_item is None:
            show_nav_menu_item = show_in_nav_menus

        self.title = title
        self.slug = slug
        self.handler = handler

        self.network = bool(network)
        # A string is a custom link label
        self.show_on_forms = show_on_forms
        self.show_in_widget = bool(show_in_widget)
        self.show_in_nav_menus = bool(show_in_nav_menus)
        self.show_nav_menu_item = bool(show_nav_menu_item)

    def __repr__(self) -> str:
        return f"Action(name={self._name!r}, slug={self._slug!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, title: str) -> None:
        self._title = title or ""

    @property
    def slug(self) -> str:
        return self._slug

    @slug.setter
    def slug(self, slug: str) -> None:
        self._slug = slug or self._name

    @property
    def handler(self) -> Optional[Callable[[], Any]]:
        return self._handler

    @handler.setter
    def handler(self, handler: Optional[Callable[[], Any]]) -> None:
        # Non-callables are ignored, the current handler stays
        if callable(handler):
            self._handler = handler

    def get_url(self, host: HostUrls, scheme: Optional[str] = "login", network: Optional[bool] = None) -> str:
        """
        Canonical URL of this action.

        With permalinks: root + trailing-slashed slug. Without: the
        trailing-slashed root with ``?action=<name>``. `network` defaults
        to the action's own flag.
        """
        if network is None:
            network = self.network

        if host.use_permalinks:
            return host.build_url(host.trailing_slash(self.slug), scheme, network)

        url = host.trailing_slash(host.build_url("", scheme, network))
        return add_query_arg({"action": self.name}, url)

    def handle(self) -> Any:
        if not callable(self._handler):
            return None
        return self._handler()
