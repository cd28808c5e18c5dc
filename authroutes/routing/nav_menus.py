from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

import structlog
from pydantic import BaseModel, Field

from ..actions.base_action import Action
from ..actions.registry import ActionRegistry
from .classifier import RequestClassifier
from .context import RequestContext
from .host import HostUrls

logger = structlog.get_logger(__name__)

ITEM_TYPE = "tml_action"
ITEM_TYPE_LABEL = "TML Action"


class NavMenuItem(BaseModel):
    ID: int = 0
    db_id: int = 0
    menu_item_parent: int = 0
    post_parent: int = 0
    type: str = "custom"
    type_label: str = ""
    object: str = ""
    object_id: Union[int, str] = 0
    title: str = ""
    url: str = ""
    target: str = ""
    attr_title: str = ""
    description: str = ""
    classes: List[str] = Field(default_factory=list)
    xfn: str = ""
    invalid: bool = False


class NavMenuAdapter:
    """Offers actions as menu items and resolves saved items at render time."""

    def __init__(self, registry: ActionRegistry, host: HostUrls):
        self.registry = registry
        self.host = host

    def available_item_types(self, item_types: Optional[List[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
        item_types = list(item_types or [])
        item_types.append({
            "title": "Theme My Login Actions",
            "type_label": "Theme My Login Action",
            "type": ITEM_TYPE,
            "object": ITEM_TYPE,
        })
        return item_types

    def available_items(
        self,
        items: Optional[List[Dict[str, Any]]] = None,
        type: str = ITEM_TYPE,
        object: str = ITEM_TYPE,
        page: int = 0,
    ) -> List[Dict[str, Any]]:
        items = list(items or [])
        if type != ITEM_TYPE or page != 0:
            return items

        for action in self.registry.all():
            if not action.show_in_nav_menus:
                continue
            items.append({
                "id": f"{ITEM_TYPE}-{action.name}",
                "title": action.title,
                "type": ITEM_TYPE,
                "type_label": ITEM_TYPE_LABEL,
                "object": action.name,
                "object_id": action.name,
                "url": action.get_url(self.host, network=False),
            })
        return items

    def setup_nav_menu_item(
        self,
        menu_item: Union[Action, NavMenuItem],
        context: Optional[RequestContext] = None,
    ) -> NavMenuItem:
        context = context or self.host.context

        # Item to be added
        if isinstance(menu_item, Action):
            return NavMenuItem(
                type=ITEM_TYPE,
                type_label=ITEM_TYPE_LABEL,
                object=menu_item.name,
                object_id=-1,  # Needed for AJAX save to work
                title=menu_item.title,
                url=menu_item.get_url(self.host),
            )

        if menu_item.type != ITEM_TYPE:
            return menu_item

        # Existing menu item
        item = menu_item.model_copy(deep=True)
        item.object_id = item.ID
        item.type_label = ITEM_TYPE_LABEL

        action = self.registry.get(item.object)
        if action is None:
            logger.debug("nav_menu_item_unknown_action", item=item.ID, action=item.object)
            item.invalid = True
            return item

        item.url = action.get_url(self.host)
        if action.name == "logout":
            item.url = self.host.tokens.nonce_url(item.url, "log-out")
        if not context.is_admin and not action.show_nav_menu_item:
            item.invalid = True
        return item

    def setup_nav_menu_items(
        self,
        menu_items: Sequence[Union[Action, NavMenuItem]],
        context: Optional[RequestContext] = None,
    ) -> List[NavMenuItem]:
        """Resolve a whole menu, dropping items that should not render."""
        resolved = [self.setup_nav_menu_item(item, context) for item in menu_items]
        return [item for item in resolved if not item.invalid]

    def nav_menu_css_class(
        self,
        classes: Sequence[str],
        item: NavMenuItem,
        classifier: RequestClassifier,
    ) -> List[str]:
        classes = list(classes)
        if item.type == ITEM_TYPE and classifier.is_action(item.object):
            classes.append("current-menu-item")
            classes.append("current_page_item")
        return classes
