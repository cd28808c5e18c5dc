from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from ..actions.registry import ActionRegistry
from ..routing.host import HostUrls
from ..routing.nav_menus import ITEM_TYPE, NavMenuAdapter, NavMenuItem
from .dependencies import get_host, get_registry

router = APIRouter(prefix="/internal/nav-menus", tags=["internal-nav-menus"])


def get_adapter(
    registry: ActionRegistry = Depends(get_registry),
    host: HostUrls = Depends(get_host),
) -> NavMenuAdapter:
    return NavMenuAdapter(registry, host)


@router.get("/item-types")
async def item_types(adapter: NavMenuAdapter = Depends(get_adapter)) -> List[Dict[str, Any]]:
    return adapter.available_item_types()


@router.get("/items")
async def items(
    type: str = Query(default=ITEM_TYPE),
    object: str = Query(default=ITEM_TYPE),
    page: int = Query(default=0, ge=0),
    adapter: NavMenuAdapter = Depends(get_adapter),
) -> List[Dict[str, Any]]:
    return adapter.available_items([], type, object, page)


@router.post("/items/setup", response_model=List[NavMenuItem])
async def setup_items(
    menu_items: List[NavMenuItem],
    adapter: NavMenuAdapter = Depends(get_adapter),
) -> List[NavMenuItem]:
    """Resolve saved menu items into what should render for this request."""
    return [adapter.setup_nav_menu_item(item) for item in menu_items]
