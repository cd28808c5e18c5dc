from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..actions.registry import ActionRegistry
from ..routing.host import HostUrls
from .dependencies import get_host, get_registry
from .schemas import UrlResponse

router = APIRouter(prefix="/internal/urls", tags=["internal-urls"])


@router.get("/site", response_model=UrlResponse)
async def site_url(
    path: str = Query(default=""),
    scheme: Optional[str] = Query(default=None),
    host: HostUrls = Depends(get_host),
) -> UrlResponse:
    url = host.site_url(path, scheme)
    return UrlResponse(url=url, translated=url != host.unfiltered_site_url(path, scheme))


@router.get("/network-site", response_model=UrlResponse)
async def network_site_url(
    path: str = Query(default=""),
    scheme: Optional[str] = Query(default=None),
    host: HostUrls = Depends(get_host),
) -> UrlResponse:
    return UrlResponse(url=host.network_site_url(path, scheme))


@router.get("/logout", response_model=UrlResponse)
async def logout_url(
    redirect: str = Query(default=""),
    host: HostUrls = Depends(get_host),
) -> UrlResponse:
    return UrlResponse(url=host.logout_url(redirect), action="logout")


@router.get("/action/{name}", response_model=UrlResponse)
async def action_url(
    name: str,
    scheme: Optional[str] = Query(default="login"),
    network: Optional[bool] = Query(default=None),
    registry: ActionRegistry = Depends(get_registry),
    host: HostUrls = Depends(get_host),
) -> UrlResponse:
    action = registry.get(name)
    if action is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown action: {name}")
    return UrlResponse(url=action.get_url(host, scheme, network), action=action.name)
