from __future__ import annotations

from typing import List

import structlog
from fastapi import APIRouter, Depends

from ..actions.registry import ActionRegistry
from ..config import RouterSettings
from ..routing.host import HostUrls
from ..routing.rewrite import RewriteTable
from ..storage.rewrite_store import RewriteRuleStore, flush_rewrite_rules
from .dependencies import get_host, get_registry, get_rewrite_table, get_settings, get_store
from .schemas import ActionResponse, FlushResponse, RewriteRule, RewriteRulesResponse

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/internal/admin", tags=["internal-admin"])


@router.get("/actions", response_model=List[ActionResponse])
async def list_actions(
    registry: ActionRegistry = Depends(get_registry),
    host: HostUrls = Depends(get_host),
) -> List[ActionResponse]:
    return [ActionResponse.from_action(action, host) for action in registry.all()]


@router.get("/rewrite/rules", response_model=RewriteRulesResponse)
async def rewrite_rules(
    settings: RouterSettings = Depends(get_settings),
    table: RewriteTable = Depends(get_rewrite_table),
) -> RewriteRulesResponse:
    return RewriteRulesResponse(
        permalinks=settings.use_permalinks,
        query_vars=table.query_vars,
        rules=[RewriteRule(pattern=pattern, query=query) for pattern, query in table.rules()],
    )


@router.post("/rewrite/flush", response_model=FlushResponse)
async def flush_rules(store: RewriteRuleStore = Depends(get_store)) -> FlushResponse:
    """
    Drop the stored rewrite rules. Call after registering an action,
    changing a slug or toggling permalinks; the next request rebuilds them.
    """
    flush_rewrite_rules(store)
    return FlushResponse(ok=True)
