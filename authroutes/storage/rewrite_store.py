from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional, Protocol

import redis
import structlog

from ..routing.rewrite import RewriteTable

logger = structlog.get_logger(__name__)

DEFAULT_KEY = "authroutes:rewrite_rules"


class RewriteRuleStore(Protocol):
    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, rules: Dict[str, Any]) -> None: ...

    def flush(self) -> None: ...


class MemoryRewriteRuleStore:
    """In-process rule table, used when no Redis URL is configured."""

    def __init__(self) -> None:
        self._rules: Optional[Dict[str, Any]] = None

    def load(self) -> Optional[Dict[str, Any]]:
        return self._rules

    def save(self, rules: Dict[str, Any]) -> None:
        self._rules = json.loads(json.dumps(rules))

    def flush(self) -> None:
        self._rules = None


class RedisRewriteRuleStore:
    """Rule table kept as one JSON document in Redis, shared by all workers."""

    def __init__(self, client: redis.Redis, key: str = DEFAULT_KEY):
        self.redis = client
        self.key = key

    @classmethod
    def from_url(cls, url: str, key: str = DEFAULT_KEY) -> "RedisRewriteRuleStore":
        return cls(redis.Redis.from_url(url, decode_responses=True), key)

    def load(self) -> Optional[Dict[str, Any]]:
        value = self.redis.get(self.key)
        if not value:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("rewrite_rules_corrupt", key=self.key)
            return None

    def save(self, rules: Dict[str, Any]) -> None:
        self.redis.set(self.key, json.dumps(rules))

    def flush(self) -> None:
        self.redis.delete(self.key)


def load_or_build(store: RewriteRuleStore, build: Callable[[], RewriteTable]) -> RewriteTable:
    """
    The persisted table, or a freshly built one when the store is empty.
    A flushed store heals itself here on the next request.
    """
    cached = store.load()
    if cached:
        return RewriteTable.from_dict(cached)

    table = build()
    store.save(table.to_dict())
    logger.info("rewrite_rules_rebuilt", rules=len(table.rules()))
    return table


def flush_rewrite_rules(store: RewriteRuleStore) -> None:
    """Empty the stored rules so they are rebuilt on the next page load."""
    store.flush()
    logger.info("rewrite_rules_flushed")
