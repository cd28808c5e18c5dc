from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import unquote

import structlog

from ..actions.registry import ActionRegistry
from ..config import RouterSettings
from ..utils.urls import parse_query

logger = structlog.get_logger(__name__)

QUERY_VAR = "action"
DEFAULT_TAG_REGEX = "([^/]+)"

_MATCH_REF_RE = re.compile(r"\$matches\[(\d+)\]")

Rule = Tuple[str, str]


class RewriteTable:
    """
    The host's URL dispatcher: ordered pattern -> query-string rules and
    the set of query variables it will hand on to the request.
    """

    def __init__(self) -> None:
        self._top: Dict[str, str] = {}
        self._bottom: Dict[str, str] = {}
        self.rewrite_tags: Dict[str, str] = {}

    @property
    def query_vars(self) -> List[str]:
        return list(self.rewrite_tags)

    def register_rewrite_var(self, name: str, regex: str = DEFAULT_TAG_REGEX) -> None:
        self.rewrite_tags[name] = regex

    def add_rewrite_rule(self, pattern: str, query: str, priority: str = "bottom") -> None:
        if priority == "top":
            self._bottom.pop(pattern, None)
            self._top[pattern] = query
        else:
            self._top.pop(pattern, None)
            self._bottom[pattern] = query

    def rules(self) -> List[Rule]:
        return list(self._top.items()) + list(self._bottom.items())

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Query vars of the first rule matching `path`, or None."""
        requested = unquote(path).lstrip("/")
        for pattern, query in self.rules():
            try:
                m = re.match(pattern, requested)
            except re.error:
                logger.warning("rewrite_rule_invalid", pattern=pattern)
                continue
            if not m:
                continue
            groups = (m.group(0),) + m.groups()

            def _substitute(ref: re.Match) -> str:
                index = int(ref.group(1))
                return (groups[index] or "") if index < len(groups) else ""

            _, _, query_string = _MATCH_REF_RE.sub(_substitute, query).partition("?")
            return parse_query(query_string)
        return None

    def parse_request(self, path: str, query_params: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Resolve the registered query vars for a request. Values from the
        request's own query string win over the ones a rule produced.
        """
        query_params = query_params or {}
        perma_vars = self.match(path) or {}

        resolved: Dict[str, str] = {}
        for var in self.query_vars:
            if var in query_params:
                resolved[var] = query_params[var]
            elif var in perma_vars:
                resolved[var] = perma_vars[var]
        return resolved

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tags": dict(self.rewrite_tags),
            "top": [list(rule) for rule in self._top.items()],
            "bottom": [list(rule) for rule in self._bottom.items()],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RewriteTable":
        table = cls()
        for name, regex in (data.get("tags") or {}).items():
            table.register_rewrite_var(name, regex)
        for pattern, query in data.get("top") or []:
            table.add_rewrite_rule(pattern, query, "top")
        for pattern, query in data.get("bottom") or []:
            table.add_rewrite_rule(pattern, query, "bottom")
        return table


class RewriteInstaller:
    """
    Turns the registry into dispatcher rules. A pure function of the
    registry and the permalink mode; does nothing when permalinks are off.
    """

    def __init__(self, registry: ActionRegistry, settings: RouterSettings):
        self.registry = registry
        self.settings = settings

    def add_rewrite_tags(self, table: RewriteTable) -> None:
        if not self.settings.use_permalinks:
            return
        table.register_rewrite_var(QUERY_VAR, DEFAULT_TAG_REGEX)

    def add_rewrite_rules(self, table: RewriteTable) -> None:
        if not self.settings.use_permalinks:
            return
        for action in self.registry.all():
            table.add_rewrite_rule(
                f"{action.slug}/?$",
                f"index.php?{QUERY_VAR}={action.name}",
                "top",
            )

    def install(self, table: Optional[RewriteTable] = None) -> RewriteTable:
        table = table if table is not None else RewriteTable()
        self.add_rewrite_tags(table)
        self.add_rewrite_rules(table)
        logger.info("rewrite_rules_installed", rules=len(table.rules()), permalinks=self.settings.use_permalinks)
        return table
