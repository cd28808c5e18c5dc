from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

import structlog

from .base_action import Action, DuplicateActionError

logger = structlog.get_logger(__name__)


class ActionRegistry:
    """Ordered, name-keyed store of actions. Built once per request."""

    def __init__(self, actions: Iterable[Action] = ()):
        self._actions: Dict[str, Action] = {}
        for action in actions:
            self.register(action)

    def register(self, action: Action) -> Action:
        if action.name in self._actions:
            raise DuplicateActionError(f"Action already registered: {action.name}")
        self._actions[action.name] = action
        logger.debug("action_registered", action=action.name, slug=action.slug)
        return action

    def unregister(self, name: str) -> Optional[Action]:
        return self._actions.pop(name, None)

    def get(self, name: Optional[str]) -> Optional[Action]:
        if not name:
            return None
        return self._actions.get(name)

    def exists(self, name: Optional[str]) -> bool:
        return self.get(name) is not None

    def all(self) -> List[Action]:
        return list(self._actions.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.exists(name)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._actions)
