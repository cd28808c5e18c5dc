"""
Actions package.

This package contains:
- The `Action` entity and the `ActionError` hierarchy
- The `ActionRegistry` every other component receives explicitly
- The default login/registration actions and YAML overrides for them
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml

from ..config import RouterSettings
from ..utils.urls import sanitize_key
from .base_action import (
    Action,
    ActionError,
    DuplicateActionError,
    InvalidActionError,
)
from .registry import ActionRegistry

logger = structlog.get_logger(__name__)

OVERRIDABLE_FIELDS = (
    "title",
    "slug",
    "network",
    "show_on_forms",
    "show_in_widget",
    "show_in_nav_menus",
    "show_nav_menu_item",
)

DEFAULT_ACTIONS: Dict[str, Dict[str, Any]] = {
    "login": {
        "title": "Log In",
        "slug": "login",
    },
    "logout": {
        "title": "Log Out",
        "slug": "logout",
        "show_on_forms": False,
        "show_in_widget": False,
    },
    "register": {
        "title": "Register",
        "slug": "register",
    },
    "lostpassword": {
        "title": "Lost Password",
        "slug": "lostpassword",
        "show_in_nav_menus": False,
    },
    "resetpass": {
        "title": "Reset Password",
        "slug": "resetpass",
        "show_on_forms": False,
        "show_in_widget": False,
        "show_in_nav_menus": False,
    },
}

# Only registered on network deployments
NETWORK_ACTIONS: Dict[str, Dict[str, Any]] = {
    "signup": {
        "title": "Sign Up",
        "slug": "signup",
        "show_on_forms": False,
        "show_in_widget": False,
        "show_in_nav_menus": False,
    },
    "activate": {
        "title": "Activate",
        "slug": "activate",
        "show_on_forms": False,
        "show_in_widget": False,
        "show_in_nav_menus": False,
    },
}


def load_action_overrides(path: Optional[str]) -> Dict[str, Dict[str, Any]]:
    """
    Read `name -> {title, slug, ...}` overrides from a YAML file.

    A missing file or an empty document means no overrides. Malformed
    documents are logged and ignored.
    """
    if not path:
        return {}
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("action_overrides_missing", path=str(file_path))
        return {}

    try:
        data = yaml.safe_load(file_path.read_text()) or {}
    except yaml.YAMLError as e:
        logger.warning("action_overrides_invalid", path=str(file_path), error=str(e))
        return {}

    if not isinstance(data, dict):
        logger.warning("action_overrides_invalid", path=str(file_path), error="not a mapping")
        return {}

    overrides: Dict[str, Dict[str, Any]] = {}
    for name, fields in data.items():
        if not isinstance(fields, dict):
            continue
        overrides[sanitize_key(name)] = {k: v for k, v in fields.items() if k in OVERRIDABLE_FIELDS}
    return overrides


def build_default_registry(
    settings: RouterSettings,
    *,
    user_logged_in: bool = False,
    overrides: Optional[Dict[str, Dict[str, Any]]] = None,
) -> ActionRegistry:
    definitions: Dict[str, Dict[str, Any]] = {name: dict(args) for name, args in DEFAULT_ACTIONS.items()}
    if settings.multisite:
        definitions.update({name: dict(args) for name, args in NETWORK_ACTIONS.items()})

    definitions["register"]["show_on_forms"] = settings.users_can_register
    for name in ("login", "register", "lostpassword"):
        definitions[name]["show_nav_menu_item"] = not user_logged_in
    definitions["logout"]["show_nav_menu_item"] = user_logged_in

    if overrides is None:
        overrides = load_action_overrides(settings.actions_file)
    for name, fields in overrides.items():
        definitions.setdefault(name, {}).update(fields)

    registry = ActionRegistry()
    for name, args in definitions.items():
        try:
            registry.register(Action(name, **args))
        except ActionError as e:
            logger.warning("action_skipped", action=name, error=str(e))
    return registry


__all__ = [
    "Action",
    "ActionError",
    "ActionRegistry",
    "DEFAULT_ACTIONS",
    "DuplicateActionError",
    "InvalidActionError",
    "NETWORK_ACTIONS",
    "build_default_registry",
    "load_action_overrides",
]
