from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence, Tuple

import structlog

from ..actions.base_action import Action
from ..actions.registry import ActionRegistry
from .rewrite import QUERY_VAR

logger = structlog.get_logger(__name__)

# (hook, callback) pairs meaningless on an action page
SUPPRESSED_CALLBACKS: Tuple[Tuple[str, str], ...] = (
    ("wp_head", "feed_links"),
    ("wp_head", "feed_links_extra"),
    ("wp_head", "rsd_link"),
    ("wp_head", "wlwmanifest_link"),
    ("wp_head", "parent_post_rel_link"),
    ("wp_head", "start_post_rel_link"),
    ("wp_head", "adjacent_posts_rel_link_wp_head"),
    ("wp_head", "rel_canonical"),
    ("template_redirect", "redirect_canonical"),
)


@dataclass
class ContentQuery:
    """The host's content query, reduced to the flags an action page touches."""

    is_main_query: bool = True
    is_page: bool = False
    is_singular: bool = False
    is_single: bool = False
    is_home: bool = False
    vars: Dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        self.vars[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.vars.get(key, default)


@dataclass
class Post:
    ID: int
    post_type: str = "page"
    post_content: str = ""
    post_title: str = ""
    post_name: str = ""
    ping_status: str = "closed"
    comment_status: str = "closed"
    filter: str = "raw"


def shortcode_for(action: Action) -> str:
    return f'[theme-my-login action="{action.name}"]'


class RequestClassifier:
    """
    Decides which action, if any, the current request is for, and bends
    the content query around it. With no active action every method is a
    pass-through.
    """

    def __init__(self, registry: ActionRegistry, query_vars: Optional[Mapping[str, Any]] = None):
        self.registry = registry
        self.query_vars = dict(query_vars or {})
        self._active_action = self._resolve()

    def _resolve(self) -> Optional[Action]:
        value = self.query_vars.get(QUERY_VAR)
        if not isinstance(value, str) or not value:
            return None
        return self.registry.get(value)

    @property
    def active_action(self) -> Optional[Action]:
        return self._active_action

    def is_action(self, name: Optional[str] = None) -> bool:
        if self._active_action is None:
            return False
        if name is None:
            return True
        return self._active_action.name == name

    def init(self, callbacks: MutableMapping[str, List[str]]) -> MutableMapping[str, List[str]]:
        """Drop the head/redirect callbacks that make no sense on an action page."""
        if not self.is_action():
            return callbacks

        for hook, callback in SUPPRESSED_CALLBACKS:
            registered = callbacks.get(hook)
            if registered and callback in registered:
                registered.remove(callback)
        return callbacks

    def parse_query(self, query: ContentQuery) -> ContentQuery:
        if not self.is_action() or not query.is_main_query:
            return query

        # A page, not a post, and not the front page
        query.is_page = True
        query.is_singular = True
        query.is_single = False
        query.is_home = False

        # Nothing to count and nothing to fetch
        query.set("no_found_rows", True)
        query.set("post__in", [0])
        return query

    def the_posts(self, posts: Sequence[Post], query: ContentQuery) -> List[Post]:
        action = self._active_action
        if action is None or not query.is_main_query:
            return list(posts)

        return [
            Post(
                ID=0,
                post_type="page",
                post_content=shortcode_for(action),
                post_title=action.title,
                post_name=action.slug,
            )
        ]

    def page_templates(self) -> List[str]:
        if self._active_action is None:
            return []
        slug = self._active_action.name
        return [
            f"{slug}.php",
            f"theme-my-login-{slug}.php",
            f"tml-{slug}.php",
            f"page-{slug}.php",
            "theme-my-login.php",
            "tml.php",
            "page.php",
        ]

    def body_class(self, classes: Sequence[str]) -> List[str]:
        classes = list(classes)
        if self._active_action is not None:
            classes.append("tml-action")
            classes.append(f"tml-action-{self._active_action.name}")
        return classes

    def filter_edit_post_link(self, link: str, post_id: int) -> str:
        # The placeholder post has nothing to edit
        if self.is_action() and post_id == 0:
            return ""
        return link
