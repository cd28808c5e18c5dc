"""
Pytest configuration and shared fixtures for all tests.
"""
import os
import sys

import pytest

# Add parent directory to path for proper imports
parent_path = os.path.join(os.path.dirname(__file__), "..")
if parent_path not in sys.path:
    sys.path.insert(0, parent_path)

from authroutes.actions import Action, ActionRegistry, build_default_registry
from authroutes.config import RouterSettings
from authroutes.routing import build_host_urls
from authroutes.routing.context import RequestContext
from authroutes.utils.crypto import TokenService

ALL_ACTIONS = ("login", "logout", "register", "lostpassword", "resetpass", "activate", "signup")


def make_settings(**overrides) -> RouterSettings:
    values = dict(
        home_url="http://example.com",
        use_permalinks=True,
        multisite=False,
        secret_key="test-secret",
        log_level="WARNING",
    )
    values.update(overrides)
    return RouterSettings(**values)


def make_registry(names=ALL_ACTIONS) -> ActionRegistry:
    return ActionRegistry(Action(name, title=name.title()) for name in names)


@pytest.fixture
def settings():
    """Permalink-mode single-site settings."""
    return make_settings()


@pytest.fixture
def query_settings():
    """Query-string mode settings."""
    return make_settings(use_permalinks=False)


@pytest.fixture
def registry():
    """Every built-in action, registered directly."""
    return make_registry()


@pytest.fixture
def default_registry(settings):
    return build_default_registry(settings, overrides={})


@pytest.fixture
def tokens():
    """Token service with a frozen clock."""
    return TokenService("test-secret", lifetime=86400, clock=lambda: 1_700_000_000.0)


@pytest.fixture
def front_context():
    """A plain front-end GET request."""
    return RequestContext(path="/", method="GET")


@pytest.fixture
def host(settings, registry, front_context, tokens):
    return build_host_urls(settings, registry, front_context, tokens)


@pytest.fixture
def query_host(query_settings, registry, front_context, tokens):
    return build_host_urls(query_settings, registry, front_context, tokens)
