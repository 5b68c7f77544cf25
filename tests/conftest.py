"""Conftest for all pytest configuration - fixtures, hooks, and doctest setup."""

import doctest

import pytest

from flatjson.plugins.manager import reset_global_manager
from flatjson.registry import TypeRegistry
from flatjson.settings import get_global_settings
from flatjson.settings import set_global_settings

# Doctest Configuration


def pytest_configure(config):
    """Configure pytest with custom doctest options."""
    doctest.ELLIPSIS_MARKER = "..."


def pytest_collection_modifyitems(items):
    """Automatically mark doctest items with the 'doctest' marker."""
    for item in items:
        if isinstance(item, pytest.DoctestItem):
            item.add_marker(pytest.mark.doctest)


# Fixtures


@pytest.fixture
def registry() -> TypeRegistry:
    """A fresh, empty type registry."""
    return TypeRegistry()


@pytest.fixture(autouse=True)
def _restore_global_state():
    """Keep global settings and hooks from leaking between tests."""
    settings = get_global_settings()
    yield
    set_global_settings(settings)
    reset_global_manager()
