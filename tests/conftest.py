"""Shared fixtures for plugtree tests."""

import pytest

from plugtree.config import PlugtreeSettings, clear_settings_instance, set_settings_instance
from plugtree.profiler import Profiler, clear_profiler, set_profiler


@pytest.fixture(autouse=True)
def isolated_state():
    """Give every test default settings and an empty, inactive profiler."""
    set_settings_instance(PlugtreeSettings())
    set_profiler(Profiler())
    yield
    clear_profiler()
    clear_settings_instance()


@pytest.fixture
def profiler():
    """Install an active profiler."""
    active = Profiler(active=True)
    set_profiler(active)
    return active
