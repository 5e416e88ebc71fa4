"""Root conftest — shared fixtures for every test package.

Invariants:
    - healthy_dump analyzes clean: every check passes on it
    - Settings cache cleared around each test so CLUSTERLINT_* monkeypatches apply
"""

import pytest

from builders import healthy_cluster_dump
from clusterlint.config import get_settings


@pytest.fixture
def healthy_dump() -> dict:
    return healthy_cluster_dump()


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
