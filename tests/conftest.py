"""
Pytest configuration and shared fixtures for Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Resets the process-wide default configuration around every test
3. Provides commonly-used trees and blocks as fixtures
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from core.config.runtime import set_default_config  # noqa: E402
from core.crypto.hashing import Hasher  # noqa: E402
from core.merkle import build_tree  # noqa: E402


_MERKLE_ENV_VARS = (
    "MERKLE_HASH_ALGORITHM",
    "MERKLE_PADDING_BLOCK",
    "MERKLE_COMBINE_ORDER",
    "MERKLE_ENCODING",
    "MERKLE_LOG_LEVEL",
    "MERKLE_LOG_FILE",
)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def clean_default_config(monkeypatch):
    """Run every test against built-in defaults, not the caller's environment."""
    for name in _MERKLE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def hasher():
    """Default SHA-256 hash primitive."""
    return Hasher()


@pytest.fixture
def abc_blocks():
    """Three blocks; padded to four with '_'."""
    return ["A", "B", "C"]


@pytest.fixture
def abc_tree(abc_blocks):
    """Tree over ['A', 'B', 'C'] with default settings."""
    return build_tree(abc_blocks)


@pytest.fixture
def eight_blocks():
    """Eight distinct blocks (no padding needed)."""
    return [f"block-{i}" for i in range(8)]


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
