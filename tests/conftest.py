"""
Pytest configuration and shared fixtures for merkle-commit tests.

This conftest.py:
1. Adds project root and tests root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

from fixtures import EXAMPLE_VALUES  # noqa: E402
from merkle_core.crypto.hashing import get_hash_algorithm  # noqa: E402
from merkle_core.merkle import MerkleTree  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sha256_alg():
    """The default hash algorithm."""
    return get_hash_algorithm("sha256")


@pytest.fixture
def names():
    """The three-name example leaves (fresh copy per test)."""
    return [list(v) for v in EXAMPLE_VALUES]


@pytest.fixture
def names_tree(names):
    """Tree over the three-name example."""
    return MerkleTree.of(names, ["string"])


@pytest.fixture
def clean_env(monkeypatch):
    """Remove MERKLE_* variables so config tests see defaults."""
    for key in list(os.environ):
        if key.startswith("MERKLE_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
