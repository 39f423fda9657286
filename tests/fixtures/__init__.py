"""
Test fixtures for merkle-commit.

Provides known-answer constants and leaf factories.

Usage in tests:
    from fixtures import EXAMPLE_ROOT, make_names
"""

from .known_answers import (
    ALICE_LEAF,
    BOB_LEAF,
    CHARLIE_LEAF,
    BOB_ALICE_NODE,
    EXAMPLE_ROOT,
    EXAMPLE_VALUES,
    make_names,
)

__all__ = [
    "ALICE_LEAF",
    "BOB_LEAF",
    "CHARLIE_LEAF",
    "BOB_ALICE_NODE",
    "EXAMPLE_ROOT",
    "EXAMPLE_VALUES",
    "make_names",
]
