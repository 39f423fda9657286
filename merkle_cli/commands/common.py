"""
Shared helpers for CLI commands: leaf parsing, dump files, tree config.
"""

from __future__ import annotations

import copy
import json
from argparse import Namespace
from pathlib import Path
from typing import Any

from merkle_core.config import RuntimeConfig, TreeConfig
from merkle_core.encoding import coerce_from_string, normalize_types
from merkle_core.merkle import MerkleTree


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def parse_types(text: str) -> tuple[str, ...]:
    """Split a comma-separated type signature ("address,uint256")."""
    return normalize_types([t.strip() for t in text.split(",") if t.strip()])


def parse_leaf(text: str, types: tuple[str, ...], separator: str = ",") -> list[Any]:
    """
    Turn one command-line leaf argument into a typed field list.

    With a single-field signature the whole argument is the value; otherwise
    it is split on ``separator`` into exactly len(types) fields.
    """
    if len(types) == 1:
        parts = [text]
    else:
        parts = text.split(separator, len(types) - 1)
    # Fewer parts than types is left for the encoder to reject
    return [coerce_from_string(part, type_name) for part, type_name in zip(parts, types)]


def tree_config_from_args(args: Namespace) -> TreeConfig:
    """Start from the loaded configuration and apply command-line overrides."""
    runtime: RuntimeConfig = getattr(args, "cli_config", None) or RuntimeConfig()
    tree = copy.deepcopy(runtime.tree)
    if getattr(args, "algorithm", None):
        tree.hash_algorithm = args.algorithm
    if getattr(args, "encoder", None):
        tree.encoder = args.encoder
    if getattr(args, "no_sort", False):
        tree.sort_leaves = False
    if getattr(args, "dedupe", False):
        tree.deduplicate = True
    return tree


def load_tree_file(path: str | Path) -> MerkleTree:
    """Load and validate a tree dump written by ``build --dump-out``."""
    with open(path, "r", encoding="utf-8") as f:
        return MerkleTree.load(f.read())


def write_json(path: str | Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
