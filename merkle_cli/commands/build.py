"""
CLI Build Command

Build a tree from leaf arguments, print its root and the proof for one
leaf, and check that proof.

Usage:
    merkle-commit build Alice Bob Charlie [--index 0] [--dump-out tree.json] [--json]
    merkle-commit build 0xabc...,100 0xdef...,250 --types address,uint256
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict, field
from typing import Any

from merkle_core.merkle import MerkleTree
from merkle_core.schemas.errors import MerkleCommitException

from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    parse_leaf,
    parse_types,
    tree_config_from_args,
    write_json,
)


logger = logging.getLogger(__name__)


@dataclass
class BuildSummary:
    """Summary of a tree build for CLI output."""
    root: str = ""
    leaf_count: int = 0
    hash_algorithm: str = ""
    index: int = 0
    value: list[Any] = field(default_factory=list)
    proof: list[str] = field(default_factory=list)
    valid: bool = False
    dump_path: str | None = None
    dump: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["dump_path"] is None:
            del d["dump_path"]
        if d["dump"] is None:
            del d["dump"]
        return d


def build_cmd(args: Namespace) -> int:
    """Handle build command."""
    try:
        types = parse_types(args.types)
        values = [parse_leaf(leaf, types, args.separator) for leaf in args.leaves]
        tree = MerkleTree.of(values, types, config=tree_config_from_args(args))
        proof = tree.get_proof(args.index)
    except MerkleCommitException as e:
        logger.debug(f"Build failed: {e!r}")
        if args.json:
            print(json.dumps(e.to_error_model().model_dump(), indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    value = values[args.index]
    valid = tree.verify_proof(value, proof)
    dump = tree.dump().model_dump(mode="json")

    summary = BuildSummary(
        root=tree.root_hex,
        leaf_count=tree.leaf_count,
        hash_algorithm=tree.algorithm.name,
        index=args.index,
        value=value,
        proof=proof.to_hex_list(),
        valid=valid,
        dump_path=args.dump_out,
        dump=dump if args.show_dump else None,
    )

    if args.dump_out:
        write_json(args.dump_out, dump)
        logger.info(f"Wrote tree dump to {args.dump_out}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"Merkle Root: {summary.root}")
        print(f"Proof for {value!r}: {json.dumps(summary.proof, indent=2)}")
        if args.show_dump:
            print(f"Full Tree Dump: {json.dumps(dump, indent=2)}")
        if args.dump_out:
            print(f"Tree dump written to: {args.dump_out}")
        print(f"Proof is valid: {valid}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
