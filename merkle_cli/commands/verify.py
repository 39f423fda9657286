"""
CLI Verify Command

Check an inclusion proof offline against a claimed root. Needs no tree.

Usage:
    merkle-commit verify --root 0x... --value Alice --proof 0x... 0x...
    merkle-commit verify --root 0x... --leaf-hash 0x... --proof 0x...
    merkle-commit verify --root 0x... --value Alice --proof-file proof.json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import dataclass, asdict
from typing import Any

from merkle_core.merkle import Proof, verify, verify_leaf_hash
from merkle_core.schemas.errors import MerkleCommitException

from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    parse_leaf,
    parse_types,
    tree_config_from_args,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    root: str = ""
    hash_algorithm: str = ""
    proof_length: int = 0
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _load_proof(args: Namespace) -> Any:
    if args.proof_file:
        with open(args.proof_file, "r", encoding="utf-8") as f:
            text = f.read()
        data = json.loads(text)
        if isinstance(data, list):
            return data
        return Proof.from_document(data)
    return args.proof or []


def verify_cmd(args: Namespace) -> int:
    """Handle verify command."""
    tree_config = tree_config_from_args(args)

    try:
        proof = _load_proof(args)
        if args.leaf_hash:
            valid = verify_leaf_hash(args.leaf_hash, proof, args.root, tree_config.hash_algorithm)
        else:
            types = parse_types(args.types)
            value = parse_leaf(args.value, types, args.separator)
            valid = verify(value, proof, args.root, types, tree_config.hash_algorithm, tree_config.encoder)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleCommitException as e:
        logger.debug(f"Verify failed: {e!r}")
        if args.json:
            print(json.dumps(e.to_error_model().model_dump(), indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        root=args.root,
        hash_algorithm=tree_config.hash_algorithm,
        proof_length=len(proof),
        valid=valid,
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"Proof is valid: {valid}")

    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
