"""
CLI Prove and Render Commands

Regenerate proofs from a saved tree dump without the original inputs.

Usage:
    merkle-commit prove tree.json --index 0
    merkle-commit prove tree.json --index 0 --index 2      # multiproof
    merkle-commit prove tree.json --value Alice
    merkle-commit render tree.json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from merkle_core.schemas.errors import MerkleCommitException

from merkle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    load_tree_file,
    parse_leaf,
)


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """Handle prove command."""
    try:
        tree = load_tree_file(args.dump)

        if args.value is not None:
            if tree.types is None:
                print("Error: dump has no leaf encoding; use --index", file=sys.stderr)
                return EXIT_RUNTIME_ERROR
            indices = [tree.leaf_lookup(parse_leaf(args.value, tree.types, args.separator))]
        else:
            indices = args.index or [0]

        if len(indices) > 1:
            document = tree.get_multiproof(indices).to_document(tree.algorithm).model_dump(mode="json")
        else:
            document = tree.get_proof(indices[0]).to_document(tree.algorithm).model_dump(mode="json")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleCommitException as e:
        logger.debug(f"Prove failed: {e!r}")
        if args.json:
            print(json.dumps(e.to_error_model().model_dump(), indent=2))
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(document, indent=2))
    elif "steps" in document:
        print(f"Merkle Root: {tree.root_hex}")
        print(f"Proof for index {indices[0]}: {json.dumps([s['sibling'] for s in document['steps']], indent=2)}")
    else:
        print(f"Merkle Root: {tree.root_hex}")
        print(f"Multiproof for indices {indices}: {json.dumps(document, indent=2)}")
    return EXIT_SUCCESS


def render_cmd(args: Namespace) -> int:
    """Handle render command."""
    try:
        tree = load_tree_file(args.dump)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except MerkleCommitException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    print(tree.render())
    return EXIT_SUCCESS
