"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli build <leaf1> <leaf2> ... [--types string] [--index 0] [--json]
    python -m merkle_cli prove <dump.json> [--index N ...] [--value V] [--json]
    python -m merkle_cli verify --root R (--value V | --leaf-hash H) [--proof P ...]
    python -m merkle_cli render <dump.json>
    python -m merkle_cli config [--init|--show]

Environment Variables:
    MERKLE_HASH_ALGORITHM       Hash algorithm (default: sha256)
    MERKLE_ENCODER              Leaf encoder (default: typed)
    MERKLE_SORT_LEAVES          Sort leaf hashes (default: true)
    MERKLE_DEDUPLICATE          Drop repeated leaves (default: false)
    MERKLE_LOG_LEVEL            Log level (default: INFO)
    MERKLE_LOG_FILE             Log file path
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from merkle_core.config import RuntimeConfig, get_default_config_template
from merkle_core.crypto import available_hash_algorithms
from merkle_core.encoding import available_encoders

from merkle_cli import __version__
from merkle_cli.commands import build, prove, verify
from merkle_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--types", "-t",
        type=str,
        default="string",
        help="Comma-separated leaf type signature (default: string)",
    )
    parser.add_argument(
        "--separator",
        type=str,
        default=",",
        help="Field separator inside a multi-field leaf argument (default: ',')",
    )
    parser.add_argument(
        "--algorithm", "-a",
        type=str,
        choices=available_hash_algorithms(),
        default=None,
        help="Hash algorithm (default: from config or sha256)",
    )
    parser.add_argument(
        "--encoder", "-e",
        type=str,
        choices=available_encoders(),
        default=None,
        help="Leaf encoder (default: from config or typed)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle-commit",
        description="Build canonical Merkle trees, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and prove one leaf",
        description="Build a Merkle tree from leaf arguments, print the root and a proof.",
    )
    build_parser.add_argument("leaves", nargs="+", help="Leaf values, one per argument")
    _add_tree_options(build_parser)
    build_parser.add_argument(
        "--index", "-i",
        type=int,
        default=0,
        help="Input index of the leaf to prove (default: 0)",
    )
    build_parser.add_argument(
        "--no-sort",
        action="store_true",
        default=False,
        help="Keep caller order instead of sorting leaf hashes",
    )
    build_parser.add_argument(
        "--dedupe",
        action="store_true",
        default=False,
        help="Drop repeated leaf values",
    )
    build_parser.add_argument(
        "--dump-out", "-o",
        type=str,
        default=None,
        help="Write the tree dump (JSON) to this path",
    )
    build_parser.add_argument(
        "--show-dump",
        action="store_true",
        default=False,
        help="Include the full tree dump in the output",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate a proof from a saved tree dump",
        description="Load a tree dump and print the proof for one or more leaves.",
    )
    prove_parser.add_argument("dump", type=str, help="Path to tree dump JSON")
    target = prove_parser.add_mutually_exclusive_group()
    target.add_argument(
        "--index", "-i",
        type=int,
        action="append",
        help="Input index to prove (repeat for a multiproof)",
    )
    target.add_argument("--value", type=str, help="Leaf value to prove")
    prove_parser.add_argument("--separator", type=str, default=",", help="Field separator for --value")
    prove_parser.add_argument("--json", action="store_true", default=False, help="JSON output")
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a proof against a root",
        description="Verify an inclusion proof offline. Exit code 2 when invalid.",
    )
    verify_parser.add_argument("--root", "-r", type=str, required=True, help="Claimed root (0x hex)")
    leaf = verify_parser.add_mutually_exclusive_group(required=True)
    leaf.add_argument("--value", type=str, help="Leaf value")
    leaf.add_argument("--leaf-hash", type=str, help="Precomputed leaf digest (0x hex)")
    proof_source = verify_parser.add_mutually_exclusive_group()
    proof_source.add_argument("--proof", "-p", nargs="*", default=None, help="Sibling digests, bottom-up")
    proof_source.add_argument("--proof-file", type=str, default=None, help="Proof JSON (hex list or proof document)")
    _add_tree_options(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- render command ---
    render_parser = subparsers.add_parser(
        "render",
        help="Print a tree dump as text",
    )
    render_parser.add_argument("dump", type=str, help="Path to tree dump JSON")
    render_parser.set_defaults(func=prove.render_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="merkle.yaml",
        help="Path for config file (default: merkle.yaml)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (MERKLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle-commit config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = RuntimeConfig.load(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if log_level.upper() == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
