"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m merkle_cli build A B C [--json]
    python -m merkle_cli prove A B C --index 0 [--out proof.json]
    python -m merkle_cli verify proof.json [--json]
    python -m merkle_cli verify --root R --leaf L --sibling S1 --sibling S2
    python -m merkle_cli show A B C [--width 16]
    python -m merkle_cli demo
    python -m merkle_cli config --init

Environment Variables:
    MERKLE_HASH_ALGORITHM       hashlib algorithm (default: sha256)
    MERKLE_PADDING_BLOCK        Padding sentinel (default: _)
    MERKLE_COMBINE_ORDER        sorted or positional (default: sorted)
    MERKLE_LOG_LEVEL            Log level (default: INFO)
    MERKLE_LOG_FILE             Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config.runtime import COMBINE_ORDERS, set_default_config
from merkle_cli import __version__
from merkle_cli.commands import build, prove, verify
from merkle_cli.config import apply_cli_overrides, get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


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
    )


def _add_block_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "blocks",
        nargs="*",
        help="Data blocks, in order",
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        default=None,
        help="Read additional blocks from a file, one per line",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="merkle",
        description="Build Merkle trees over data blocks, generate and verify inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./merkle.yaml or ~/.config/merkle/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--hash",
        type=str,
        default=None,
        help="hashlib algorithm name (overrides config)",
    )
    parser.add_argument(
        "--padding",
        type=str,
        default=None,
        help="Padding block appended to reach a power of two (overrides config)",
    )
    parser.add_argument(
        "--combine-order",
        type=str,
        default=None,
        choices=list(COMBINE_ORDERS),
        help="Parent digest ordering (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build a tree and print its root and leaves",
    )
    _add_block_arguments(build_parser)
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- prove command ---
    prove_parser = subparsers.add_parser(
        "prove",
        help="Generate an inclusion proof for one block",
    )
    _add_block_arguments(prove_parser)
    prove_parser.add_argument(
        "--index", "-i",
        type=int,
        required=True,
        help="0-based index of the block to prove",
    )
    prove_parser.add_argument(
        "--out", "-o",
        type=str,
        default=None,
        help="Write the proof record to this file instead of stdout",
    )
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an inclusion proof offline",
    )
    verify_parser.add_argument(
        "proof_file",
        nargs="?",
        default=None,
        help="Proof record written by 'merkle prove'",
    )
    verify_parser.add_argument("--root", type=str, default=None, help="Claimed root digest")
    verify_parser.add_argument("--leaf", type=str, default=None, help="Leaf digest")
    verify_parser.add_argument("--block", type=str, default=None, help="Raw data block (hashed as a leaf)")
    verify_parser.add_argument(
        "--sibling",
        dest="siblings",
        action="append",
        default=None,
        help="Sibling digest, leaf to root; repeat per level",
    )
    verify_parser.add_argument(
        "--side",
        dest="sides",
        action="append",
        choices=["left", "right"],
        default=None,
        help="Side of each --sibling, in the same order (positional trees)",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- show command ---
    show_parser = subparsers.add_parser(
        "show",
        help="Print the tree as an indented listing",
    )
    _add_block_arguments(show_parser)
    show_parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="Truncate digests to this many characters",
    )
    show_parser.set_defaults(func=build.show_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Build and print a tree over example blocks",
    )
    demo_parser.add_argument("--width", type=int, default=None, help="Truncate digests")
    demo_parser.set_defaults(func=build.demo_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
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
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: merkle config [--init|--show]")
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
        config = apply_cli_overrides(load_config(args.config), args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=config.logging.level, log_file=config.logging.file)
    set_default_config(config)
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    finally:
        set_default_config(None)


if __name__ == "__main__":
    sys.exit(main())
