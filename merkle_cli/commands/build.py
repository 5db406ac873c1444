"""
CLI Build, Show and Demo Commands

Build a tree over data blocks and report its root, leaves and height,
or print the tree as an indented listing.

Usage:
    merkle build A B C [--json]
    merkle show --file blocks.txt [--width 16]
    merkle demo
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path

from core.merkle import build_tree, display_tree
from core.merkle.merkle_tree import MerkleTree


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1

DEMO_BLOCKS = [
    "alice pays bob 5",
    "bob pays carol 3",
    "carol pays dave 1",
    "dave pays alice 2",
]


def read_blocks(args: Namespace) -> list[str]:
    """
    Collect data blocks from positional arguments and/or --file.

    File blocks are one per line, trailing newline stripped; they follow
    any positional blocks.
    """
    blocks = list(getattr(args, "blocks", None) or [])
    file_path = getattr(args, "file", None)
    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Block file not found: {path}")
        blocks.extend(path.read_text(encoding="utf-8").splitlines())
    return blocks


@dataclass
class BuildSummary:
    """Summary of a built tree for CLI output."""
    root: str = ""
    algorithm: str = ""
    combine_order: str = ""
    block_count: int = 0
    padded_count: int = 0
    height: int = 0
    leaves: list[str] = field(default_factory=list)

    @classmethod
    def from_tree(cls, tree: MerkleTree) -> "BuildSummary":
        return cls(
            root=tree.root_hash,
            algorithm=tree.hasher.algorithm,
            combine_order=tree.combine_order,
            block_count=tree.block_count,
            padded_count=tree.padded_count,
            height=tree.height,
            leaves=[leaf.hash for leaf in tree.leaves],
        )

    def to_dict(self) -> dict:
        return asdict(self)


def print_summary_human(summary: BuildSummary) -> None:
    print(f"root: {summary.root}")
    print(f"algorithm: {summary.algorithm}")
    print(f"combine_order: {summary.combine_order}")
    print(f"blocks: {summary.block_count} (padded to {summary.padded_count})")
    print(f"height: {summary.height}")
    print("leaves:")
    for i, leaf in enumerate(summary.leaves):
        marker = "" if i < summary.block_count else "  [padding]"
        print(f"  [{i}] {leaf}{marker}")


def build_cmd(args: Namespace) -> int:
    """Execute the build command."""
    blocks = read_blocks(args)
    if not blocks:
        print("Error: no data blocks given", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    tree = build_tree(blocks)
    logger.info(f"Built tree over {len(blocks)} blocks")
    summary = BuildSummary.from_tree(tree)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS


def show_cmd(args: Namespace) -> int:
    """Execute the show command."""
    blocks = read_blocks(args)
    if not blocks:
        print("Error: no data blocks given", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    tree = build_tree(blocks)
    print("Merkle Tree:")
    display_tree(tree.root, width=args.width)
    return EXIT_SUCCESS


def demo_cmd(args: Namespace) -> int:
    """Build and display the tree over the bundled example blocks."""
    tree = build_tree(DEMO_BLOCKS)
    print("Merkle Tree:")
    display_tree(tree.root, width=getattr(args, "width", None))
    return EXIT_SUCCESS
