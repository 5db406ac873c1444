"""
CLI Prove Command

Build a tree over data blocks and emit the inclusion proof for one block
as a JSON proof record.

Usage:
    merkle prove A B C --index 0 [--out proof.json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.merkle import build_proof_record, build_tree
from merkle_cli.commands.build import read_blocks


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def prove_cmd(args: Namespace) -> int:
    """Execute the prove command."""
    blocks = read_blocks(args)
    if not blocks:
        print("Error: no data blocks given", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.index < 0 or args.index >= len(blocks):
        print(
            f"Error: index {args.index} out of range for {len(blocks)} blocks",
            file=sys.stderr,
        )
        return EXIT_RUNTIME_ERROR

    tree = build_tree(blocks)
    record = build_proof_record(tree, args.index)
    document = json.dumps(record.model_dump(mode="json", exclude_none=True), indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.write_text(document + "\n", encoding="utf-8")
        logger.info(f"Wrote proof for block {args.index} to {out_path}")
        print(f"proof written: {out_path}")
    else:
        print(document)
    return EXIT_SUCCESS
