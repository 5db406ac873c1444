"""
CLI Verify Command

Verify an inclusion proof offline, either from a JSON proof record written
by `merkle prove` or from raw digests on the command line.

Usage:
    merkle verify proof.json [--json]
    merkle verify --root R --leaf L [--sibling S ...] [--json]
    merkle verify --root R --block "A" [--sibling S ...]
    merkle --combine-order positional verify --root R --leaf L --sibling S --side left
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path

from pydantic import ValidationError

from core.merkle import PathStep, verify_merkle_proof, verify_path_proof, verify_proof_record
from core.merkle.merkle_tree import resolve_hasher
from core.schemas.canonical import encode_block
from core.schemas.proof import MerkleProofRecord


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of a proof check for CLI output."""
    root: str = ""
    leaf: str = ""
    depth: int = 0
    ok: bool = False
    source: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


def load_record(path: Path) -> MerkleProofRecord:
    """
    Load a proof record from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a valid proof record
    """
    if not path.exists():
        raise FileNotFoundError(f"Proof file not found: {path}")
    try:
        return MerkleProofRecord.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ValueError(f"Invalid proof record in {path}: {e}") from e


def print_summary_human(summary: VerifySummary) -> None:
    print(f"root: {summary.root}")
    print(f"leaf: {summary.leaf}")
    print(f"depth: {summary.depth}")
    print(f"valid: {str(summary.ok).lower()}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if the proof is valid, EXIT_VERIFICATION_FAILED if not
    """
    if args.proof_file:
        try:
            record = load_record(Path(args.proof_file))
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        ok = verify_proof_record(record)
        summary = VerifySummary(
            root=record.root,
            leaf=record.leaf,
            depth=record.depth,
            ok=ok,
            source=args.proof_file,
        )
    else:
        if not args.root or not (args.leaf or args.block is not None):
            print("Error: give a proof file, or --root with --leaf or --block", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        hasher = resolve_hasher()
        leaf = args.leaf or hasher.hash(encode_block(args.block, hasher.encoding))
        siblings = list(args.siblings or [])
        sides = args.sides
        if args.runtime_config.merkle.combine_order == "positional" and sides is None:
            sides = []
        if sides is not None:
            if len(sides) != len(siblings):
                print(
                    f"Error: positional proofs need one --side per --sibling "
                    f"(got {len(sides)} sides for {len(siblings)} siblings)",
                    file=sys.stderr,
                )
                return EXIT_RUNTIME_ERROR
            path = [PathStep(sibling=s, side=side) for s, side in zip(siblings, sides)]
            ok = verify_path_proof(args.root, leaf, path, hasher)
        else:
            ok = verify_merkle_proof(args.root, leaf, siblings, hasher)
        summary = VerifySummary(
            root=args.root,
            leaf=leaf,
            depth=len(siblings),
            ok=ok,
            source="arguments",
        )

    logger.info(f"Proof verification from {summary.source}: {'valid' if ok else 'invalid'}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if ok else EXIT_VERIFICATION_FAILED
