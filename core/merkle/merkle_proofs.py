"""
Merkle Proof Generation and Verification

This module provides:
- generate_merkle_proof: sibling digests from a leaf up to the root
- verify_merkle_proof: recompute the root, ordering each pair by value
- PathStep / generate_path_proof / verify_path_proof: proofs that also
  record which side each sibling sits on, for positional trees
- MerkleProver / MerkleVerifier: static convenience wrappers

Verification Rule (comparison-based):
    current = leaf_hash
    for sibling in proof:
        current = combine(min(current, sibling), max(current, sibling))
    valid iff current == root_hash

This matches trees built with combine_order="sorted" (the default). Trees
built with combine_order="positional" must be checked with path proofs,
since value ordering does not reproduce positional ordering in general.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional, Sequence, Union

from core.crypto.hashing import Hasher
from core.merkle.merkle_tree import MerkleNode, MerkleTree, build_tree, resolve_hasher
from core.schemas.canonical import encode_block
from core.schemas.errors import (
    ConfigurationException,
    InvalidLeafReference,
    UnknownHashAlgorithmError,
)
from core.schemas.proof import MerkleProofRecord


logger = logging.getLogger(__name__)

Side = Literal["left", "right"]


@dataclass(frozen=True)
class PathStep:
    """
    One level of a path proof.

    Attributes:
        sibling: Digest of the sibling node
        side: Side the sibling occupies under the shared parent
    """
    sibling: str
    side: Side

    def __post_init__(self) -> None:
        if self.side not in ("left", "right"):
            raise ValueError(f"side must be 'left' or 'right', got {self.side!r}")


def _walk_to_root(leaf: MerkleNode, root: Optional[MerkleNode]) -> list[tuple[MerkleNode, MerkleNode]]:
    """
    Collect (node, parent) pairs from `leaf` up to the top of its tree.

    Raises:
        InvalidLeafReference: If `leaf` is not a leaf, or `root` is given
            and the walk does not end there.
    """
    if not leaf.is_leaf:
        raise InvalidLeafReference(
            "Proofs can only be generated for leaf nodes",
            details={"hash": leaf.hash},
        )

    steps: list[tuple[MerkleNode, MerkleNode]] = []
    current = leaf
    parent = current.parent
    while parent is not None:
        steps.append((current, parent))
        current = parent
        parent = current.parent

    if root is not None and current is not root:
        raise InvalidLeafReference(
            "Leaf does not belong to the given tree",
            details={"hash": leaf.hash, "root": root.hash},
        )
    return steps


def generate_merkle_proof(leaf: MerkleNode, root: Optional[MerkleNode] = None) -> list[str]:
    """
    Generate the proof for `leaf`: one sibling digest per level, leaf to root.

    The proof for a tree with p padded leaves has exactly log2(p) entries.
    It copies digests and does not reference any node.

    Args:
        leaf: A leaf node taken from a built tree
        root: Optional root to check the leaf against

    Returns:
        List of sibling digests, ordered from the leaf's sibling upward

    Raises:
        InvalidLeafReference: If `leaf` is not a leaf of `root`'s tree
    """
    proof = [
        (parent.right if parent.left is node else parent.left).hash
        for node, parent in _walk_to_root(leaf, root)
    ]
    logger.debug("Generated proof of length %d for leaf %s", len(proof), leaf.hash)
    return proof


def generate_path_proof(leaf: MerkleNode, root: Optional[MerkleNode] = None) -> list[PathStep]:
    """
    Generate a proof that also records the side of each sibling.

    Raises:
        InvalidLeafReference: If `leaf` is not a leaf of `root`'s tree
    """
    path: list[PathStep] = []
    for node, parent in _walk_to_root(leaf, root):
        if parent.left is node:
            path.append(PathStep(sibling=parent.right.hash, side="right"))
        else:
            path.append(PathStep(sibling=parent.left.hash, side="left"))
    return path


def _verification_hasher(hasher: Union[Hasher, str, None]) -> Optional[Hasher]:
    """resolve_hasher() for verifiers: None when the algorithm is unavailable."""
    try:
        return resolve_hasher(hasher)
    except (UnknownHashAlgorithmError, ConfigurationException) as e:
        logger.warning("Cannot verify proof: %s", e.message)
        return None


def verify_merkle_proof(
    root_hash: str,
    leaf_hash: str,
    proof: Sequence[str],
    hasher: Union[Hasher, str, None] = None,
) -> bool:
    """
    Verify a proof by recomputing the root with value-ordered combination.

    At each level the lexicographically smaller digest is the left argument
    to combine(). Never raises: malformed entries and an unavailable hash
    algorithm make the proof invalid.

    Args:
        root_hash: Claimed root digest
        leaf_hash: Digest of the leaf being proven
        proof: Sibling digests, leaf to root
        hasher: Hash primitive, algorithm name, or None for the configured one

    Returns:
        True if the recomputed root equals root_hash
    """
    primitive = _verification_hasher(hasher)
    if primitive is None:
        return False
    if not isinstance(leaf_hash, str) or not isinstance(root_hash, str):
        return False

    current = leaf_hash
    for sibling in proof:
        if not isinstance(sibling, str):
            return False
        if current < sibling:
            current = primitive.combine(current, sibling)
        else:
            current = primitive.combine(sibling, current)

    return current == root_hash


def verify_path_proof(
    root_hash: str,
    leaf_hash: str,
    path: Sequence[PathStep],
    hasher: Union[Hasher, str, None] = None,
) -> bool:
    """
    Verify a path proof by combining on the recorded side at each level.

    Use for trees built with combine_order="positional".
    """
    primitive = _verification_hasher(hasher)
    if primitive is None:
        return False
    if not isinstance(leaf_hash, str) or not isinstance(root_hash, str):
        return False

    current = leaf_hash
    for step in path:
        if not isinstance(step, PathStep) or not isinstance(step.sibling, str):
            return False
        if step.side == "right":
            current = primitive.combine(current, step.sibling)
        else:
            current = primitive.combine(step.sibling, current)

    return current == root_hash


def build_proof_record(tree: MerkleTree, index: int) -> MerkleProofRecord:
    """
    Build a self-describing proof record for the leaf at `index`.

    Positional trees get `sides` filled in so the record verifies offline.

    Raises:
        IndexError: If index is out of range
    """
    leaf = tree.leaf(index)
    if tree.combine_order == "positional":
        path = generate_path_proof(leaf, tree.root)
        siblings = [step.sibling for step in path]
        sides: Optional[list[Side]] = [step.side for step in path]
    else:
        siblings = generate_merkle_proof(leaf, tree.root)
        sides = None

    return MerkleProofRecord(
        algorithm=tree.hasher.algorithm,
        combine_order=tree.combine_order,
        root=tree.root_hash,
        leaf=leaf.hash,
        index=index,
        siblings=siblings,
        sides=sides,
    )


def verify_proof_record(record: MerkleProofRecord) -> bool:
    """
    Verify a MerkleProofRecord with the verifier its combine order calls for.

    Positional records need `sides` for every sibling; a positional record
    without them is invalid.
    """
    hasher = _verification_hasher(record.algorithm)
    if hasher is None:
        return False
    if record.combine_order == "positional":
        sides = record.sides if record.sides is not None else []
        if len(sides) != len(record.siblings):
            logger.warning("Positional proof record has no sibling sides")
            return False
        path = [PathStep(sibling=s, side=side) for s, side in zip(record.siblings, sides)]
        return verify_path_proof(record.root, record.leaf, path, hasher)
    return verify_merkle_proof(record.root, record.leaf, record.siblings, hasher)


class MerkleProver:
    """
    Convenience class for building trees and generating proofs.

    Example:
        >>> tree = MerkleProver.build(["A", "B", "C"])
        >>> len(MerkleProver.prove(tree, 0))
        2
    """

    @staticmethod
    def build(blocks: Sequence[Any], **options: Any) -> MerkleTree:
        """Build a tree; options are passed through to build_tree()."""
        return build_tree(blocks, **options)

    @staticmethod
    def prove(tree: MerkleTree, index: int) -> list[str]:
        """
        Proof for the leaf at `index` of an already built tree.

        Raises:
            IndexError: If index is out of range
        """
        return generate_merkle_proof(tree.leaf(index), tree.root)

    @staticmethod
    def prove_block(blocks: Sequence[Any], index: int, **options: Any) -> MerkleProofRecord:
        """
        Build a tree over `blocks` and return the proof record for `index`.

        Raises:
            EmptyInputError: If blocks is empty
            IndexError: If index is out of range
        """
        tree = build_tree(blocks, **options)
        if index >= tree.block_count:
            raise IndexError(
                f"Block index {index} out of range for {tree.block_count} blocks"
            )
        return build_proof_record(tree, index)

    @staticmethod
    def compute_root(blocks: Sequence[Any], **options: Any) -> str:
        """Root digest of the tree over `blocks`."""
        return build_tree(blocks, **options).root_hash


class MerkleVerifier:
    """
    Convenience class for verifying proofs.

    Example:
        >>> record = MerkleProver.prove_block(["A", "B"], 1)
        >>> MerkleVerifier.verify_record(record)
        True
    """

    @staticmethod
    def verify(
        root_hash: str,
        leaf_hash: str,
        proof: Sequence[str],
        hasher: Union[Hasher, str, None] = None,
    ) -> bool:
        return verify_merkle_proof(root_hash, leaf_hash, proof, hasher)

    @staticmethod
    def verify_block(
        block: Any,
        proof: Sequence[str],
        root_hash: str,
        hasher: Union[Hasher, str, None] = None,
    ) -> bool:
        """
        Verify a raw data block against a root.

        The block is hashed the same way the builder hashes leaves.
        """
        primitive = _verification_hasher(hasher)
        if primitive is None:
            return False
        leaf_hash = primitive.hash(encode_block(block, primitive.encoding))
        return verify_merkle_proof(root_hash, leaf_hash, proof, primitive)

    @staticmethod
    def verify_record(record: MerkleProofRecord) -> bool:
        return verify_proof_record(record)


__all__ = [
    "PathStep",
    "generate_merkle_proof",
    "generate_path_proof",
    "verify_merkle_proof",
    "verify_path_proof",
    "build_proof_record",
    "verify_proof_record",
    "MerkleProver",
    "MerkleVerifier",
]
