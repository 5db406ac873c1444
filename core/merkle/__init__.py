"""
Merkle Tree and Proofs
Padded binary hash tree construction + proof generation/verification.

This module provides:
- MerkleNode / MerkleTree: the built tree
- build_merkle_tree / build_tree: construction from ordered data blocks
- generate_merkle_proof / verify_merkle_proof: sibling proofs and
  comparison-based verification
- generate_path_proof / verify_path_proof: side-aware proofs for
  positionally combined trees
- render_tree / display_tree: indented debug listing

Canonical Rules:
1. Leaf hashing: hasher.hash(encode_block(block))
2. Parent hashing: hasher.combine(min(l, r), max(l, r)) by default
3. Padding: append "_" blocks until the count is a power of two
4. Empty input: EmptyInputError
5. Single block: root = leaf, proof = []

Usage:
    from core.merkle import build_tree, generate_merkle_proof, verify_merkle_proof

    tree = build_tree(["A", "B", "C"])
    leaf = tree.leaf(0)
    proof = generate_merkle_proof(leaf)
    assert verify_merkle_proof(tree.root.hash, leaf.hash, proof)
"""
from .merkle_tree import (
    MerkleNode,
    MerkleTree,
    build_merkle_tree,
    build_tree,
    compute_tree_height,
    find_leaf,
    iter_leaves,
    next_power_of_two,
    pad_blocks,
    padding_needed,
    parent_hash,
)

from .merkle_proofs import (
    PathStep,
    MerkleProver,
    MerkleVerifier,
    build_proof_record,
    generate_merkle_proof,
    generate_path_proof,
    verify_merkle_proof,
    verify_path_proof,
    verify_proof_record,
)

from .display import (
    display_tree,
    render_tree,
)


__all__ = [
    # Tree
    "MerkleNode",
    "MerkleTree",
    "build_merkle_tree",
    "build_tree",
    "compute_tree_height",
    "find_leaf",
    "iter_leaves",
    "next_power_of_two",
    "pad_blocks",
    "padding_needed",
    "parent_hash",
    # Proofs
    "PathStep",
    "generate_merkle_proof",
    "generate_path_proof",
    "verify_merkle_proof",
    "verify_path_proof",
    "build_proof_record",
    "verify_proof_record",
    "MerkleProver",
    "MerkleVerifier",
    # Display
    "render_tree",
    "display_tree",
]
