"""
Merkle Proof Unit Tests
Tests for core/merkle/merkle_proofs.py

Covers:
1. Proof length is log2(padded leaf count)
2. Round-trip: every leaf's proof verifies against the root
3. Tamper detection: modified entries or substituted leaves fail
4. Single-leaf trees: empty proof
5. Invalid leaf references
6. Path proofs for positionally combined trees
7. Proof records and the convenience wrappers
"""
import pytest
from pydantic import ValidationError

from core.crypto.hashing import sha256_hex
from core.config.runtime import set_default_config
from core.merkle.merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    PathStep,
    build_proof_record,
    generate_merkle_proof,
    generate_path_proof,
    verify_merkle_proof,
    verify_path_proof,
    verify_proof_record,
)
from core.merkle.merkle_tree import build_merkle_tree, build_tree, iter_leaves
from core.schemas.errors import EmptyInputError, ErrorCodes, InvalidLeafReference
from core.schemas.proof import MerkleProofRecord


def _h(text: str) -> str:
    return sha256_hex(text.encode("utf-8"))


def _sorted_combine(a: str, b: str) -> str:
    left, right = (a, b) if a < b else (b, a)
    return sha256_hex((left + right).encode("utf-8"))


def _flip_first_char(digest: str) -> str:
    replacement = "0" if digest[0] != "0" else "1"
    return replacement + digest[1:]


class TestProofGeneration:
    """Tests for generate_merkle_proof()."""

    @pytest.mark.parametrize("n", [1, 2, 3, 4, 5, 8, 13, 16])
    def test_proof_length_is_tree_height(self, n):
        tree = build_tree([f"b{i}" for i in range(n)])
        for leaf in tree.leaves:
            assert len(generate_merkle_proof(leaf)) == tree.height

    def test_first_entry_is_immediate_sibling(self, eight_blocks):
        tree = build_tree(eight_blocks)
        proof = generate_merkle_proof(tree.leaf(5))
        assert proof[0] == tree.leaf(4).hash
        assert proof[-1] == tree.root.left.hash

    def test_proof_copies_digests(self, abc_tree):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        assert all(isinstance(entry, str) for entry in proof)

    def test_proof_outlives_tree(self, abc_blocks):
        tree = build_tree(abc_blocks)
        root_hash = tree.root_hash
        leaf_hash = tree.leaf(1).hash
        proof = generate_merkle_proof(tree.leaf(1))
        del tree

        assert verify_merkle_proof(root_hash, leaf_hash, proof)


class TestConcreteScenario:
    """Proof for 'A' in ['A', 'B', 'C'] (padded with '_')."""

    def test_proof_for_a(self, abc_tree):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        assert proof == [_h("B"), _sorted_combine(_h("C"), _h("_"))]

    def test_proof_for_a_verifies(self, abc_tree):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        assert verify_merkle_proof(abc_tree.root_hash, _h("A"), proof)

    @pytest.mark.parametrize("position", [0, 1])
    def test_replacing_any_entry_with_z_fails(self, abc_tree, position):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        proof[position] = _h("Z")
        assert not verify_merkle_proof(abc_tree.root_hash, _h("A"), proof)


class TestRoundTrip:
    """Every leaf verifies against its own root."""

    @pytest.mark.parametrize("n", [1, 2, 3, 5, 7, 8, 11, 16, 33])
    def test_every_leaf_verifies(self, n):
        tree = build_tree([f"leaf{i}" for i in range(n)])
        for leaf in tree.leaves:
            proof = generate_merkle_proof(leaf, tree.root)
            assert verify_merkle_proof(tree.root_hash, leaf.hash, proof), leaf

    def test_root_only_handle(self, abc_blocks):
        """Callers holding just the root can still prove every leaf."""
        root = build_merkle_tree(abc_blocks)
        for leaf in iter_leaves(root):
            assert verify_merkle_proof(root.hash, leaf.hash, generate_merkle_proof(leaf, root))

    def test_other_algorithm(self, abc_blocks):
        tree = build_tree(abc_blocks, hasher="sha3_256")
        proof = generate_merkle_proof(tree.leaf(2))
        assert verify_merkle_proof(tree.root_hash, tree.leaf(2).hash, proof, "sha3_256")
        assert not verify_merkle_proof(tree.root_hash, tree.leaf(2).hash, proof, "sha256")


class TestTamperDetection:
    """Modified proofs are rejected."""

    def test_flipped_entry_fails(self, eight_blocks):
        tree = build_tree(eight_blocks)
        leaf = tree.leaf(3)
        proof = generate_merkle_proof(leaf)
        for i in range(len(proof)):
            tampered = list(proof)
            tampered[i] = _flip_first_char(tampered[i])
            assert not verify_merkle_proof(tree.root_hash, leaf.hash, tampered)

    def test_substituted_leaf_fails(self, eight_blocks):
        tree = build_tree(eight_blocks)
        proof = generate_merkle_proof(tree.leaf(0))
        for other in tree.leaves[1:]:
            assert not verify_merkle_proof(tree.root_hash, other.hash, proof)

    def test_wrong_root_fails(self, abc_tree):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        assert not verify_merkle_proof(_h("not the root"), _h("A"), proof)

    def test_truncated_proof_fails(self, eight_blocks):
        tree = build_tree(eight_blocks)
        proof = generate_merkle_proof(tree.leaf(0))
        assert not verify_merkle_proof(tree.root_hash, tree.leaf(0).hash, proof[:-1])

    def test_malformed_entries_return_false(self, abc_tree):
        assert not verify_merkle_proof(abc_tree.root_hash, _h("A"), [None, 42])
        assert not verify_merkle_proof(abc_tree.root_hash, None, [])

    def test_unknown_algorithm_name_returns_false(self, abc_tree):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        assert not verify_merkle_proof(abc_tree.root_hash, _h("A"), proof, "nope")

    def test_unknown_configured_algorithm_returns_false(self, abc_tree, monkeypatch):
        proof = generate_merkle_proof(abc_tree.leaf(0))
        monkeypatch.setenv("MERKLE_HASH_ALGORITHM", "nope")
        set_default_config(None)
        assert not verify_merkle_proof(abc_tree.root_hash, _h("A"), proof)


class TestSingleLeaf:
    """Single-block tree: empty proof."""

    def test_empty_proof(self):
        tree = build_tree(["x"])
        proof = generate_merkle_proof(tree.leaf(0))
        assert proof == []
        assert verify_merkle_proof(tree.root_hash, tree.leaf(0).hash, proof)

    def test_empty_proof_against_other_root(self):
        assert not verify_merkle_proof(_h("y"), _h("x"), [])


class TestInvalidLeafReference:
    """Precondition checks when a root is supplied."""

    def test_internal_node_rejected(self, abc_tree):
        with pytest.raises(InvalidLeafReference) as exc_info:
            generate_merkle_proof(abc_tree.root.left)
        assert exc_info.value.code == ErrorCodes.INVALID_LEAF_REFERENCE

    def test_leaf_from_other_tree_rejected(self, abc_tree):
        other = build_tree(["X", "Y"])
        with pytest.raises(InvalidLeafReference):
            generate_merkle_proof(other.leaf(0), abc_tree.root)

    def test_without_root_no_membership_check(self, abc_tree):
        other = build_tree(["X", "Y"])
        assert generate_merkle_proof(other.leaf(0)) == [other.leaf(1).hash]


class TestPathProofs:
    """Side-aware proofs for positional trees."""

    def test_path_sides(self, abc_tree):
        path = generate_path_proof(abc_tree.leaf(0))
        assert [step.side for step in path] == ["right", "right"]
        path = generate_path_proof(abc_tree.leaf(3))
        assert [step.side for step in path] == ["left", "left"]

    def test_positional_round_trip(self):
        tree = build_tree([f"p{i}" for i in range(6)], combine_order="positional")
        for leaf in tree.leaves:
            path = generate_path_proof(leaf, tree.root)
            assert verify_path_proof(tree.root_hash, leaf.hash, path)

    def test_positional_tree_needs_path_proofs(self):
        """Value-ordered verification does not reproduce positional parents."""
        tree = build_tree([f"p{i}" for i in range(16)], combine_order="positional")
        results = [
            verify_merkle_proof(tree.root_hash, leaf.hash, generate_merkle_proof(leaf))
            for leaf in tree.leaves
        ]
        assert not all(results)

    def test_path_proof_tamper_fails(self):
        tree = build_tree(["A", "B", "C", "D"], combine_order="positional")
        path = generate_path_proof(tree.leaf(1))
        flipped = [PathStep(sibling=path[0].sibling, side="right")] + path[1:]
        assert not verify_path_proof(tree.root_hash, tree.leaf(1).hash, flipped)

    def test_invalid_side_rejected(self):
        with pytest.raises(ValueError):
            PathStep(sibling="ab", side="up")

    def test_unknown_algorithm_returns_false(self):
        tree = build_tree(["A", "B", "C", "D"], combine_order="positional")
        path = generate_path_proof(tree.leaf(2))
        assert not verify_path_proof(tree.root_hash, tree.leaf(2).hash, path, "nope")

    def test_unknown_configured_algorithm_returns_false(self, monkeypatch):
        tree = build_tree(["A", "B", "C", "D"], combine_order="positional")
        path = generate_path_proof(tree.leaf(2))
        monkeypatch.setenv("MERKLE_HASH_ALGORITHM", "nope")
        set_default_config(None)
        assert not verify_path_proof(tree.root_hash, tree.leaf(2).hash, path)


class TestProofRecords:
    """MerkleProofRecord construction and verification."""

    def test_sorted_record(self, abc_tree):
        record = build_proof_record(abc_tree, 0)
        assert record.algorithm == "sha256"
        assert record.combine_order == "sorted"
        assert record.root == abc_tree.root_hash
        assert record.leaf == _h("A")
        assert record.sides is None
        assert record.depth == 2
        assert verify_proof_record(record)

    def test_positional_record(self):
        tree = build_tree(["A", "B", "C"], combine_order="positional")
        record = build_proof_record(tree, 2)
        assert record.sides == ["right", "left"]
        assert verify_proof_record(record)

    def test_record_json_round_trip_verifies(self, abc_tree):
        record = build_proof_record(abc_tree, 1)
        restored = MerkleProofRecord.model_validate_json(record.model_dump_json())
        assert verify_proof_record(restored)

    def test_tampered_record_fails(self, abc_tree):
        record = build_proof_record(abc_tree, 1)
        tampered = record.model_copy(update={"leaf": _h("Z")})
        assert not verify_proof_record(tampered)

    def test_unknown_algorithm_record_fails(self, abc_tree):
        record = build_proof_record(abc_tree, 1).model_copy(update={"algorithm": "nope"})
        assert not verify_proof_record(record)

    def test_positional_record_without_sides_fails(self):
        tree = build_tree(["A", "B", "C"], combine_order="positional")
        record = build_proof_record(tree, 2).model_copy(update={"sides": None})
        assert not verify_proof_record(record)

    def test_positional_single_leaf_record(self):
        tree = build_tree(["only"], combine_order="positional")
        record = build_proof_record(tree, 0)
        assert record.sides == []
        assert verify_proof_record(record)

    def test_sides_length_mismatch_rejected(self):
        with pytest.raises(ValidationError):
            MerkleProofRecord(root="r", leaf="l", siblings=["a", "b"], sides=["left"])


class TestConvenienceWrappers:
    """MerkleProver / MerkleVerifier."""

    def test_prove_and_verify(self, abc_blocks):
        tree = MerkleProver.build(abc_blocks)
        proof = MerkleProver.prove(tree, 1)
        assert MerkleVerifier.verify(tree.root_hash, tree.leaf(1).hash, proof)

    def test_verify_block(self, abc_blocks):
        tree = MerkleProver.build(abc_blocks)
        proof = MerkleProver.prove(tree, 2)
        assert MerkleVerifier.verify_block("C", proof, tree.root_hash)
        assert not MerkleVerifier.verify_block("D", proof, tree.root_hash)
        assert not MerkleVerifier.verify_block("C", proof, tree.root_hash, "nope")

    def test_prove_block(self, abc_blocks):
        record = MerkleProver.prove_block(abc_blocks, 0)
        assert record.root == MerkleProver.compute_root(abc_blocks)
        assert MerkleVerifier.verify_record(record)

    def test_prove_block_rejects_padding_index(self, abc_blocks):
        with pytest.raises(IndexError):
            MerkleProver.prove_block(abc_blocks, 3)

    def test_prove_block_empty(self):
        with pytest.raises(EmptyInputError):
            MerkleProver.prove_block([], 0)

    def test_build_passes_options(self, abc_blocks):
        tree = MerkleProver.build(abc_blocks, combine_order="positional", padding="#")
        assert tree.combine_order == "positional"
        assert tree.leaf(3).hash == _h("#")
