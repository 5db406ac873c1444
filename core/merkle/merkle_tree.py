"""
Merkle Tree Construction
Builds a complete binary hash tree over an ordered sequence of data blocks.

This module provides:
- MerkleNode: immutable tree node with a weak back-reference to its parent
- MerkleTree: root + ordered leaves + the hash primitive that built them
- build_merkle_tree / build_tree: padded bottom-up construction
- Sizing helpers: next_power_of_two, pad_blocks, compute_tree_height

Construction Rules:
1. Empty input raises EmptyInputError
2. Padding: append the padding block ("_" by default) until the block
   count is a power of two
3. Leaf hashing: leaf.hash = hasher.hash(encode_block(block))
4. Reduction: pop the two frontmost nodes of a work queue, link them as
   left/right children of a new parent, push the parent to the back;
   stop when one node remains (the root)
5. Parent hashing:
   - "sorted" (default): combine(min(l, r), max(l, r))
   - "positional": combine(left, right)
   Children are always linked positionally.

Ownership Notes:
- Parents own their children (strong references)
- node.parent is a weakref; it never keeps a tree alive on its own
"""
from __future__ import annotations

import logging
import weakref
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence, Union

from core.config.runtime import COMBINE_ORDERS, get_default_config
from core.crypto.hashing import Hasher, get_hasher, ordered_pair
from core.schemas.canonical import encode_block
from core.schemas.errors import ConfigurationException, EmptyInputError


logger = logging.getLogger(__name__)


class MerkleNode:
    """
    One digest in a Merkle tree.

    Nodes are immutable once built: hash, children and parent link are
    fixed by the builder. Leaves have no children; internal nodes have
    exactly two.
    """

    __slots__ = ("_hash", "_left", "_right", "_parent", "__weakref__")

    def __init__(
        self,
        hash: str,
        left: Optional["MerkleNode"] = None,
        right: Optional["MerkleNode"] = None,
    ) -> None:
        if (left is None) != (right is None):
            raise ValueError("An internal node needs both a left and a right child")
        object.__setattr__(self, "_hash", hash)
        object.__setattr__(self, "_left", left)
        object.__setattr__(self, "_right", right)
        object.__setattr__(self, "_parent", None)
        if left is not None:
            left._attach(self)
            right._attach(self)

    def _attach(self, parent: "MerkleNode") -> None:
        if self._parent is not None:
            raise ValueError("Node already belongs to a parent")
        object.__setattr__(self, "_parent", weakref.ref(parent))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"MerkleNode is immutable; cannot set {name!r}")

    @property
    def hash(self) -> str:
        return self._hash

    @property
    def left(self) -> Optional["MerkleNode"]:
        return self._left

    @property
    def right(self) -> Optional["MerkleNode"]:
        return self._right

    @property
    def parent(self) -> Optional["MerkleNode"]:
        """The parent node, or None for the root (or a released tree)."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def is_leaf(self) -> bool:
        return self._left is None and self._right is None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def sibling(self) -> Optional["MerkleNode"]:
        """The other child of this node's parent."""
        parent = self.parent
        if parent is None:
            return None
        return parent.right if parent.left is self else parent.left

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else "node"
        return f"MerkleNode({kind}, hash={self._hash[:16]!r})"


@dataclass(frozen=True)
class MerkleTree:
    """
    A built tree: root, padded leaves in input order, and the primitive used.

    Holding the MerkleTree keeps every node alive, so leaves taken from
    `leaves` can always walk up to `root`.
    """
    root: MerkleNode
    leaves: tuple[MerkleNode, ...]
    block_count: int
    hasher: Hasher
    combine_order: str = "sorted"
    padding_block: Any = field(default="_")

    @property
    def padded_count(self) -> int:
        return len(self.leaves)

    @property
    def height(self) -> int:
        return compute_tree_height(self.padded_count)

    @property
    def root_hash(self) -> str:
        return self.root.hash

    def leaf(self, index: int) -> MerkleNode:
        """
        Leaf node for the block at `index` (padding leaves included).

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self.leaves):
            raise IndexError(
                f"Leaf index {index} out of range for {len(self.leaves)} leaves"
            )
        return self.leaves[index]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def padding_needed(n: int) -> int:
    """Number of padding blocks appended to n blocks."""
    return next_power_of_two(n) - n if n > 0 else 0


def pad_blocks(blocks: Sequence[Any], padding: Any = "_") -> list[Any]:
    """
    Copy `blocks` and append `padding` until the length is a power of two.

    Example:
        >>> pad_blocks(["A", "B", "C"])
        ['A', 'B', 'C', '_']
    """
    padded = list(blocks)
    while len(padded) & (len(padded) - 1):
        padded.append(padding)
    return padded


def compute_tree_height(padded_count: int) -> int:
    """
    Height of a complete tree over `padded_count` leaves: log2(padded_count).

    A single leaf has height 0; four leaves have height 2.
    """
    if padded_count <= 1:
        return 0
    return (padded_count - 1).bit_length()


def resolve_hasher(hasher: Union[Hasher, str, None] = None) -> Hasher:
    """Turn a Hasher, an algorithm name, or None (configured default) into a Hasher."""
    if isinstance(hasher, Hasher):
        return hasher
    config = get_default_config().merkle
    algorithm = config.hash_algorithm if hasher is None else hasher
    if config.encoding != "utf-8":
        return Hasher(algorithm, encoding=config.encoding)
    return get_hasher(algorithm)


def _resolve_combine_order(combine_order: Optional[str]) -> str:
    order = combine_order or get_default_config().merkle.combine_order
    if order not in COMBINE_ORDERS:
        raise ConfigurationException(
            f"combine_order must be one of {COMBINE_ORDERS}, got {order!r}",
            field_path="combine_order",
        )
    return order


def parent_hash(hasher: Hasher, left: str, right: str, combine_order: str = "sorted") -> str:
    """Digest of a parent node given its positional children."""
    if combine_order == "sorted":
        left, right = ordered_pair(left, right)
    return hasher.combine(left, right)


def build_tree(
    blocks: Sequence[Any],
    hasher: Union[Hasher, str, None] = None,
    padding: Any = None,
    combine_order: Optional[str] = None,
) -> MerkleTree:
    """
    Build a Merkle tree over `blocks`.

    Args:
        blocks: Ordered data blocks (str, bytes, or canonically serializable)
        hasher: Hash primitive, algorithm name, or None for the configured one
        padding: Padding block, or None for the configured sentinel
        combine_order: "sorted" or "positional", or None for the configured one

    Returns:
        MerkleTree with the root and the padded leaves in input order

    Raises:
        EmptyInputError: If blocks is empty
        ConfigurationException: If combine_order is unknown
    """
    if len(blocks) == 0:
        raise EmptyInputError()

    config = get_default_config().merkle
    primitive = resolve_hasher(hasher)
    order = _resolve_combine_order(combine_order)
    if padding is None:
        padding = config.padding_block

    padded = pad_blocks(blocks, padding)
    logger.debug(
        "Building Merkle tree: %d blocks, %d padding, order=%s, algorithm=%s",
        len(blocks), len(padded) - len(blocks), order, primitive.algorithm,
    )

    leaves = tuple(
        MerkleNode(primitive.hash(encode_block(block, primitive.encoding)))
        for block in padded
    )

    queue: deque[MerkleNode] = deque(leaves)
    while len(queue) > 1:
        left = queue.popleft()
        right = queue.popleft()
        queue.append(
            MerkleNode(parent_hash(primitive, left.hash, right.hash, order), left, right)
        )

    root = queue[0]
    logger.debug("Merkle root: %s", root.hash)

    return MerkleTree(
        root=root,
        leaves=leaves,
        block_count=len(blocks),
        hasher=primitive,
        combine_order=order,
        padding_block=padding,
    )


def build_merkle_tree(
    blocks: Sequence[Any],
    hasher: Union[Hasher, str, None] = None,
    padding: Any = None,
    combine_order: Optional[str] = None,
) -> MerkleNode:
    """
    Build a Merkle tree and return its root node.

    Same arguments and errors as build_tree(). Leaves stay reachable from
    the returned root through iter_leaves().

    Example:
        >>> root = build_merkle_tree(["A", "B", "C"])
        >>> len(list(iter_leaves(root)))
        4
    """
    return build_tree(blocks, hasher, padding, combine_order).root


def iter_leaves(root: MerkleNode) -> Iterator[MerkleNode]:
    """Yield the leaves under `root` from left to right."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)


def find_leaf(root: MerkleNode, leaf_hash: str) -> Optional[MerkleNode]:
    """First leaf (left to right) whose hash equals `leaf_hash`, or None."""
    for leaf in iter_leaves(root):
        if leaf.hash == leaf_hash:
            return leaf
    return None


__all__ = [
    "MerkleNode",
    "MerkleTree",
    "next_power_of_two",
    "padding_needed",
    "pad_blocks",
    "compute_tree_height",
    "resolve_hasher",
    "parent_hash",
    "build_tree",
    "build_merkle_tree",
    "iter_leaves",
    "find_leaf",
]
