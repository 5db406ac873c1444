"""
Merkle Tree Display
Indented, pre-order listing of a tree for debugging.

Layout:
    |-- <root hash>
        |-- <left child hash>
            |-- ...
        |-- <right child hash>

Each level adds one indent unit; left children print before right ones.
"""
from __future__ import annotations

import sys
from typing import Optional, TextIO

from core.merkle.merkle_tree import MerkleNode


DEFAULT_INDENT = "    "
BRANCH = "|-- "


def render_tree(
    node: Optional[MerkleNode],
    level: int = 0,
    indent: str = DEFAULT_INDENT,
    width: Optional[int] = None,
) -> list[str]:
    """
    Render the subtree under `node` as a list of lines.

    Args:
        node: Subtree root (None renders nothing)
        level: Indentation level of `node`
        indent: Indent unit repeated once per level
        width: Optional number of hash characters to keep per line

    Returns:
        Lines in pre-order (node, left subtree, right subtree)
    """
    lines: list[str] = []
    if node is None:
        return lines

    stack: list[tuple[MerkleNode, int]] = [(node, level)]
    while stack:
        current, depth = stack.pop()
        digest = current.hash if width is None else current.hash[:width]
        lines.append(f"{indent * depth}{BRANCH}{digest}")
        if current.right is not None:
            stack.append((current.right, depth + 1))
        if current.left is not None:
            stack.append((current.left, depth + 1))
    return lines


def display_tree(
    node: Optional[MerkleNode],
    level: int = 0,
    stream: Optional[TextIO] = None,
    width: Optional[int] = None,
) -> None:
    """Write render_tree() output to `stream` (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    for line in render_tree(node, level, width=width):
        out.write(line + "\n")


__all__ = [
    "render_tree",
    "display_tree",
]
