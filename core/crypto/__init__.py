"""
Core cryptographic utilities.

Provides the pluggable hash primitive used by the Merkle tree.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    Hasher,
    get_hasher,
    sha256_hex,
    hash_block,
    hash_concat,
    ordered_pair,
)

__all__ = [
    "DEFAULT_ALGORITHM",
    "Hasher",
    "get_hasher",
    "sha256_hex",
    "hash_block",
    "hash_concat",
    "ordered_pair",
]
