"""
Hash Primitive
Pluggable one-way function used for leaf hashing and parent combination.

This module provides:
- Hasher: wraps a hashlib algorithm (or any bytes -> str callable)
- hash(payload): digest of a text/bytes payload as a lower-case hex string
- combine(left, right): hash(left + right), string concatenation then hash
- Module-level helpers for the default SHA-256 primitive

Contract Notes:
- Deterministic: same input -> same digest
- combine() is NOT commutative; callers choose the argument order
- Digests are str so they compare lexicographically, which the
  comparison-based proof verifier relies on
"""
from __future__ import annotations

import hashlib
from functools import lru_cache
from typing import Callable, Optional, Union

from core.schemas.errors import UnknownHashAlgorithmError


DEFAULT_ALGORITHM = "sha256"

Payload = Union[str, bytes]
DigestFn = Callable[[bytes], str]


def _hashlib_digest_fn(algorithm: str) -> DigestFn:
    """Build a bytes -> hex digest function for a hashlib algorithm name."""
    name = algorithm.lower()
    # shake_* needs an explicit output length
    if name.startswith("shake_"):
        raise UnknownHashAlgorithmError(algorithm)
    try:
        hashlib.new(name)
    except (ValueError, TypeError) as e:
        raise UnknownHashAlgorithmError(algorithm) from e

    def digest(data: bytes) -> str:
        return hashlib.new(name, data).hexdigest()

    return digest


class Hasher:
    """
    The hash primitive used by the tree builder and the proof engine.

    Example:
        >>> h = Hasher()
        >>> h.hash("hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
        >>> h.combine("ab", "cd") == h.hash("abcd")
        True
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        digest_fn: Optional[DigestFn] = None,
        encoding: str = "utf-8",
    ) -> None:
        """
        Args:
            algorithm: hashlib algorithm name, or a label when digest_fn is given
            digest_fn: Optional custom primitive mapping bytes to a digest string
            encoding: Encoding applied to str payloads

        Raises:
            UnknownHashAlgorithmError: If algorithm is not available
        """
        self.algorithm = algorithm
        self.encoding = encoding
        self._digest = digest_fn if digest_fn is not None else _hashlib_digest_fn(algorithm)

    def hash(self, payload: Payload) -> str:
        """Hash a raw data block or any text payload."""
        if isinstance(payload, str):
            payload = payload.encode(self.encoding)
        return self._digest(bytes(payload))

    def combine(self, left: str, right: str) -> str:
        """Parent digest of two child digests: hash(left + right)."""
        return self.hash(left + right)

    def __repr__(self) -> str:
        return f"Hasher(algorithm={self.algorithm!r})"


@lru_cache(maxsize=None)
def get_hasher(algorithm: str = DEFAULT_ALGORITHM) -> Hasher:
    """
    Return a shared Hasher for a hashlib algorithm name.

    Raises:
        UnknownHashAlgorithmError: If algorithm is not available
    """
    return Hasher(algorithm)


def sha256_hex(data: bytes) -> str:
    """
    SHA-256 of raw bytes as a lower-case hex string.

    Example:
        >>> sha256_hex(b"hello")
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).hexdigest()


def hash_block(payload: Payload) -> str:
    """Hash a data block with the default primitive."""
    return get_hasher().hash(payload)


def hash_concat(left: str, right: str) -> str:
    """Combine two digests with the default primitive: hash(left + right)."""
    return get_hasher().combine(left, right)


def ordered_pair(a: str, b: str) -> tuple[str, str]:
    """Return the two digests lexicographically ordered (smaller first)."""
    return (a, b) if a < b else (b, a)


__all__ = [
    "DEFAULT_ALGORITHM",
    "Hasher",
    "get_hasher",
    "sha256_hex",
    "hash_block",
    "hash_concat",
    "ordered_pair",
]
