"""
Schemas & Canonicalization
File: canonical.py

Purpose: Turn caller-supplied data blocks into the exact bytes that get
hashed into Merkle leaves, and render JSON documents deterministically.

Encoding rules:
1. str   -> encoded with the configured text encoding (utf-8 by default)
2. bytes -> used as-is
3. anything else -> canonical JSON (sorted keys, no whitespace), utf-8

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def _validate_float(value: float, path: str = "") -> None:
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized
            (e.g., contains NaN/Infinity floats or an unsupported type).
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(mode="json", by_alias=True, exclude_none=True)
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, bytes):
        return value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    canonicalized = canonicalize_value(obj)
    return json.dumps(
        canonicalized,
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def encode_block(block: Any, encoding: str = "utf-8") -> bytes:
    """
    Encode a data block into the bytes that are hashed for its leaf.

    Args:
        block: Text, raw bytes, or any canonically serializable value
        encoding: Text encoding applied to str blocks and canonical JSON

    Returns:
        Bytes to feed to the hash primitive

    Raises:
        CanonicalizationException: If the block cannot be encoded.
    """
    if isinstance(block, bytes):
        return block
    if isinstance(block, (bytearray, memoryview)):
        return bytes(block)
    if isinstance(block, str):
        try:
            return block.encode(encoding)
        except (LookupError, UnicodeEncodeError) as e:
            raise CanonicalizationException(
                message=f"Cannot encode text block with {encoding!r}: {e}",
                details={"encoding": encoding},
            ) from e
    return dumps_canonical(block).encode(encoding)
