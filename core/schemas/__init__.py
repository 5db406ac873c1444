"""
Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
    encode_block,
)

# Error models and exceptions
from .errors import (
    CanonicalizationException,
    ConfigurationException,
    EmptyInputError,
    ErrorCodes,
    InvalidLeafReference,
    MerkleError,
    MerkleException,
    UnknownHashAlgorithmError,
)

from .proof import (
    CombineOrder,
    MerkleProofRecord,
)


__all__ = [
    # Canonical serialization
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    "encode_block",
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleException",
    "EmptyInputError",
    "InvalidLeafReference",
    "UnknownHashAlgorithmError",
    "CanonicalizationException",
    "ConfigurationException",
    # Proofs
    "CombineOrder",
    "MerkleProofRecord",
]
