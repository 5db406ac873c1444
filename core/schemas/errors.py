"""
Schemas & Canonicalization
File: errors.py

Purpose: Error taxonomy for Merkle tree construction and proofs.
Defines both Pydantic models for structured error reporting
and Python exceptions for control flow.

Proof verification never raises: a failed check is a False result,
not an error. Only construction and precondition checks raise.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction
    EMPTY_INPUT = "EMPTY_INPUT"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Proofs
    INVALID_LEAF_REFERENCE = "INVALID_LEAF_REFERENCE"

    # Hash primitive & configuration
    UNKNOWN_HASH_ALGORITHM = "UNKNOWN_HASH_ALGORITHM"
    CONFIG_ERROR = "CONFIG_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Structured error record.

    Used by the CLI to report failures as JSON without tracebacks.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to a raised exception."""
        return MerkleException(
            code=self.code,
            message=self.message,
            details=self.details,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle errors.

    Carries structured error information and converts to/from
    MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MerkleException):
    """Raised when a tree is built from zero blocks."""

    def __init__(self, message: str = "Cannot build a Merkle tree from zero blocks") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
        )


class InvalidLeafReference(MerkleException):
    """Raised when a proof is requested for a node outside the given tree."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_LEAF_REFERENCE,
            details=details,
        )


class UnknownHashAlgorithmError(MerkleException):
    """Raised when a hash algorithm name is not available in hashlib."""

    def __init__(self, algorithm: str) -> None:
        super().__init__(
            message=f"Unknown hash algorithm: {algorithm}",
            code=ErrorCodes.UNKNOWN_HASH_ALGORITHM,
            details={"algorithm": algorithm},
        )


class CanonicalizationException(MerkleException):
    """Raised when a block cannot be encoded to bytes."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class ConfigurationException(MerkleException):
    """Raised when configuration values are invalid."""

    def __init__(
        self,
        message: str,
        field_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_path:
            full_details["field_path"] = field_path
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIG_ERROR,
            details=full_details,
        )
