"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for Merkle commitments.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Propagation policy:
- Encoding and construction errors are raised immediately; no partially
  built tree is ever returned.
- Verification never raises on cryptographically invalid input, it returns
  False. MalformedProofError is raised only by strict proof parsing.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Encoding & Canonicalization Errors
    LEAF_ENCODING_ERROR = "LEAF_ENCODING_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"
    UNKNOWN_HASH_ALGORITHM = "UNKNOWN_HASH_ALGORITHM"
    UNKNOWN_ENCODER = "UNKNOWN_ENCODER"

    # Tree Construction Errors
    EMPTY_TREE = "EMPTY_TREE"
    INVALID_TREE_DUMP = "INVALID_TREE_DUMP"

    # Proof Errors
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"
    MALFORMED_PROOF = "MALFORMED_PROOF"
    MULTIPROOF_INVALID = "MULTIPROOF_INVALID"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class MerkleError(BaseModel):
    """
    Base error model for structured error communication.

    Used by callers (e.g. the CLI) that report errors as data rather
    than raising them.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_TREE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleCommitException":
        """Convert this error model to a raised exception."""
        return MerkleCommitException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleCommitException(Exception):
    """
    Base exception for all Merkle commitment errors.

    This exception carries structured error information and can be
    converted to/from MerkleError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleError:
        """Convert this exception to a MerkleError model."""
        return MerkleError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(MerkleCommitException, ValueError):
    """Exception raised when canonical serialization fails."""

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


class EncodingError(MerkleCommitException, ValueError):
    """Raised when a leaf value does not match its declared type signature."""

    def __init__(
        self,
        message: str,
        field_index: int | None = None,
        declared_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field_index is not None:
            full_details["field_index"] = field_index
        if declared_type:
            full_details["declared_type"] = declared_type
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_ENCODING_ERROR,
            details=full_details,
        )


class UnknownHashAlgorithmError(MerkleCommitException, ValueError):
    """Raised when a hash algorithm name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(
            message=f"Unknown hash algorithm: {name!r}",
            code=ErrorCodes.UNKNOWN_HASH_ALGORITHM,
            details={"name": name, "available": available or []},
        )


class UnknownEncoderError(MerkleCommitException, ValueError):
    """Raised when a leaf encoder name is not registered."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(
            message=f"Unknown leaf encoder: {name!r}",
            code=ErrorCodes.UNKNOWN_ENCODER,
            details={"name": name, "available": available or []},
        )


class EmptyTreeError(MerkleCommitException, ValueError):
    """Raised when a tree is constructed from zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from an empty leaf set") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class IndexOutOfRangeError(MerkleCommitException, IndexError):
    """Raised when a proof is requested for a leaf index that does not exist."""

    def __init__(self, index: Any, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index!r} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": repr(index), "leaf_count": leaf_count},
        )
        self.index = index
        self.leaf_count = leaf_count


class LeafNotFoundError(MerkleCommitException, LookupError):
    """Raised when a value is not one of the tree's leaves."""

    def __init__(self, message: str = "Leaf is not in tree") -> None:
        super().__init__(message=message, code=ErrorCodes.LEAF_NOT_FOUND)


class MalformedProofError(MerkleCommitException, ValueError):
    """
    Raised by strict proof deserialization when a proof is structurally
    invalid (wrong element count, bad hex, wrong digest length).

    Never raised by verification, which returns False instead.
    """

    def __init__(
        self,
        message: str,
        step: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if step is not None:
            full_details["step"] = step
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF,
            details=full_details,
        )


class MultiProofError(MerkleCommitException, ValueError):
    """Raised when a multiproof cannot be generated for the requested indices."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MULTIPROOF_INVALID,
            details=details,
        )


class InvalidTreeDumpError(MerkleCommitException, ValueError):
    """Raised when a tree dump is inconsistent or cannot be loaded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_TREE_DUMP,
            details=details,
        )
