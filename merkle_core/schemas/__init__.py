"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the public API for the schemas module: errors, canonical
JSON, format versions and wire models.
"""

from .versioning import (
    DUMP_FORMAT,
    PROOF_FORMAT,
    SUPPORTED_DUMP_FORMATS,
    UnsupportedDumpFormatError,
    assert_supported_dump_format,
)

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

from .errors import (
    ErrorCodes,
    MerkleError,
    MerkleCommitException,
    CanonicalizationException,
    EncodingError,
    UnknownHashAlgorithmError,
    UnknownEncoderError,
    EmptyTreeError,
    IndexOutOfRangeError,
    LeafNotFoundError,
    MalformedProofError,
    MultiProofError,
    InvalidTreeDumpError,
)

from .models import (
    ProofStepModel,
    ProofDocument,
    MultiProofDocument,
    TreeDumpValue,
    TreeDump,
)

__all__ = [
    # Versioning
    "DUMP_FORMAT",
    "PROOF_FORMAT",
    "SUPPORTED_DUMP_FORMATS",
    "UnsupportedDumpFormatError",
    "assert_supported_dump_format",
    # Canonical JSON
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "ErrorCodes",
    "MerkleError",
    "MerkleCommitException",
    "CanonicalizationException",
    "EncodingError",
    "UnknownHashAlgorithmError",
    "UnknownEncoderError",
    "EmptyTreeError",
    "IndexOutOfRangeError",
    "LeafNotFoundError",
    "MalformedProofError",
    "MultiProofError",
    "InvalidTreeDumpError",
    # Wire models
    "ProofStepModel",
    "ProofDocument",
    "MultiProofDocument",
    "TreeDumpValue",
    "TreeDump",
]
