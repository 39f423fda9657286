"""
Module 01 - Schemas & Canonicalization
File: versioning.py

Purpose: Centralize dump format version constants.
This file must remain tiny and have no imports from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Current tree dump format
DUMP_FORMAT: str = "merkle-commit-v1"

# Current proof document format
PROOF_FORMAT: str = "merkle-proof-v1"

# Type aliases for format tags
DumpFormat = Literal["merkle-commit-v1"]
ProofFormat = Literal["merkle-proof-v1"]

SUPPORTED_DUMP_FORMATS: frozenset[str] = frozenset({"merkle-commit-v1"})


class UnsupportedDumpFormatError(ValueError):
    """Raised when an unsupported dump format is encountered."""

    def __init__(self, fmt: str, supported: frozenset[str] | None = None) -> None:
        self.format = fmt
        self.supported = supported or SUPPORTED_DUMP_FORMATS
        super().__init__(
            f"Unsupported dump format: '{fmt}'. "
            f"Supported formats: {sorted(self.supported)}"
        )


def assert_supported_dump_format(fmt: str) -> None:
    """Raise UnsupportedDumpFormatError if the format tag is unknown."""
    if fmt not in SUPPORTED_DUMP_FORMATS:
        raise UnsupportedDumpFormatError(fmt)
