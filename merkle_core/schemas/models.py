"""
Module 01 - Schemas & Canonicalization
File: models.py

Purpose: Wire models for proofs, multiproofs and tree dumps.

All digests travel as 0x-prefixed lowercase or uppercase hex strings.
These models validate structure only; digest widths and tree consistency
are checked by the Merkle module when the models are turned back into
proofs and trees.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .versioning import DUMP_FORMAT, PROOF_FORMAT, DumpFormat, ProofFormat


HexDigest = Annotated[str, Field(pattern=r"^0[xX]([0-9a-fA-F]{2})+$")]


class ProofStepModel(BaseModel):
    """One step of an inclusion proof; side is null when it cannot be derived."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sibling: HexDigest = Field(..., description="Sibling digest")
    side: Optional[Literal["left", "right"]] = Field(
        default=None, description="Position of the sibling in the pair"
    )


class ProofDocument(BaseModel):
    """
    Serialized inclusion proof.

    Steps run from the leaf up to the root.
    """

    model_config = ConfigDict(extra="forbid")

    format: ProofFormat = Field(default=PROOF_FORMAT)
    hash_algorithm: str = Field(..., min_length=1)
    index: int | None = Field(default=None, ge=0, description="Input index of the proved leaf")
    leaf: HexDigest | None = Field(default=None, description="Leaf digest")
    root: HexDigest | None = Field(default=None, description="Root the proof was generated against")
    steps: list[ProofStepModel] = Field(default_factory=list)


class MultiProofDocument(BaseModel):
    """Serialized multiproof covering several leaves of one tree."""

    model_config = ConfigDict(extra="forbid")

    format: ProofFormat = Field(default=PROOF_FORMAT)
    hash_algorithm: str = Field(..., min_length=1)
    leaf_count: int = Field(..., ge=1)
    positions: list[int] = Field(..., min_length=1, description="Tree positions of the proved leaves")
    leaves: list[HexDigest] = Field(..., min_length=1)
    proof: list[HexDigest] = Field(default_factory=list)
    root: HexDigest | None = Field(default=None)


class TreeDumpValue(BaseModel):
    """An input value and the leaf position it occupies."""

    model_config = ConfigDict(extra="forbid")

    value: list[Any] | None = Field(default=None, description="Original field values, if known")
    tree_index: int = Field(..., ge=0)


class TreeDump(BaseModel):
    """
    Complete serializable description of a Merkle tree.

    Sufficient to rebuild the tree and regenerate every proof without
    re-encoding the original values.
    """

    model_config = ConfigDict(extra="forbid")

    format: DumpFormat = Field(default=DUMP_FORMAT)
    hash_algorithm: str = Field(..., min_length=1)
    encoder: str | None = Field(default=None)
    leaf_encoding: list[str] | None = Field(default=None, description="Declared type signature")
    sort_leaves: bool = Field(default=True)
    deduplicate: bool = Field(default=False)
    layers: list[list[HexDigest]] = Field(..., min_length=1, description="Leaf layer first, root layer last")
    values: list[TreeDumpValue] = Field(..., min_length=1)

    @property
    def root(self) -> str:
        return self.layers[-1][0] if self.layers[-1] else ""
