"""
merkle_core - canonical Merkle commitments over typed leaf values.

Builds deterministic Merkle trees (sorted leaves, sorted-pair hashing,
carry-forward of odd nodes, domain-separated leaf/node hashing) and
produces compact inclusion proofs that verify without the tree.
"""

from merkle_core.merkle import (
    MerkleTree,
    MultiProof,
    Proof,
    ProofStep,
    Side,
    verify,
    verify_leaf_hash,
    verify_multiproof,
)
from merkle_core.schemas.errors import (
    EmptyTreeError,
    EncodingError,
    IndexOutOfRangeError,
    MalformedProofError,
)

__version__ = "0.1.0"

__all__ = [
    "MerkleTree",
    "MultiProof",
    "Proof",
    "ProofStep",
    "Side",
    "verify",
    "verify_leaf_hash",
    "verify_multiproof",
    "EmptyTreeError",
    "EncodingError",
    "IndexOutOfRangeError",
    "MalformedProofError",
]
