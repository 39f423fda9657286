"""
Module 04 - Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: immutable tree over typed leaf values
- Proof / MultiProof: inclusion proofs
- verify / verify_leaf_hash / verify_multiproof: stateless verification

Canonical Commitment Rules:
1. Leaf hashing: H(0x00 || encode(value, types))
2. Parent hashing: H(0x01 || min(left, right) || max(left, right))
3. Leaf order: sorted by leaf hash (default) or caller order
4. Odd layers: last node carried forward, never duplicated
5. Empty tree: rejected with EmptyTreeError
6. Single leaf: root = leaf hash, empty proof

Usage:
    from merkle_core.merkle import MerkleTree, verify

    tree = MerkleTree.of([["Alice"], ["Bob"], ["Charlie"]], ["string"])
    proof = tree.get_proof(0)
    assert verify(["Alice"], proof, tree.root, ["string"])
"""
from .merkle_proofs import (
    Side,
    ProofStep,
    Proof,
    MultiProof,
    sibling_side,
    max_proof_length,
    process_proof,
    verify,
    verify_leaf_hash,
    verify_multiproof,
)

from .merkle_tree import (
    build_layers,
    compute_root,
    MerkleTree,
)


__all__ = [
    # Core types
    "MerkleTree",
    "Proof",
    "ProofStep",
    "Side",
    "MultiProof",
    # Construction
    "build_layers",
    "compute_root",
    # Verification
    "sibling_side",
    "max_proof_length",
    "process_proof",
    "verify",
    "verify_leaf_hash",
    "verify_multiproof",
]
