"""
Module 04 - Merkle Proofs
Inclusion proofs, multiproofs, strict proof parsing and pure verification.

This module provides:
- Proof / ProofStep / Side: an inclusion proof from a leaf up to the root
- MultiProof: one proof covering several leaves of the same tree
- verify / verify_leaf_hash / verify_multiproof: stateless verification
- process_proof: recompute a root from a leaf hash and its proof

Verification never needs a MerkleTree instance. It folds the proof with
the same sorted-pair rule used at construction:

    running = leaf
    for sibling in proof:
        running = H(0x01 || min(running, sibling) || max(running, sibling))
    valid = running == root

Side flags recorded in a proof describe where the sibling sat in the
sorted pair; the fold does not depend on them.

Verification contract: for well-typed inputs the verify functions never
raise. Undecodable hex, wrong digest widths, values that fail to encode
and truncated or padded proofs all yield False.
"""
from __future__ import annotations

import hmac
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Sequence, Union

from pydantic import ValidationError

from merkle_core.crypto.hashing import (
    HashAlgorithm,
    HashAlgorithmLike,
    from_hex,
    get_hash_algorithm,
    to_hex,
)
from merkle_core.encoding.leaf_encoder import LeafEncoder, TypeSignature, get_encoder
from merkle_core.schemas.errors import MalformedProofError, MerkleCommitException
from merkle_core.schemas.models import MultiProofDocument, ProofDocument, ProofStepModel


logger = logging.getLogger(__name__)


class Side(str, Enum):
    """Position a sibling occupies in a sorted pair."""
    LEFT = "left"
    RIGHT = "right"


def sibling_side(running: bytes, sibling: bytes) -> Side:
    """Side of ``sibling`` when paired with ``running`` under the sorted-pair rule."""
    return Side.LEFT if sibling <= running else Side.RIGHT


def max_proof_length(leaf_count: int) -> int:
    """
    Upper bound on proof length for a tree of ``leaf_count`` leaves.

    Equal to ceil(log2(leaf_count)); a carried-forward leaf may need fewer.
    """
    if leaf_count < 1:
        return 0
    return (leaf_count - 1).bit_length()


@dataclass(frozen=True)
class ProofStep:
    """A sibling digest and the side it occupies."""
    sibling: bytes
    side: Optional[Side] = None


@dataclass(frozen=True)
class Proof:
    """
    An inclusion proof for a single leaf.

    Attributes:
        steps: Sibling steps from the leaf up to the root
        leaf: Leaf digest the proof was generated for, if known
        root: Root the proof was generated against, if known
        index: Input index of the proved value, if known
    """
    steps: tuple[ProofStep, ...] = field(default_factory=tuple)
    leaf: Optional[bytes] = None
    root: Optional[bytes] = None
    index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.index is not None and self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    @property
    def siblings(self) -> list[bytes]:
        """Sibling digests, bottom-up."""
        return [step.sibling for step in self.steps]

    def to_hex_list(self) -> list[str]:
        """Serialize as a list of 0x hex siblings (sides implicit)."""
        return [to_hex(step.sibling) for step in self.steps]

    def to_document(self, hash_algorithm: HashAlgorithmLike = None) -> ProofDocument:
        """Serialize as (sibling, side) pairs; sides stay null without a leaf."""
        algorithm = get_hash_algorithm(hash_algorithm)
        steps = []
        running = self.leaf
        for step in self.steps:
            side = step.side
            if side is None and running is not None:
                side = sibling_side(running, step.sibling)
            if running is not None:
                running = algorithm.hash_node(running, step.sibling)
            steps.append(ProofStepModel(
                sibling=to_hex(step.sibling),
                side=side.value if side is not None else None,
            ))
        return ProofDocument(
            hash_algorithm=algorithm.name,
            index=self.index,
            leaf=to_hex(self.leaf) if self.leaf is not None else None,
            root=to_hex(self.root) if self.root is not None else None,
            steps=steps,
        )

    @classmethod
    def from_hex_list(
        cls,
        items: Sequence[str],
        digest_size: int = 32,
        max_steps: int | None = None,
        leaf: bytes | None = None,
        hash_algorithm: HashAlgorithmLike = None,
    ) -> "Proof":
        """
        Strictly parse a list of 0x hex siblings.

        When ``leaf`` is given, sides are recomputed by replaying the fold.

        Raises:
            MalformedProofError: If the list is not a sequence, has more than
                max_steps elements, or contains bad hex or wrong-width digests
        """
        if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
            raise MalformedProofError(
                f"Proof must be a list of hex strings, got {type(items).__name__}"
            )
        if max_steps is not None and len(items) > max_steps:
            raise MalformedProofError(
                f"Proof has {len(items)} elements, at most {max_steps} allowed",
                details={"length": len(items), "max_steps": max_steps},
            )

        siblings = [_parse_digest(item, digest_size, i) for i, item in enumerate(items)]

        steps: list[ProofStep] = []
        if leaf is not None:
            algorithm = get_hash_algorithm(hash_algorithm)
            running = leaf
            for sibling in siblings:
                steps.append(ProofStep(sibling, sibling_side(running, sibling)))
                running = algorithm.hash_node(running, sibling)
        else:
            steps = [ProofStep(sibling) for sibling in siblings]
        return cls(steps=tuple(steps), leaf=leaf)

    @classmethod
    def from_document(
        cls,
        document: Union[ProofDocument, dict[str, Any], str],
        digest_size: int | None = None,
        max_steps: int | None = None,
    ) -> "Proof":
        """
        Strictly parse a ProofDocument (model, dict, or JSON string).

        Raises:
            MalformedProofError: If the document fails validation or any
                digest has the wrong width
        """
        doc = _validate_model(ProofDocument, document)
        if digest_size is None:
            try:
                digest_size = get_hash_algorithm(doc.hash_algorithm).digest_size
            except MerkleCommitException as e:
                raise MalformedProofError(e.message, details=e.details) from e
        if max_steps is not None and len(doc.steps) > max_steps:
            raise MalformedProofError(
                f"Proof has {len(doc.steps)} elements, at most {max_steps} allowed",
                details={"length": len(doc.steps), "max_steps": max_steps},
            )
        steps = tuple(
            ProofStep(
                _parse_digest(step.sibling, digest_size, i),
                Side(step.side) if step.side is not None else None,
            )
            for i, step in enumerate(doc.steps)
        )
        return cls(
            steps=steps,
            leaf=_parse_digest(doc.leaf, digest_size, None) if doc.leaf else None,
            root=_parse_digest(doc.root, digest_size, None) if doc.root else None,
            index=doc.index,
        )


@dataclass(frozen=True)
class MultiProof:
    """
    A proof for several leaves of one tree.

    Attributes:
        leaf_count: Number of leaves in the tree (layer 0 width)
        positions: Tree positions of the proved leaves, ascending
        leaves: Leaf digests, aligned with positions
        proof: Sibling digests not derivable from the proved leaves,
               in the order verification consumes them
        root: Root the proof was generated against, if known
        indices: Input indices of the proved values, if known
    """
    leaf_count: int
    positions: tuple[int, ...]
    leaves: tuple[bytes, ...]
    proof: tuple[bytes, ...]
    root: Optional[bytes] = None
    indices: tuple[int, ...] = ()

    def to_document(self, hash_algorithm: HashAlgorithmLike = None) -> MultiProofDocument:
        return MultiProofDocument(
            hash_algorithm=get_hash_algorithm(hash_algorithm).name,
            leaf_count=self.leaf_count,
            positions=list(self.positions),
            leaves=[to_hex(leaf) for leaf in self.leaves],
            proof=[to_hex(p) for p in self.proof],
            root=to_hex(self.root) if self.root is not None else None,
        )

    @classmethod
    def from_document(
        cls,
        document: Union[MultiProofDocument, dict[str, Any], str],
        digest_size: int | None = None,
    ) -> "MultiProof":
        """
        Strictly parse a MultiProofDocument.

        Raises:
            MalformedProofError: If the document is invalid
        """
        doc = _validate_model(MultiProofDocument, document)
        if digest_size is None:
            try:
                digest_size = get_hash_algorithm(doc.hash_algorithm).digest_size
            except MerkleCommitException as e:
                raise MalformedProofError(e.message, details=e.details) from e
        if len(doc.positions) != len(doc.leaves):
            raise MalformedProofError(
                f"{len(doc.positions)} positions but {len(doc.leaves)} leaves",
            )
        return cls(
            leaf_count=doc.leaf_count,
            positions=tuple(doc.positions),
            leaves=tuple(_parse_digest(h, digest_size, i) for i, h in enumerate(doc.leaves)),
            proof=tuple(_parse_digest(h, digest_size, i) for i, h in enumerate(doc.proof)),
            root=_parse_digest(doc.root, digest_size, None) if doc.root else None,
        )


ProofLike = Union[Proof, Sequence[Union[str, bytes]]]
DigestLike = Union[bytes, str]


def _validate_model(model: type, document: Any) -> Any:
    if isinstance(document, model):
        return document
    try:
        if isinstance(document, (str, bytes)):
            return model.model_validate_json(document)
        return model.model_validate(document)
    except ValidationError as e:
        raise MalformedProofError(
            f"Invalid {model.__name__}: {e.error_count()} validation error(s)",
            details={"errors": json.loads(e.json())},
        ) from e


def _parse_digest(item: Any, digest_size: int, step: int | None) -> bytes:
    if isinstance(item, (bytes, bytearray)):
        raw = bytes(item)
    else:
        try:
            raw = from_hex(item)
        except ValueError as e:
            raise MalformedProofError(str(e), step=step) from e
    if len(raw) != digest_size:
        raise MalformedProofError(
            f"Digest has {len(raw)} bytes, expected {digest_size}",
            step=step,
            details={"length": len(raw), "expected": digest_size},
        )
    return raw


def _coerce_digest(value: Any, digest_size: int) -> bytes | None:
    """Lenient digest parsing for verification: None instead of raising."""
    try:
        return _parse_digest(value, digest_size, None)
    except MalformedProofError:
        return None


def _coerce_siblings(proof: Any, digest_size: int) -> list[bytes] | None:
    if isinstance(proof, Proof):
        items: Any = proof.siblings
    elif isinstance(proof, (str, bytes)) or not isinstance(proof, Sequence):
        return None
    else:
        items = proof

    siblings: list[bytes] = []
    for item in items:
        sibling = _coerce_digest(item, digest_size)
        if sibling is None:
            return None
        siblings.append(sibling)
    return siblings


def process_proof(
    leaf: bytes,
    siblings: Sequence[bytes],
    algorithm: HashAlgorithmLike = None,
) -> bytes:
    """
    Recompute the root implied by a leaf digest and its siblings.

    Example:
        >>> alg = get_hash_algorithm("sha256")
        >>> a, b = alg.hash_leaf(b"a"), alg.hash_leaf(b"b")
        >>> process_proof(a, [b]) == alg.hash_node(a, b)
        True
    """
    alg = get_hash_algorithm(algorithm)
    running = leaf
    for sibling in siblings:
        running = alg.hash_node(running, sibling)
    return running


def verify_leaf_hash(
    leaf_hash: DigestLike,
    proof: ProofLike,
    root: DigestLike,
    algorithm: HashAlgorithmLike = None,
) -> bool:
    """
    Verify that a precomputed leaf digest is committed to by ``root``.

    Args:
        leaf_hash: Leaf digest (bytes or 0x hex)
        proof: Proof, or a list of sibling digests (bytes or 0x hex)
        root: Claimed root (bytes or 0x hex)
        algorithm: Hash algorithm the tree was built with

    Returns:
        True if folding the proof from the leaf reproduces the root
    """
    alg = get_hash_algorithm(algorithm)
    leaf = _coerce_digest(leaf_hash, alg.digest_size)
    claimed = _coerce_digest(root, alg.digest_size)
    siblings = _coerce_siblings(proof, alg.digest_size)
    if leaf is None or claimed is None or siblings is None:
        logger.debug("Proof rejected: malformed leaf, root or proof")
        return False
    return hmac.compare_digest(process_proof(leaf, siblings, alg), claimed)


def verify(
    value: Any,
    proof: ProofLike,
    root: DigestLike,
    types: TypeSignature,
    algorithm: HashAlgorithmLike = None,
    encoder: Union[LeafEncoder, str, None] = None,
) -> bool:
    """
    Verify that a leaf value is committed to by ``root``.

    The value is re-encoded and re-hashed with the leaf domain prefix, then
    the proof is folded with the sorted-pair rule.

    Args:
        value: Leaf value (tuple of fields, or a scalar for one-field types)
        proof: Proof, or a list of sibling digests
        root: Claimed root (bytes or 0x hex)
        types: Declared type signature of the leaf
        algorithm: Hash algorithm the tree was built with
        encoder: Leaf encoder the tree was built with

    Returns:
        True if the proof is valid, False otherwise

    Example:
        >>> from merkle_core.merkle import MerkleTree
        >>> tree = MerkleTree.of([["Alice"], ["Bob"], ["Charlie"]], ["string"])
        >>> verify(["Alice"], tree.get_proof(0), tree.root, ["string"])
        True
    """
    alg = get_hash_algorithm(algorithm)
    enc = get_encoder(encoder)
    try:
        leaf = alg.hash_leaf(enc.encode(value, types))
    except MerkleCommitException as e:
        logger.debug(f"Proof rejected: leaf value does not encode ({e.code})")
        return False
    return verify_leaf_hash(leaf, proof, root, alg)


def verify_multiproof(
    multiproof: MultiProof,
    root: DigestLike,
    algorithm: HashAlgorithmLike = None,
) -> bool:
    """
    Verify a multiproof by replaying the tree layer by layer.

    Pairing follows the construction rules: positions 2k and 2k+1 combine,
    and an unpaired last node is carried forward unchanged.

    Returns:
        True if the multiproof reproduces the root and consumes every
        proof element, False otherwise
    """
    alg = get_hash_algorithm(algorithm)
    claimed = _coerce_digest(root, alg.digest_size)
    if claimed is None or not isinstance(multiproof, MultiProof):
        return False

    return _replay_multiproof(multiproof, claimed, alg)


def _replay_multiproof(multiproof: MultiProof, claimed: bytes, alg: HashAlgorithm) -> bool:
    width = multiproof.leaf_count
    positions = multiproof.positions
    if not isinstance(width, int) or width < 1:
        return False
    if len(positions) == 0 or len(positions) != len(multiproof.leaves):
        return False
    if len(set(positions)) != len(positions):
        return False

    nodes: dict[int, bytes] = {}
    for pos, leaf in zip(positions, multiproof.leaves):
        if not isinstance(pos, int) or not 0 <= pos < width:
            return False
        digest = _coerce_digest(leaf, alg.digest_size)
        if digest is None:
            return False
        nodes[pos] = digest

    proof = _coerce_siblings(list(multiproof.proof), alg.digest_size)
    if proof is None:
        return False
    cursor = 0

    while width > 1:
        parents: dict[int, bytes] = {}
        for pos in sorted(nodes):
            if pos % 2 == 1 and pos - 1 in nodes:
                continue
            sibling_pos = pos ^ 1
            if sibling_pos >= width:
                parents[pos // 2] = nodes[pos]
                continue
            if sibling_pos in nodes:
                sibling = nodes[sibling_pos]
            else:
                if cursor >= len(proof):
                    return False
                sibling = proof[cursor]
                cursor += 1
            parents[pos // 2] = alg.hash_node(nodes[pos], sibling)
        nodes = parents
        width = (width + 1) // 2

    if cursor != len(proof):
        return False
    return hmac.compare_digest(nodes[0], claimed)


__all__ = [
    "Side",
    "ProofStep",
    "Proof",
    "MultiProof",
    "sibling_side",
    "max_proof_length",
    "process_proof",
    "verify",
    "verify_leaf_hash",
    "verify_multiproof",
]
