"""
Module 04 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, dump and load.

This module provides:
- build_layers: compute every layer from an ordered list of leaf hashes
- compute_root: root of a list of leaf hashes
- MerkleTree: immutable tree over typed leaf values

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(0x00 || encode(value, types))
2. Parent hashing: parent = H(0x01 || min(left, right) || max(left, right))
3. Leaf order: leaf hashes are sorted lexicographically (sort_leaves=True,
   the default), so the root depends only on the set of leaves. With
   sort_leaves=False the caller's order is kept and proofs depend on it.
4. Odd layers: the last node is carried forward unchanged to the next
   layer. It is never duplicated, so no phantom leaf can be proven.
5. Empty leaf sets are rejected with EmptyTreeError.
6. Single leaf: root = leaf hash, proof is empty.

Leaf indices in the public API (get_proof, leaf_lookup, entries) always
refer to the caller's input order; tree positions are internal.

Concurrency Notes:
- Layers whose pair count reaches parallel_threshold are hashed on a
  ThreadPoolExecutor. A layer is complete before the next one starts.
- A built tree is never mutated; proofs may be generated concurrently.
"""
from __future__ import annotations

import json
import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Iterable, Iterator, Optional, Sequence, Union

from pydantic import ValidationError

from merkle_core.config.runtime import TreeConfig
from merkle_core.crypto.hashing import (
    HashAlgorithm,
    HashAlgorithmLike,
    from_hex,
    get_hash_algorithm,
    to_hex,
)
from merkle_core.encoding.leaf_encoder import (
    LeafEncoder,
    TypeSignature,
    get_encoder,
    normalize_types,
)
from merkle_core.merkle.merkle_proofs import (
    DigestLike,
    MultiProof,
    Proof,
    ProofLike,
    ProofStep,
    sibling_side,
    verify as verify_value,
    verify_leaf_hash,
    verify_multiproof,
)
from merkle_core.schemas.canonical import canonicalize_value
from merkle_core.schemas.errors import (
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidTreeDumpError,
    LeafNotFoundError,
    MerkleCommitException,
    MultiProofError,
)
from merkle_core.schemas.models import TreeDump, TreeDumpValue
from merkle_core.schemas.versioning import (
    DUMP_FORMAT,
    UnsupportedDumpFormatError,
    assert_supported_dump_format,
)


logger = logging.getLogger(__name__)


def _hash_pairs(algorithm: HashAlgorithm, layer: Sequence[bytes], start: int, stop: int) -> list[bytes]:
    """Hash pairs [start, stop) of a layer (pair k covers nodes 2k, 2k+1)."""
    return [algorithm.hash_node(layer[2 * k], layer[2 * k + 1]) for k in range(start, stop)]


def _next_layer(
    layer: Sequence[bytes],
    algorithm: HashAlgorithm,
    executor: Executor | None = None,
    workers: int = 1,
) -> list[bytes]:
    """
    Combine one layer into the next.

    When an executor is given the pairs are split into contiguous chunks,
    one per worker, and results are reassembled in order.
    """
    pairs = len(layer) // 2

    if executor is None or workers <= 1:
        parents = _hash_pairs(algorithm, layer, 0, pairs)
    else:
        chunk = -(-pairs // workers)
        bounds = [(s, min(s + chunk, pairs)) for s in range(0, pairs, chunk)]
        parents = []
        for part in executor.map(lambda b: _hash_pairs(algorithm, layer, b[0], b[1]), bounds):
            parents.extend(part)

    # Carry forward the unpaired last node
    if len(layer) % 2 == 1:
        parents.append(layer[-1])
    return parents


def build_layers(
    leaf_hashes: Sequence[bytes],
    algorithm: HashAlgorithmLike = None,
    parallel_threshold: int | None = None,
    max_workers: int | None = None,
) -> list[list[bytes]]:
    """
    Build all layers of a tree from ordered leaf hashes.

    Args:
        leaf_hashes: Leaf digests in tree order
        algorithm: Hash algorithm (instance or name)
        parallel_threshold: Minimum pair count for a layer to be hashed on a
            thread pool; None disables parallel hashing
        max_workers: Thread pool size (defaults to os.cpu_count())

    Returns:
        Layers, leaf layer first; the last layer holds only the root

    Raises:
        EmptyTreeError: If leaf_hashes is empty

    Example:
        >>> alg = get_hash_algorithm("sha256")
        >>> a, b, c = (alg.hash_leaf(x) for x in (b"a", b"b", b"c"))
        >>> layers = build_layers([a, b, c], alg)
        >>> [len(layer) for layer in layers]
        [3, 2, 1]
        >>> layers[1][1] == c
        True
    """
    if len(leaf_hashes) == 0:
        raise EmptyTreeError()

    alg = get_hash_algorithm(algorithm)
    layers: list[list[bytes]] = [list(leaf_hashes)]
    workers = max_workers or os.cpu_count() or 1
    executor: ThreadPoolExecutor | None = None

    try:
        while len(layers[-1]) > 1:
            current = layers[-1]
            use_pool = (
                parallel_threshold is not None
                and workers > 1
                and len(current) // 2 >= parallel_threshold
            )
            if use_pool and executor is None:
                logger.debug(f"Hashing layers on {workers} threads")
                executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="merkle")
            layers.append(_next_layer(current, alg, executor if use_pool else None, workers))
    finally:
        if executor is not None:
            executor.shutdown(wait=True)

    return layers


def compute_root(
    leaf_hashes: Sequence[bytes],
    algorithm: HashAlgorithmLike = None,
    sort_leaves: bool = True,
) -> bytes:
    """
    Compute the root of a list of leaf hashes.

    Raises:
        EmptyTreeError: If leaf_hashes is empty
    """
    ordered = sorted(leaf_hashes) if sort_leaves else list(leaf_hashes)
    return build_layers(ordered, algorithm)[-1][0]


def _order_leaves(
    hashes: Sequence[bytes],
    sort_leaves: bool,
    deduplicate: bool,
) -> tuple[list[bytes], list[int]]:
    """
    Fix the leaf layer and map every input index to its tree position.

    Returns:
        (leaf layer, tree position per input index)
    """
    kept: list[tuple[bytes, int]] = []
    seen: set[bytes] = set()
    for i, h in enumerate(hashes):
        if deduplicate:
            if h in seen:
                continue
            seen.add(h)
        kept.append((h, i))

    if sort_leaves:
        # Stable: equal digests keep input order
        kept.sort(key=lambda entry: entry[0])

    leaf_layer = [h for h, _ in kept]
    position_of_input: dict[int, int] = {i: pos for pos, (_, i) in enumerate(kept)}
    position_of_hash: dict[bytes, int] = {}
    for pos, (h, _) in enumerate(kept):
        position_of_hash.setdefault(h, pos)

    tree_indices = [
        position_of_input.get(i, position_of_hash[h])
        for i, h in enumerate(hashes)
    ]
    return leaf_layer, tree_indices


class MerkleTree:
    """
    Immutable Merkle tree over typed leaf values.

    Build with MerkleTree.of (values) or MerkleTree.from_leaf_hashes
    (precomputed digests), or restore one with MerkleTree.load.

    Example:
        >>> tree = MerkleTree.of([["Alice"], ["Bob"], ["Charlie"]], ["string"])
        >>> proof = tree.get_proof(0)
        >>> MerkleTree.verify(["Alice"], proof, tree.root, ["string"])
        True
    """

    def __init__(
        self,
        layers: Sequence[Sequence[bytes]],
        tree_indices: Sequence[int],
        algorithm: HashAlgorithm,
        values: Optional[Sequence[Any]] = None,
        types: Optional[tuple[str, ...]] = None,
        encoder: Optional[LeafEncoder] = None,
        sort_leaves: bool = True,
        deduplicate: bool = False,
    ) -> None:
        if not layers or not layers[0]:
            raise EmptyTreeError()
        self._layers: tuple[tuple[bytes, ...], ...] = tuple(tuple(layer) for layer in layers)
        self._tree_indices: tuple[int, ...] = tuple(tree_indices)
        self._algorithm = algorithm
        self._values: Optional[tuple[Any, ...]] = tuple(values) if values is not None else None
        self._types = types
        self._encoder = encoder
        self._sort_leaves = sort_leaves
        self._deduplicate = deduplicate

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(
        cls,
        values: Iterable[Any],
        types: TypeSignature,
        algorithm: HashAlgorithmLike = None,
        encoder: Union[LeafEncoder, str, None] = None,
        sort_leaves: Optional[bool] = None,
        deduplicate: Optional[bool] = None,
        config: Optional[TreeConfig] = None,
    ) -> "MerkleTree":
        """
        Build a tree from typed leaf values.

        Explicit arguments override the matching fields of ``config``;
        unspecified ones fall back to TreeConfig defaults.

        Args:
            values: Leaf values, each a tuple of fields (or a scalar for a
                one-field signature)
            types: Declared type signature shared by every leaf
            algorithm: Hash algorithm (instance or registered name)
            encoder: Leaf encoder (instance or registered name)
            sort_leaves: Sort leaf hashes before building
            deduplicate: Drop repeated leaf values
            config: Tree configuration

        Raises:
            EmptyTreeError: If values is empty
            EncodingError: If any value does not match the signature
        """
        config = config or TreeConfig()
        alg = get_hash_algorithm(algorithm if algorithm is not None else config.hash_algorithm)
        enc = get_encoder(encoder if encoder is not None else config.encoder)
        sort_leaves = config.sort_leaves if sort_leaves is None else sort_leaves
        deduplicate = config.deduplicate if deduplicate is None else deduplicate

        values = list(values)
        if not values:
            raise EmptyTreeError()
        declared = normalize_types(types)

        hashes = [alg.hash_leaf(enc.encode(value, declared)) for value in values]
        leaf_layer, tree_indices = _order_leaves(hashes, sort_leaves, deduplicate)
        layers = build_layers(
            leaf_layer,
            alg,
            parallel_threshold=config.parallel_threshold,
            max_workers=config.max_workers,
        )

        tree = cls(
            layers,
            tree_indices,
            alg,
            values=values,
            types=declared,
            encoder=enc,
            sort_leaves=sort_leaves,
            deduplicate=deduplicate,
        )
        logger.info(
            f"Built Merkle tree: {len(values)} values, {len(leaf_layer)} leaves, "
            f"{len(layers)} layers, root={tree.root_hex}"
        )
        return tree

    @classmethod
    def from_leaf_hashes(
        cls,
        leaf_hashes: Iterable[bytes],
        algorithm: HashAlgorithmLike = None,
        sort_leaves: Optional[bool] = None,
        deduplicate: Optional[bool] = None,
        config: Optional[TreeConfig] = None,
    ) -> "MerkleTree":
        """
        Build a tree from precomputed leaf digests.

        Such a tree has no values, so lookups go through leaf hashes.
        Explicit arguments override the matching fields of ``config``.

        Raises:
            EmptyTreeError: If leaf_hashes is empty
            ValueError: If a digest has the wrong width
        """
        config = config or TreeConfig()
        alg = get_hash_algorithm(algorithm if algorithm is not None else config.hash_algorithm)
        sort_leaves = config.sort_leaves if sort_leaves is None else sort_leaves
        deduplicate = config.deduplicate if deduplicate is None else deduplicate
        hashes = [bytes(h) for h in leaf_hashes]
        if not hashes:
            raise EmptyTreeError()
        for i, h in enumerate(hashes):
            if len(h) != alg.digest_size:
                raise ValueError(
                    f"Leaf hash {i} has {len(h)} bytes, expected {alg.digest_size}"
                )

        leaf_layer, tree_indices = _order_leaves(hashes, sort_leaves, deduplicate)
        layers = build_layers(
            leaf_layer,
            alg,
            parallel_threshold=config.parallel_threshold,
            max_workers=config.max_workers,
        )
        return cls(layers, tree_indices, alg, sort_leaves=sort_leaves, deduplicate=deduplicate)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        return self._layers[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._algorithm

    @property
    def types(self) -> Optional[tuple[str, ...]]:
        return self._types

    @property
    def leaf_count(self) -> int:
        """Number of leaves in the leaf layer (after deduplication)."""
        return len(self._layers[0])

    @property
    def layers(self) -> tuple[tuple[bytes, ...], ...]:
        return self._layers

    @property
    def depth(self) -> int:
        """Number of combine layers above the leaves."""
        return len(self._layers) - 1

    def __len__(self) -> int:
        return len(self._tree_indices)

    def __repr__(self) -> str:
        return f"MerkleTree(values={len(self)}, leaves={self.leaf_count}, root={self.root_hex})"

    def entries(self) -> Iterator[tuple[int, Any]]:
        """Yield (input index, value); values are None for hash-only trees."""
        for i in range(len(self)):
            yield i, self._values[i] if self._values is not None else None

    def tree_index(self, index: int) -> int:
        """Position in the leaf layer of the value at input ``index``."""
        self._check_index(index)
        return self._tree_indices[index]

    def leaf_hash_at(self, index: int) -> bytes:
        """Leaf digest of the value at input ``index``."""
        return self._layers[0][self.tree_index(index)]

    def leaf_hash(self, value: Any) -> bytes:
        """
        Leaf digest of ``value`` under this tree's encoding and algorithm.

        Raises:
            EncodingError: If the value does not match the signature
            LeafNotFoundError: If the tree was built from leaf hashes
        """
        if self._types is None or self._encoder is None:
            raise LeafNotFoundError("Tree was built from leaf hashes and has no leaf encoding")
        return self._algorithm.hash_leaf(self._encoder.encode(value, self._types))

    def lookup_leaf_hash(self, leaf_hash: bytes) -> int:
        """
        Input index of the first value whose leaf digest is ``leaf_hash``.

        Raises:
            LeafNotFoundError: If no leaf has that digest
        """
        leaf_layer = self._layers[0]
        for i, pos in enumerate(self._tree_indices):
            if leaf_layer[pos] == leaf_hash:
                return i
        raise LeafNotFoundError(f"No leaf with digest {to_hex(leaf_hash)}")

    def leaf_lookup(self, value: Any) -> int:
        """
        Input index of the first occurrence of ``value``.

        Raises:
            LeafNotFoundError: If the value is not a leaf
            EncodingError: If the value does not match the signature
        """
        return self.lookup_leaf_hash(self.leaf_hash(value))

    # ------------------------------------------------------------------
    # Proofs
    # ------------------------------------------------------------------

    def _check_index(self, index: Any) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeError(index, len(self))
        if not 0 <= index < len(self):
            raise IndexOutOfRangeError(index, len(self))

    def _proof_at_position(self, position: int) -> tuple[ProofStep, ...]:
        steps: list[ProofStep] = []
        pos = position
        for layer in self._layers[:-1]:
            sibling_pos = pos ^ 1
            if sibling_pos < len(layer):
                sibling = layer[sibling_pos]
                steps.append(ProofStep(sibling, sibling_side(layer[pos], sibling)))
            pos //= 2
        return tuple(steps)

    def get_proof(self, index: int) -> Proof:
        """
        Inclusion proof for the value at input ``index``.

        Walks from the leaf to the root recording each sibling and its side.
        Layers in which the node is carried forward contribute no step, so
        the proof has at most ceil(log2(leaf_count)) steps.

        Raises:
            IndexOutOfRangeError: Unless 0 <= index < len(self)
        """
        self._check_index(index)
        position = self._tree_indices[index]
        return Proof(
            steps=self._proof_at_position(position),
            leaf=self._layers[0][position],
            root=self.root,
            index=index,
        )

    def get_proof_for_value(self, value: Any) -> Proof:
        """
        Inclusion proof for ``value``.

        Raises:
            LeafNotFoundError: If the value is not a leaf
        """
        return self.get_proof(self.leaf_lookup(value))

    def get_multiproof(self, indices: Sequence[int]) -> MultiProof:
        """
        One proof covering the values at several input indices.

        Raises:
            MultiProofError: If indices is empty or has duplicates
            IndexOutOfRangeError: If any index is out of range
        """
        indices = list(indices)
        if not indices:
            raise MultiProofError("Multiproof needs at least one index")
        if len(set(indices)) != len(indices):
            raise MultiProofError("Multiproof indices must be unique", details={"indices": indices})
        for index in indices:
            self._check_index(index)

        positions = sorted({self._tree_indices[i] for i in indices})
        known = set(positions)
        proof: list[bytes] = []
        for layer in self._layers[:-1]:
            parents: set[int] = set()
            for pos in sorted(known):
                if pos % 2 == 1 and pos - 1 in known:
                    continue
                sibling_pos = pos ^ 1
                if sibling_pos < len(layer) and sibling_pos not in known:
                    proof.append(layer[sibling_pos])
                parents.add(pos // 2)
            known = parents

        return MultiProof(
            leaf_count=self.leaf_count,
            positions=tuple(positions),
            leaves=tuple(self._layers[0][p] for p in positions),
            proof=tuple(proof),
            root=self.root,
            indices=tuple(indices),
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    @staticmethod
    def verify(
        value: Any,
        proof: ProofLike,
        root: DigestLike,
        types: TypeSignature,
        algorithm: HashAlgorithmLike = None,
        encoder: Union[LeafEncoder, str, None] = None,
    ) -> bool:
        """Stateless verification; see merkle_proofs.verify."""
        return verify_value(value, proof, root, types, algorithm, encoder)

    def verify_proof(self, value: Any, proof: ProofLike) -> bool:
        """Verify ``proof`` for ``value`` against this tree's root."""
        return verify_value(value, proof, self.root, self._types or (), self._algorithm, self._encoder)

    def verify_leaf_hash(self, leaf_hash: DigestLike, proof: ProofLike) -> bool:
        return verify_leaf_hash(leaf_hash, proof, self.root, self._algorithm)

    def verify_multiproof(self, multiproof: MultiProof) -> bool:
        return verify_multiproof(multiproof, self.root, self._algorithm)

    # ------------------------------------------------------------------
    # Dump / load
    # ------------------------------------------------------------------

    def dump(self) -> TreeDump:
        """Serializable description of the whole tree."""
        values = []
        for i, pos in enumerate(self._tree_indices):
            value = None
            if self._values is not None:
                raw = self._values[i]
                value = canonicalize_value(list(raw) if isinstance(raw, (list, tuple)) else [raw])
            values.append(TreeDumpValue(value=value, tree_index=pos))

        return TreeDump(
            format=DUMP_FORMAT,
            hash_algorithm=self._algorithm.name,
            encoder=self._encoder.name if self._encoder is not None else None,
            leaf_encoding=list(self._types) if self._types is not None else None,
            sort_leaves=self._sort_leaves,
            deduplicate=self._deduplicate,
            layers=[[to_hex(h) for h in layer] for layer in self._layers],
            values=values,
        )

    @classmethod
    def load(
        cls,
        dump: Union[TreeDump, dict[str, Any], str],
        algorithm: HashAlgorithmLike = None,
        encoder: Union[LeafEncoder, str, None] = None,
    ) -> "MerkleTree":
        """
        Restore a tree from a dump and validate it.

        Args:
            dump: TreeDump model, dict, or JSON string
            algorithm: Override for the dump's hash algorithm name
            encoder: Override for the dump's encoder name

        Raises:
            InvalidTreeDumpError: If the dump is malformed or inconsistent
        """
        # Non-string tags are left to model validation
        if isinstance(dump, dict) and isinstance(dump.get("format", DUMP_FORMAT), str):
            try:
                assert_supported_dump_format(dump.get("format", DUMP_FORMAT))
            except UnsupportedDumpFormatError as e:
                raise InvalidTreeDumpError(str(e), details={"format": e.format}) from e

        if not isinstance(dump, TreeDump):
            try:
                if isinstance(dump, (str, bytes)):
                    dump = TreeDump.model_validate_json(dump)
                else:
                    dump = TreeDump.model_validate(dump)
            except ValidationError as e:
                raise InvalidTreeDumpError(
                    f"Invalid tree dump: {e.error_count()} validation error(s)",
                    details={"errors": json.loads(e.json())},
                ) from e

        try:
            alg = get_hash_algorithm(algorithm if algorithm is not None else dump.hash_algorithm)
            enc = None
            types = None
            if dump.leaf_encoding is not None:
                types = normalize_types(dump.leaf_encoding)
                enc = get_encoder(encoder if encoder is not None else dump.encoder)
        except MerkleCommitException as e:
            raise InvalidTreeDumpError(e.message, details=e.details) from e

        layers: list[list[bytes]] = []
        for level, layer in enumerate(dump.layers):
            decoded = []
            for h in layer:
                digest = from_hex(h)
                if len(digest) != alg.digest_size:
                    raise InvalidTreeDumpError(
                        f"Digest in layer {level} has {len(digest)} bytes, expected {alg.digest_size}",
                    )
                decoded.append(digest)
            layers.append(decoded)
        if not layers[0]:
            raise InvalidTreeDumpError("Dump has an empty leaf layer")

        present = [entry.value is not None for entry in dump.values]
        has_values = all(present)
        if any(present) and not has_values:
            raise InvalidTreeDumpError("Dump mixes entries with and without values")
        if has_values and types is None:
            raise InvalidTreeDumpError("Dump has values but no leaf encoding")

        tree = cls(
            layers,
            [entry.tree_index for entry in dump.values],
            alg,
            values=[entry.value for entry in dump.values] if has_values else None,
            types=types if has_values else None,
            encoder=enc if has_values else None,
            sort_leaves=dump.sort_leaves,
            deduplicate=dump.deduplicate,
        )
        tree.validate()
        return tree

    def validate(self) -> None:
        """
        Check the tree's internal consistency.

        Recomputes every layer from the leaf layer, checks the leaf order
        policy, checks that every leaf is owned by a value entry, and
        re-encodes each value against its leaf.

        Raises:
            InvalidTreeDumpError: If any check fails
        """
        leaf_layer = list(self._layers[0])
        if self._sort_leaves and leaf_layer != sorted(leaf_layer):
            raise InvalidTreeDumpError("Leaf layer is not sorted")

        expected = build_layers(leaf_layer, self._algorithm)
        if [list(layer) for layer in self._layers] != expected:
            raise InvalidTreeDumpError("Internal layers do not match the leaf layer")

        for i, pos in enumerate(self._tree_indices):
            if not 0 <= pos < len(leaf_layer):
                raise InvalidTreeDumpError(
                    f"Value {i} points at tree index {pos}, outside {len(leaf_layer)} leaves",
                )

        orphans = sorted(set(range(len(leaf_layer))) - set(self._tree_indices))
        if orphans:
            raise InvalidTreeDumpError(
                f"{len(orphans)} leaf position(s) have no value entry",
                details={"positions": orphans},
            )

        if self._values is not None:
            for i, value in enumerate(self._values):
                try:
                    digest = self.leaf_hash(value)
                except MerkleCommitException as e:
                    raise InvalidTreeDumpError(f"Value {i} does not encode: {e.message}") from e
                if digest != leaf_layer[self._tree_indices[i]]:
                    raise InvalidTreeDumpError(f"Value {i} does not match its leaf hash")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _resolve_carry(self, level: int, pos: int) -> tuple[int, int]:
        """Follow a carried-forward node down to the layer where it was formed."""
        while level > 0 and 2 * pos + 1 >= len(self._layers[level - 1]):
            level, pos = level - 1, 2 * pos
        return level, pos

    def _leaf_label(self, pos: int) -> str:
        owners = [i for i, p in enumerate(self._tree_indices) if p == pos]
        return f"  <- value {', '.join(str(i) for i in owners)}" if owners else ""

    def render(self) -> str:
        """
        Text rendering of the tree, root first.

        Carried-forward nodes appear once, at the highest layer they reach.
        """
        lines: list[str] = []

        def walk(level: int, pos: int, prefix: str, connector: str) -> None:
            level, pos = self._resolve_carry(level, pos)
            digest = to_hex(self._layers[level][pos])
            label = self._leaf_label(pos) if level == 0 else ""
            lines.append(f"{prefix}{connector}{digest}{label}")
            if level == 0:
                return
            if connector == "├─ ":
                child_prefix = prefix + "│  "
            elif connector:
                child_prefix = prefix + "   "
            else:
                child_prefix = prefix
            walk(level - 1, 2 * pos, child_prefix, "├─ ")
            walk(level - 1, 2 * pos + 1, child_prefix, "└─ ")

        walk(len(self._layers) - 1, 0, "", "")
        return "\n".join(lines)


__all__ = [
    "build_layers",
    "compute_root",
    "MerkleTree",
]
