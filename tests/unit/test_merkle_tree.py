"""
Module 04 - Merkle Tree Unit Tests
Tests for merkle_core/merkle/merkle_tree.py

Covers:
1. Known-answer root and proofs for the three-name example
2. Root determinism and order invariance (sorted leaves)
3. Odd leaf counts use carry-forward, never duplication
4. Empty and single-leaf trees
5. Index bounds, lookups and deduplication
6. Parallel layer hashing matches serial hashing
7. Concurrent proof generation on a shared tree
"""
import itertools
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from merkle_core.config import TreeConfig
from merkle_core.crypto.hashing import HashAlgorithm, from_hex, get_hash_algorithm, sha256
from merkle_core.merkle import (
    MerkleTree,
    build_layers,
    compute_root,
    max_proof_length,
    verify,
)
from merkle_core.schemas.errors import (
    EmptyTreeError,
    EncodingError,
    IndexOutOfRangeError,
    LeafNotFoundError,
)

from fixtures import (
    ALICE_LEAF,
    BOB_ALICE_NODE,
    BOB_LEAF,
    CHARLIE_LEAF,
    EXAMPLE_ROOT,
    make_names,
)


def digests(count: int) -> list[bytes]:
    return [sha256(f"leaf-{i}".encode()) for i in range(count)]


class TestExampleTree:
    """The Alice/Bob/Charlie tree reproduces its known answers."""

    def test_root(self, names_tree):
        assert names_tree.root_hex == EXAMPLE_ROOT
        assert names_tree.root == from_hex(EXAMPLE_ROOT)

    def test_leaf_layer_sorted(self, names_tree):
        assert [("0x" + h.hex()) for h in names_tree.layers[0]] == [BOB_LEAF, ALICE_LEAF, CHARLIE_LEAF]

    def test_proof_for_alice(self, names_tree):
        """Alice pairs with Bob, then with the carried-forward Charlie."""
        proof = names_tree.get_proof(0)
        assert len(proof) == 2
        assert proof.to_hex_list() == [BOB_LEAF, CHARLIE_LEAF]
        assert proof.index == 0
        assert proof.leaf == from_hex(ALICE_LEAF)
        assert verify(["Alice"], proof, names_tree.root, ["string"])

    def test_proof_for_charlie(self, names_tree):
        """The carried-forward leaf skips the layer it was unpaired in."""
        proof = names_tree.get_proof(2)
        assert proof.to_hex_list() == [BOB_ALICE_NODE]
        assert verify(["Charlie"], proof, EXAMPLE_ROOT, ["string"])

    def test_proof_for_bob(self, names_tree):
        assert names_tree.get_proof(1).to_hex_list() == [ALICE_LEAF, CHARLIE_LEAF]

    def test_wrong_value_fails(self, names_tree):
        proof = names_tree.get_proof(0)
        assert not verify(["Alicf"], proof, names_tree.root, ["string"])

    def test_scalar_values(self):
        tree = MerkleTree.of(["Alice", "Bob", "Charlie"], "string")
        assert tree.root_hex == EXAMPLE_ROOT

    def test_shape(self, names_tree):
        assert len(names_tree) == 3
        assert names_tree.leaf_count == 3
        assert [len(layer) for layer in names_tree.layers] == [3, 2, 1]
        assert names_tree.depth == 2
        assert names_tree.types == ("string",)
        assert "root=" + EXAMPLE_ROOT in repr(names_tree)


class TestRootDeterminism:
    """Same inputs give the same root; sorted trees ignore input order."""

    def test_repeat_builds(self):
        values = make_names(17)
        roots = {MerkleTree.of(values, ["string"]).root for _ in range(3)}
        assert len(roots) == 1

    def test_all_permutations_same_root(self, names):
        roots = {
            MerkleTree.of(list(p), ["string"]).root
            for p in itertools.permutations(names)
        }
        assert roots == {from_hex(EXAMPLE_ROOT)}

    def test_shuffled_large(self):
        values = make_names(101)
        shuffled = values[:]
        random.Random(7).shuffle(shuffled)
        assert MerkleTree.of(values, "string").root == MerkleTree.of(shuffled, "string").root

    def test_unsorted_depends_on_order(self, names):
        forward = MerkleTree.of(names, ["string"], sort_leaves=False)
        backward = MerkleTree.of(list(reversed(names)), ["string"], sort_leaves=False)
        assert forward.root != backward.root

    def test_unsorted_keeps_caller_order(self, names, sha256_alg):
        tree = MerkleTree.of(names, ["string"], sort_leaves=False)
        assert tree.layers[0][0] == from_hex(ALICE_LEAF)
        assert tree.tree_index(2) == 2

    def test_compute_root_matches_tree(self):
        hashes = digests(9)
        assert compute_root(hashes) == MerkleTree.from_leaf_hashes(hashes).root

    def test_types_change_root(self):
        assert MerkleTree.of([[b"a"], [b"b"]], ["bytes"]).root != MerkleTree.of([["a"], ["b"]], ["string"]).root

    def test_different_leaves_different_root(self):
        assert MerkleTree.of(make_names(4), "string").root != MerkleTree.of(make_names(5), "string").root


class TestCarryForward:
    """Odd layers carry the last node up unchanged."""

    def test_three_leaves_structure(self, sha256_alg):
        a, b, c = digests(3)
        tree = MerkleTree.from_leaf_hashes([a, b, c], sort_leaves=False)
        ab = sha256_alg.hash_node(a, b)
        assert tree.layers[1] == (ab, c)
        assert tree.root == sha256_alg.hash_node(ab, c)

    def test_three_leaves_not_duplicated(self, sha256_alg):
        a, b, c = digests(3)
        tree = MerkleTree.from_leaf_hashes([a, b, c], sort_leaves=False)
        duplicated = sha256_alg.hash_node(sha256_alg.hash_node(a, b), sha256_alg.hash_node(c, c))
        assert tree.root != duplicated

    def test_five_leaves_structure(self, sha256_alg):
        a, b, c, d, e = digests(5)
        layers = build_layers([a, b, c, d, e], sha256_alg)
        ab, cd = sha256_alg.hash_node(a, b), sha256_alg.hash_node(c, d)
        abcd = sha256_alg.hash_node(ab, cd)
        assert layers[1] == [ab, cd, e]
        assert layers[2] == [abcd, e]
        assert layers[3] == [sha256_alg.hash_node(abcd, e)]

    def test_carried_leaf_short_proof(self):
        tree = MerkleTree.from_leaf_hashes(digests(5), sort_leaves=False)
        proof = tree.get_proof(4)
        assert len(proof) == 1
        assert proof.siblings == [tree.layers[2][0]]

    def test_no_phantom_leaf(self):
        """An index past the real leaves has no proof even for odd counts."""
        tree = MerkleTree.from_leaf_hashes(digests(3))
        with pytest.raises(IndexOutOfRangeError):
            tree.get_proof(3)

    @pytest.mark.parametrize("count", list(range(1, 34)))
    def test_every_proof_verifies(self, count):
        values = make_names(count)
        tree = MerkleTree.of(values, ["string"])
        bound = max_proof_length(count)
        for i, value in enumerate(values):
            proof = tree.get_proof(i)
            assert len(proof) <= bound
            assert tree.verify_proof(value, proof)

    @pytest.mark.parametrize("count,length", [(2, 1), (4, 2), (8, 3), (16, 4)])
    def test_power_of_two_proof_length(self, count, length):
        tree = MerkleTree.from_leaf_hashes(digests(count))
        assert {len(tree.get_proof(i)) for i in range(count)} == {length}

    def test_max_proof_length(self):
        assert [max_proof_length(n) for n in (0, 1, 2, 3, 4, 5, 8, 9)] == [0, 0, 1, 2, 2, 3, 3, 4]


class TestEdgeSizes:
    """Empty and single-leaf trees."""

    def test_empty_values(self):
        with pytest.raises(EmptyTreeError):
            MerkleTree.of([], ["string"])

    def test_empty_hashes(self):
        with pytest.raises(EmptyTreeError):
            MerkleTree.from_leaf_hashes([])
        with pytest.raises(EmptyTreeError):
            build_layers([])
        with pytest.raises(EmptyTreeError):
            compute_root([])

    def test_empty_is_value_error(self):
        with pytest.raises(ValueError):
            MerkleTree.of(iter(()), "string")

    def test_single_leaf(self, sha256_alg):
        tree = MerkleTree.of([["only"]], ["string"])
        proof = tree.get_proof(0)
        assert tree.root == tree.layers[0][0]
        assert tree.depth == 0
        assert len(proof) == 0
        assert verify(["only"], proof, tree.root, ["string"])
        assert verify(["only"], [], tree.root, ["string"])

    def test_single_leaf_wrong_value(self):
        tree = MerkleTree.of([["only"]], ["string"])
        assert not verify(["other"], [], tree.root, ["string"])

    def test_wrong_width_leaf_hash(self):
        with pytest.raises(ValueError, match="expected 32"):
            MerkleTree.from_leaf_hashes([b"\x00" * 31])


class TestConstructionErrors:
    """Encoding failures abort construction."""

    def test_mismatched_value(self):
        with pytest.raises(EncodingError):
            MerkleTree.of([["a"], [1]], ["string"])

    def test_bad_signature(self):
        with pytest.raises(EncodingError):
            MerkleTree.of([["a"]], ["float"])

    def test_arity(self):
        with pytest.raises(EncodingError):
            MerkleTree.of([["a", 1], ["b"]], ["string", "uint256"])


class TestIndexBounds:
    """get_proof only accepts real input indices."""

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range(self, names_tree, index):
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            names_tree.get_proof(index)
        assert exc_info.value.index == index
        assert exc_info.value.leaf_count == 3

    @pytest.mark.parametrize("index", [True, "0", 1.0, None])
    def test_non_integer(self, names_tree, index):
        with pytest.raises(IndexOutOfRangeError):
            names_tree.get_proof(index)

    def test_is_index_error(self, names_tree):
        with pytest.raises(IndexError):
            names_tree.get_proof(3)


class TestLookup:
    """Value and digest lookups map back to input indices."""

    def test_leaf_lookup(self, names_tree):
        assert names_tree.leaf_lookup(["Charlie"]) == 2
        assert names_tree.leaf_lookup("Bob") == 1

    def test_missing(self, names_tree):
        with pytest.raises(LeafNotFoundError):
            names_tree.leaf_lookup(["Dave"])

    def test_lookup_is_lookup_error(self, names_tree):
        with pytest.raises(LookupError):
            names_tree.leaf_lookup(["Dave"])

    def test_proof_for_value(self, names_tree):
        assert names_tree.get_proof_for_value(["Alice"]) == names_tree.get_proof(0)

    def test_leaf_hash_at(self, names_tree):
        assert names_tree.leaf_hash_at(0) == from_hex(ALICE_LEAF)
        assert names_tree.tree_index(0) == 1

    def test_entries(self, names_tree, names):
        assert list(names_tree.entries()) == list(enumerate(names))

    def test_hash_only_tree(self):
        hashes = digests(4)
        tree = MerkleTree.from_leaf_hashes(hashes)
        assert tree.lookup_leaf_hash(hashes[2]) == 2
        assert tree.get_proof(2).leaf == hashes[2]
        with pytest.raises(LeafNotFoundError):
            tree.leaf_lookup(["x"])
        assert all(value is None for _, value in tree.entries())


class TestDeduplication:
    """Repeated values collapse to one leaf when requested."""

    def test_dedupe(self):
        values = [["a"], ["b"], ["a"]]
        tree = MerkleTree.of(values, ["string"], deduplicate=True)
        assert tree.leaf_count == 2
        assert len(tree) == 3
        assert tree.get_proof(2).siblings == tree.get_proof(0).siblings
        assert tree.root == MerkleTree.of([["a"], ["b"]], ["string"]).root

    def test_without_dedupe_keeps_duplicates(self):
        tree = MerkleTree.of([["a"], ["b"], ["a"]], ["string"])
        assert tree.leaf_count == 3
        for i, value in enumerate([["a"], ["b"], ["a"]]):
            assert tree.verify_proof(value, tree.get_proof(i))

    def test_duplicate_lookup_returns_first(self):
        tree = MerkleTree.of([["a"], ["b"], ["a"]], ["string"])
        assert tree.leaf_lookup(["a"]) == 0

    def test_config_enables_dedupe(self):
        tree = MerkleTree.of([["x"], ["x"]], "string", config=TreeConfig(deduplicate=True))
        assert tree.leaf_count == 1

    def test_config_applies_to_leaf_hashes(self):
        hashes = digests(5) + [digests(5)[0]]
        config = TreeConfig(sort_leaves=False, deduplicate=True)
        via_config = MerkleTree.from_leaf_hashes(hashes, config=config)
        explicit = MerkleTree.from_leaf_hashes(hashes, sort_leaves=False, deduplicate=True)
        assert via_config.leaf_count == 5
        assert via_config.layers[0][0] == hashes[0]
        assert via_config.root == explicit.root

    def test_arguments_override_config(self):
        hashes = digests(4) + [digests(4)[1]]
        config = TreeConfig(sort_leaves=False, deduplicate=True)
        tree = MerkleTree.from_leaf_hashes(hashes, sort_leaves=True, deduplicate=False, config=config)
        assert tree.leaf_count == 5
        assert list(tree.layers[0]) == sorted(hashes)


class TestAlgorithms:
    """Trees are built and verified under an explicit algorithm."""

    @pytest.mark.parametrize("name", ["keccak256", "sha3_256", "blake2b"])
    def test_registered_algorithms(self, name, names):
        tree = MerkleTree.of(names, ["string"], algorithm=name)
        assert tree.algorithm.name == name
        assert tree.root_hex != EXAMPLE_ROOT
        for i, value in enumerate(names):
            proof = tree.get_proof(i)
            assert verify(value, proof, tree.root, ["string"], algorithm=name)
            assert not verify(value, proof, tree.root, ["string"], algorithm="sha256")

    def test_custom_algorithm_instance(self, names):
        salted = HashAlgorithm("salted-test", 32, lambda d: sha256(b"salt" + d))
        tree = MerkleTree.of(names, ["string"], algorithm=salted)
        assert verify(names[1], tree.get_proof(1), tree.root, ["string"], algorithm=salted)

    def test_config_selects_algorithm(self, names):
        tree = MerkleTree.of(names, ["string"], config=TreeConfig(hash_algorithm="keccak256"))
        assert tree.algorithm is get_hash_algorithm("keccak256")

    def test_json_encoder(self, names):
        tree = MerkleTree.of(names, ["string"], encoder="json")
        assert tree.root_hex != EXAMPLE_ROOT
        assert verify(["Bob"], tree.get_proof(1), tree.root, ["string"], encoder="json")
        assert not verify(["Bob"], tree.get_proof(1), tree.root, ["string"])


class TestParallelBuild:
    """Thread-pool layer hashing gives identical layers."""

    @pytest.mark.parametrize("count", [1, 2, 7, 64, 257])
    def test_parallel_matches_serial(self, count):
        hashes = digests(count)
        serial = build_layers(hashes, parallel_threshold=None)
        parallel = build_layers(hashes, parallel_threshold=1, max_workers=4)
        assert parallel == serial

    def test_tree_config_parallel(self):
        values = make_names(300)
        serial = MerkleTree.of(values, "string", config=TreeConfig(parallel_threshold=None))
        parallel = MerkleTree.of(values, "string", config=TreeConfig(parallel_threshold=2, max_workers=3))
        assert parallel.layers == serial.layers

    def test_concurrent_proofs(self):
        values = make_names(200)
        tree = MerkleTree.of(values, "string")
        with ThreadPoolExecutor(max_workers=8) as pool:
            proofs = list(pool.map(tree.get_proof, range(len(values))))
        assert all(tree.verify_proof(v, p) for v, p in zip(values, proofs))


class TestImmutability:
    """A built tree exposes no mutation path."""

    def test_layers_are_tuples(self, names_tree):
        assert isinstance(names_tree.layers, tuple)
        assert all(isinstance(layer, tuple) for layer in names_tree.layers)

    def test_root_not_assignable(self, names_tree):
        with pytest.raises(AttributeError):
            names_tree.root = b"\x00" * 32

    def test_input_list_mutation_ignored(self, names):
        tree = MerkleTree.of(names, ["string"])
        names.append(["Dave"])
        assert len(tree) == 3
        assert tree.root_hex == EXAMPLE_ROOT
