"""
Module 02 - Hashing Utilities
Hash algorithm registry and domain-separated hashing for Merkle commitments.

This module provides:
- HashAlgorithm: a named, fixed-width digest function
- A registry of algorithms (sha256, keccak256, sha3_256, blake2b)
- Leaf and node hashing with domain separation
- Hex encoding/decoding with 0x prefix

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: leaf = H(0x00 || encoded_leaf)
2. Node hashing: node = H(0x01 || min(a, b) || max(a, b))
   - Children are sorted lexicographically by digest bytes before
     concatenation, so a parent does not depend on child order.
3. The 0x00/0x01 prefixes keep leaf and node preimages disjoint: a crafted
   leaf value can never be mistaken for an internal node.

The algorithm is always an explicit parameter. Functions accept either a
HashAlgorithm instance or a registered name; None means DEFAULT_HASH_ALGORITHM.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Callable, Union

from eth_utils import keccak

from merkle_core.schemas.errors import UnknownHashAlgorithmError


LEAF_PREFIX: bytes = b"\x00"
NODE_PREFIX: bytes = b"\x01"

DEFAULT_HASH_ALGORITHM: str = "sha256"


@dataclass(frozen=True)
class HashAlgorithm:
    """
    A named digest function with a fixed output width.

    Attributes:
        name: Registry name (e.g. "sha256")
        digest_size: Output width in bytes
        func: Callable mapping raw bytes to a digest
    """
    name: str
    digest_size: int
    func: Callable[[bytes], bytes]

    def __call__(self, data: bytes) -> bytes:
        return self.func(data)

    def hash_leaf(self, encoded: bytes) -> bytes:
        """Hash encoded leaf bytes: H(0x00 || encoded)."""
        return self.func(LEAF_PREFIX + encoded)

    def hash_node(self, a: bytes, b: bytes) -> bytes:
        """Hash two children in sorted order: H(0x01 || min || max)."""
        if b < a:
            a, b = b, a
        return self.func(NODE_PREFIX + a + b)


HashAlgorithmLike = Union[HashAlgorithm, str, None]


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """Compute Keccak-256 (the pre-standard SHA-3 used by Ethereum)."""
    return keccak(data)


def sha3_256(data: bytes) -> bytes:
    """Compute FIPS-202 SHA3-256."""
    return hashlib.sha3_256(data).digest()


def blake2b_256(data: bytes) -> bytes:
    """Compute BLAKE2b with a 32-byte digest."""
    return hashlib.blake2b(data, digest_size=32).digest()


_REGISTRY: dict[str, HashAlgorithm] = {
    "sha256": HashAlgorithm("sha256", 32, sha256),
    "keccak256": HashAlgorithm("keccak256", 32, keccak256),
    "sha3_256": HashAlgorithm("sha3_256", 32, sha3_256),
    "blake2b": HashAlgorithm("blake2b", 32, blake2b_256),
}


def register_hash_algorithm(algorithm: HashAlgorithm, replace: bool = False) -> None:
    """
    Register a hash algorithm under its name.

    Raises:
        ValueError: If the name is taken and replace is False
    """
    if algorithm.name in _REGISTRY and not replace:
        raise ValueError(f"Hash algorithm already registered: {algorithm.name!r}")
    _REGISTRY[algorithm.name] = algorithm


def available_hash_algorithms() -> list[str]:
    """Names of all registered hash algorithms, sorted."""
    return sorted(_REGISTRY)


def get_hash_algorithm(algorithm: HashAlgorithmLike = None) -> HashAlgorithm:
    """
    Resolve a HashAlgorithm from an instance, a registered name, or None.

    Raises:
        UnknownHashAlgorithmError: If the name is not registered
    """
    if isinstance(algorithm, HashAlgorithm):
        return algorithm
    name = DEFAULT_HASH_ALGORITHM if algorithm is None else algorithm
    try:
        return _REGISTRY[name]
    except KeyError:
        raise UnknownHashAlgorithmError(name, available_hash_algorithms()) from None


def hash_leaf(encoded: bytes, algorithm: HashAlgorithmLike = None) -> bytes:
    """
    Hash encoded leaf bytes with the leaf domain prefix.

    Args:
        encoded: Bytes produced by a leaf encoder
        algorithm: Hash algorithm (instance or name)

    Returns:
        Leaf digest
    """
    return get_hash_algorithm(algorithm).hash_leaf(encoded)


def hash_node(a: bytes, b: bytes, algorithm: HashAlgorithmLike = None) -> bytes:
    """
    Compute the parent of two children under the sorted-pair rule.

    hash_node(a, b) == hash_node(b, a) always holds.
    """
    return get_hash_algorithm(algorithm).hash_node(a, b)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str, require_prefix: bool = True) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string
        require_prefix: Reject strings without a 0x prefix

    Raises:
        ValueError: If the prefix is missing, the length is odd,
                    or the string contains invalid hex characters
    """
    if not isinstance(hex_string, str):
        raise ValueError(f"Expected a hex string, got {type(hex_string).__name__}")

    if hex_string.startswith(("0x", "0X")):
        hex_content = hex_string[2:]
    elif require_prefix:
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )
    else:
        hex_content = hex_string

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "DEFAULT_HASH_ALGORITHM",
    "HashAlgorithm",
    "HashAlgorithmLike",
    "sha256",
    "keccak256",
    "sha3_256",
    "blake2b_256",
    "register_hash_algorithm",
    "available_hash_algorithms",
    "get_hash_algorithm",
    "hash_leaf",
    "hash_node",
    "to_hex",
    "from_hex",
]
