"""
Core cryptographic utilities.

Hash algorithm registry plus domain-separated leaf/node hashing.
"""
from .hashing import (
    LEAF_PREFIX,
    NODE_PREFIX,
    DEFAULT_HASH_ALGORITHM,
    HashAlgorithm,
    sha256,
    keccak256,
    sha3_256,
    blake2b_256,
    register_hash_algorithm,
    available_hash_algorithms,
    get_hash_algorithm,
    hash_leaf,
    hash_node,
    to_hex,
    from_hex,
)

__all__ = [
    "LEAF_PREFIX",
    "NODE_PREFIX",
    "DEFAULT_HASH_ALGORITHM",
    "HashAlgorithm",
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
