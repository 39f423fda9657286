"""
Leaf encoding.

Pluggable encoders that turn typed leaf values into deterministic bytes.
"""
from .leaf_encoder import (
    DEFAULT_ENCODER,
    TypeSignature,
    LeafEncoder,
    TypedTupleEncoder,
    CanonicalJsonEncoder,
    parse_type,
    normalize_types,
    register_encoder,
    available_encoders,
    get_encoder,
    encode_leaf,
    leaf_hash,
    coerce_from_string,
)

__all__ = [
    "DEFAULT_ENCODER",
    "TypeSignature",
    "LeafEncoder",
    "TypedTupleEncoder",
    "CanonicalJsonEncoder",
    "parse_type",
    "normalize_types",
    "register_encoder",
    "available_encoders",
    "get_encoder",
    "encode_leaf",
    "leaf_hash",
    "coerce_from_string",
]
