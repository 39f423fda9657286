"""
Module 03 - Leaf Encoding
Deterministic conversion of typed leaf values into bytes.

A leaf value is a tuple of primitive values described by a type signature
(e.g. ``("address", "uint256")``). Encoders validate the runtime shape of the
value against the signature and fail with EncodingError on any mismatch.

Encoders:
- "typed" (default): type-length-value. Per field: 1 type-code byte,
  4-byte big-endian payload length, payload.
- "json": canonical JSON of {"types": [...], "values": [...]}.

Supported types:
    string      UTF-8 text
    bytes       bytes, or 0x-prefixed hex string
    bool        True / False (1 byte)
    uintN/intN  N in 8..256, multiple of 8; "uint"/"int" mean 256.
                Encoded as 32-byte big-endian (two's complement for int)
    address     20 bytes, or 0x + 40 hex chars
    bytes32     exactly 32 bytes, or 0x + 64 hex chars
"""
from __future__ import annotations

import re
from typing import Any, Protocol, Sequence, Union, runtime_checkable

from merkle_core.crypto.hashing import HashAlgorithmLike, from_hex, hash_leaf
from merkle_core.schemas.canonical import dumps_canonical
from merkle_core.schemas.errors import CanonicalizationException, EncodingError, UnknownEncoderError


DEFAULT_ENCODER: str = "typed"

TypeSignature = Union[str, Sequence[str]]

_TYPE_CODES: dict[str, int] = {
    "string": 0x01,
    "bytes": 0x02,
    "bool": 0x03,
    "uint": 0x04,
    "int": 0x05,
    "address": 0x06,
    "bytes32": 0x07,
}

_INT_TYPE_RE = re.compile(r"^(u?int)(\d*)$")
_ADDRESS_RE = re.compile(r"^0[xX][0-9a-fA-F]{40}$")

# Integer payloads are always this wide regardless of declared bit size.
_WORD_SIZE = 32


def parse_type(type_name: str) -> tuple[str, int]:
    """
    Split a declared type into (family, bit width).

    Non-integer types have width 0.

    Raises:
        EncodingError: If the type name is not supported
    """
    if not isinstance(type_name, str):
        raise EncodingError(f"Type names must be strings, got {type(type_name).__name__}")

    match = _INT_TYPE_RE.match(type_name)
    if match:
        family, width = match.group(1), match.group(2)
        bits = int(width) if width else 256
        if bits < 8 or bits > 256 or bits % 8 != 0:
            raise EncodingError(
                f"Invalid integer width in type {type_name!r}",
                declared_type=type_name,
            )
        return family, bits

    if type_name in _TYPE_CODES:
        return type_name, 0

    raise EncodingError(f"Unsupported leaf type: {type_name!r}", declared_type=type_name)


def normalize_types(types: TypeSignature) -> tuple[str, ...]:
    """
    Normalize a type signature to a validated tuple of type names.

    A single string is a one-field signature.
    """
    if isinstance(types, str):
        types = (types,)
    try:
        normalized = tuple(types)
    except TypeError:
        raise EncodingError(f"Type signature must be a sequence, got {type(types).__name__}") from None
    if not normalized:
        raise EncodingError("Type signature must declare at least one field")
    for type_name in normalized:
        parse_type(type_name)
    return normalized


def as_fields(value: Any, types: tuple[str, ...]) -> tuple[Any, ...]:
    """
    View a leaf value as a tuple matching the signature's arity.

    Lists and tuples are taken field by field. Any other value is accepted
    as a 1-tuple when the signature has exactly one field.
    """
    if isinstance(value, (list, tuple)):
        fields = tuple(value)
    elif len(types) == 1:
        fields = (value,)
    else:
        raise EncodingError(
            f"Expected a sequence of {len(types)} values, got {type(value).__name__}",
        )

    if len(fields) != len(types):
        raise EncodingError(
            f"Value has {len(fields)} fields but signature declares {len(types)}",
            details={"expected": len(types), "actual": len(fields)},
        )
    return fields


def _hex_or_bytes(value: Any, index: int, type_name: str, size: int | None = None) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        try:
            raw = from_hex(value)
        except ValueError as e:
            raise EncodingError(str(e), field_index=index, declared_type=type_name) from e
    else:
        raise EncodingError(
            f"Field {index} ({type_name}) expects bytes or hex string, got {type(value).__name__}",
            field_index=index,
            declared_type=type_name,
        )
    if size is not None and len(raw) != size:
        raise EncodingError(
            f"Field {index} ({type_name}) expects {size} bytes, got {len(raw)}",
            field_index=index,
            declared_type=type_name,
        )
    return raw


def encode_field(index: int, type_name: str, value: Any) -> tuple[int, bytes]:
    """
    Validate and encode a single field.

    Returns:
        (type code, payload bytes)

    Raises:
        EncodingError: If the value does not match the declared type
    """
    family, bits = parse_type(type_name)
    code = _TYPE_CODES[family]

    if family == "string":
        if not isinstance(value, str):
            raise EncodingError(
                f"Field {index} (string) expects str, got {type(value).__name__}",
                field_index=index,
                declared_type=type_name,
            )
        try:
            return code, value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingError(str(e), field_index=index, declared_type=type_name) from e

    if family == "bytes":
        return code, _hex_or_bytes(value, index, type_name)

    if family == "bool":
        if not isinstance(value, bool):
            raise EncodingError(
                f"Field {index} (bool) expects bool, got {type(value).__name__}",
                field_index=index,
                declared_type=type_name,
            )
        return code, b"\x01" if value else b"\x00"

    if family in ("uint", "int"):
        # bool is a subclass of int and must not pass as a number
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodingError(
                f"Field {index} ({type_name}) expects int, got {type(value).__name__}",
                field_index=index,
                declared_type=type_name,
            )
        if family == "uint":
            low, high = 0, 2 ** bits
        else:
            low, high = -(2 ** (bits - 1)), 2 ** (bits - 1)
        if not low <= value < high:
            raise EncodingError(
                f"Field {index} value {value} out of range for {type_name}",
                field_index=index,
                declared_type=type_name,
            )
        return code, value.to_bytes(_WORD_SIZE, "big", signed=(family == "int"))

    if family == "address":
        if isinstance(value, str) and not _ADDRESS_RE.match(value):
            raise EncodingError(
                f"Field {index} (address) is not a 0x-prefixed 20-byte hex string",
                field_index=index,
                declared_type=type_name,
            )
        return code, _hex_or_bytes(value, index, type_name, size=20)

    # bytes32
    return code, _hex_or_bytes(value, index, type_name, size=32)


@runtime_checkable
class LeafEncoder(Protocol):
    """Converts a typed leaf value into deterministic bytes."""

    name: str

    def encode(self, value: Any, types: TypeSignature) -> bytes:
        ...


class TypedTupleEncoder:
    """
    Type-length-value encoder.

    Each field becomes ``code(1) || len(4, big-endian) || payload``. The
    length prefix makes the concatenation unambiguous, so distinct tuples
    never share an encoding.

    Example:
        >>> TypedTupleEncoder().encode(["Alice"], ["string"]).hex()
        '0100000005416c696365'
    """

    name = "typed"

    def encode(self, value: Any, types: TypeSignature) -> bytes:
        declared = normalize_types(types)
        fields = as_fields(value, declared)
        parts: list[bytes] = []
        for i, (type_name, field) in enumerate(zip(declared, fields)):
            code, payload = encode_field(i, type_name, field)
            parts.append(bytes([code]) + len(payload).to_bytes(4, "big") + payload)
        return b"".join(parts)


class CanonicalJsonEncoder:
    """
    Canonical JSON encoder.

    Fields are validated exactly as by TypedTupleEncoder, then the value is
    serialized together with its signature, so the bytes are human-readable
    and still bound to the declared types.

    Example:
        >>> CanonicalJsonEncoder().encode(["Alice"], ["string"])
        b'{"types":["string"],"values":["Alice"]}'
    """

    name = "json"

    def encode(self, value: Any, types: TypeSignature) -> bytes:
        declared = normalize_types(types)
        fields = as_fields(value, declared)
        normalized: list[Any] = []
        for i, (type_name, field) in enumerate(zip(declared, fields)):
            _, payload = encode_field(i, type_name, field)
            family, _ = parse_type(type_name)
            if family in ("bytes", "address", "bytes32"):
                normalized.append("0x" + payload.hex())
            else:
                normalized.append(field)
        try:
            text = dumps_canonical({"types": list(declared), "values": normalized})
        except CanonicalizationException as e:
            raise EncodingError(e.message, details=e.details) from e
        return text.encode("utf-8")


_ENCODERS: dict[str, LeafEncoder] = {
    TypedTupleEncoder.name: TypedTupleEncoder(),
    CanonicalJsonEncoder.name: CanonicalJsonEncoder(),
}


def register_encoder(encoder: LeafEncoder, replace: bool = False) -> None:
    """Register a leaf encoder under its name."""
    if encoder.name in _ENCODERS and not replace:
        raise ValueError(f"Leaf encoder already registered: {encoder.name!r}")
    _ENCODERS[encoder.name] = encoder


def available_encoders() -> list[str]:
    return sorted(_ENCODERS)


def get_encoder(encoder: Union[LeafEncoder, str, None] = None) -> LeafEncoder:
    """
    Resolve an encoder from an instance, a registered name, or None.

    Raises:
        UnknownEncoderError: If the name is not registered
    """
    if encoder is None:
        encoder = DEFAULT_ENCODER
    if not isinstance(encoder, str):
        return encoder
    try:
        return _ENCODERS[encoder]
    except KeyError:
        raise UnknownEncoderError(encoder, available_encoders()) from None


def encode_leaf(
    value: Any,
    types: TypeSignature,
    encoder: Union[LeafEncoder, str, None] = None,
) -> bytes:
    """Encode a leaf value with the given (or default) encoder."""
    return get_encoder(encoder).encode(value, types)


def leaf_hash(
    value: Any,
    types: TypeSignature,
    algorithm: HashAlgorithmLike = None,
    encoder: Union[LeafEncoder, str, None] = None,
) -> bytes:
    """
    Encode and hash a leaf value in one step.

    Raises:
        EncodingError: If the value does not match the signature
    """
    return hash_leaf(encode_leaf(value, types, encoder), algorithm)


def coerce_from_string(text: str, type_name: str) -> Any:
    """
    Parse a command-line string into a value of the declared type.

    Raises:
        EncodingError: If the text cannot represent the type
    """
    family, _ = parse_type(type_name)
    if family in ("uint", "int"):
        try:
            return int(text, 0)
        except ValueError:
            raise EncodingError(f"Not an integer: {text!r}", declared_type=type_name) from None
    if family == "bool":
        lowered = text.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        raise EncodingError(f"Not a boolean: {text!r}", declared_type=type_name)
    return text


__all__ = [
    "DEFAULT_ENCODER",
    "TypeSignature",
    "LeafEncoder",
    "TypedTupleEncoder",
    "CanonicalJsonEncoder",
    "parse_type",
    "normalize_types",
    "as_fields",
    "encode_field",
    "register_encoder",
    "available_encoders",
    "get_encoder",
    "encode_leaf",
    "leaf_hash",
    "coerce_from_string",
]
