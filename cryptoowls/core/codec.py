"""
Deterministic binary encoding of transaction fields.

Layout rules:
- fields are written in schema declaration order, no padding
- integers are little-endian fixed width (u32 = 4 bytes, u64 = 8 bytes)
- public keys and hashes are raw 32-byte values
- strings are a u32 length prefix followed by the UTF-8 bytes
- system time is u64 seconds followed by u32 nanoseconds

The canonical transaction bytes (what gets signed and hashed) are a fixed
38-byte header followed by the encoded fields.
"""

import struct
from typing import Any, Dict, Mapping

from .logical_time import NANOS_PER_SECOND, SystemTime
from .registry import FieldType, TransactionSchema

KEY_LENGTH = 32
HASH_LENGTH = 32
HEADER_LENGTH = 38

_U32_MAX = 0xFFFFFFFF
_U64_MAX = 0xFFFFFFFFFFFFFFFF


class EncodingError(ValueError):
    """Raised when field values do not fit the schema."""
    pass


def _as_int(name: str, value: Any, maximum: int) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"Field '{name}': expected integer, got bool")
    if isinstance(value, str):
        # u64 values arrive as decimal strings from JSON
        if not (value.isascii() and value.isdigit()):
            raise EncodingError(f"Field '{name}': '{value}' is not an unsigned integer")
        value = int(value)
    if not isinstance(value, int):
        raise EncodingError(f"Field '{name}': expected integer, got {type(value).__name__}")
    if not 0 <= value <= maximum:
        raise EncodingError(f"Field '{name}': {value} out of range [0, {maximum}]")
    return value


def _as_fixed_bytes(name: str, value: Any, length: int) -> bytes:
    if isinstance(value, str):
        if len(value) != 2 * length:
            raise EncodingError(f"Field '{name}': expected {2 * length} hex characters, got {len(value)}")
        try:
            value = bytes.fromhex(value)
        except ValueError:
            raise EncodingError(f"Field '{name}': not a valid hex string") from None
    if not isinstance(value, (bytes, bytearray)):
        raise EncodingError(f"Field '{name}': expected {length} bytes, got {type(value).__name__}")
    if len(value) != length:
        raise EncodingError(f"Field '{name}': expected {length} bytes, got {len(value)}")
    return bytes(value)


def _as_system_time(name: str, value: Any) -> SystemTime:
    if isinstance(value, Mapping):
        try:
            value = SystemTime(
                secs=_as_int(f"{name}.secs", value["secs"], _U64_MAX),
                nanos=_as_int(f"{name}.nanos", value["nanos"], _U32_MAX)
            )
        except KeyError as e:
            raise EncodingError(f"Field '{name}': missing {e.args[0]}") from None
    if not isinstance(value, SystemTime):
        raise EncodingError(f"Field '{name}': expected SystemTime, got {type(value).__name__}")
    _as_int(f"{name}.secs", value.secs, _U64_MAX)
    _as_int(f"{name}.nanos", value.nanos, _U32_MAX)
    if value.nanos >= NANOS_PER_SECOND:
        raise EncodingError(f"Field '{name}': nanos must be < {NANOS_PER_SECOND}")
    return value


def encode_value(name: str, field_type: FieldType, value: Any) -> bytes:
    """Encode one value according to its declared type."""
    if field_type is FieldType.U32:
        return struct.pack("<I", _as_int(name, value, _U32_MAX))
    if field_type is FieldType.U64:
        return struct.pack("<Q", _as_int(name, value, _U64_MAX))
    if field_type is FieldType.PUBLIC_KEY:
        return _as_fixed_bytes(name, value, KEY_LENGTH)
    if field_type is FieldType.HASH:
        return _as_fixed_bytes(name, value, HASH_LENGTH)
    if field_type is FieldType.STRING:
        if not isinstance(value, str):
            raise EncodingError(f"Field '{name}': expected str, got {type(value).__name__}")
        raw = value.encode("utf-8")
        return struct.pack("<I", len(raw)) + raw
    if field_type is FieldType.SYSTEM_TIME:
        ts = _as_system_time(name, value)
        return struct.pack("<QI", ts.secs, ts.nanos)
    raise EncodingError(f"Field '{name}': unsupported type {field_type}")


def encode(schema: TransactionSchema, fields: Mapping[str, Any]) -> bytes:
    """Encode field values in schema order. Missing or unknown fields raise EncodingError."""
    unknown = set(fields) - set(schema.field_names)
    if unknown:
        raise EncodingError(f"Unknown fields for {schema.name}: {sorted(unknown)}")

    chunks = []
    for f in schema.fields:
        if f.name not in fields:
            raise EncodingError(f"Missing required field '{f.name}' for {schema.name}")
        chunks.append(encode_value(f.name, f.type, fields[f.name]))
    return b"".join(chunks)


def encode_header(network_id: int, protocol_version: int, service_id: int, kind_id: int, author: bytes) -> bytes:
    """Fixed-width message header: u8 network, u8 protocol, u16 service, u16 kind, author key."""
    try:
        prefix = struct.pack("<BBHH", network_id, protocol_version, service_id, kind_id)
    except struct.error as e:
        raise EncodingError(f"Header value out of range: {e}") from None
    return prefix + _as_fixed_bytes("author", author, KEY_LENGTH)


def canonical_bytes(network_id: int, protocol_version: int, service_id: int,
                    schema: TransactionSchema, author: bytes, fields: Mapping[str, Any]) -> bytes:
    """The exact bytes a transaction's signature and content hash cover."""
    header = encode_header(network_id, protocol_version, service_id, schema.kind_id, author)
    return header + encode(schema, fields)


def to_json_value(field_type: FieldType, value: Any, name: str = "value") -> Any:
    if field_type in (FieldType.PUBLIC_KEY, FieldType.HASH):
        # Canonical lowercase hex of the bytes that were signed
        return _as_fixed_bytes(name, value, KEY_LENGTH if field_type is FieldType.PUBLIC_KEY else HASH_LENGTH).hex()
    if field_type is FieldType.U64:
        return str(int(value))
    if field_type is FieldType.U32:
        return int(value)
    if field_type is FieldType.SYSTEM_TIME:
        if isinstance(value, Mapping):
            value = SystemTime.from_mapping(value)
        return value.to_dict()
    return value


def to_json_fields(schema: TransactionSchema, fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Render field values for the JSON transaction body."""
    return {f.name: to_json_value(f.type, fields[f.name], f.name) for f in schema.fields}


def genetic_code_bytes(code: int) -> bytes:
    """4-byte big-endian form of a genetic code."""
    if isinstance(code, bool) or not isinstance(code, int) or not 0 <= code <= _U32_MAX:
        raise ValueError(f"Genetic code must be an unsigned 32-bit integer, got {code!r}")
    return code.to_bytes(4, "big")
