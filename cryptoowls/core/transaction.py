"""
Transaction builder - turns a kind id, an author identity and field values into a signed record.
Pure computation: no network access happens here.
"""

from typing import Any, Dict, Mapping, Optional

from util.logging import logger

from .codec import EncodingError, canonical_bytes, to_json_fields
from .config import ClientConfig
from .identity import content_hash, sign, verify
from .logical_time import SystemTime
from .registry import FieldType, schema_for
from .schema import KeyPair, TransactionRecord

AUTHOR_FIELD = "public_key"


def _complete_fields(schema, author: KeyPair, field_values: Mapping[str, Any],
                     now: Optional[SystemTime]) -> Dict[str, Any]:
    fields = dict(field_values)

    if AUTHOR_FIELD in schema.field_names and AUTHOR_FIELD not in fields:
        fields[AUTHOR_FIELD] = author.public_key

    # Missing time fields get the current time so repeated actions hash differently
    missing_times = [f for f in schema.fields_of_type(FieldType.SYSTEM_TIME) if f.name not in fields]
    if missing_times:
        stamp = now or SystemTime.now()
        for f in missing_times:
            fields[f.name] = stamp

    # Record fields hold their own copies of mutable values
    for f in schema.fields:
        value = fields.get(f.name)
        if isinstance(value, bytearray):
            fields[f.name] = bytes(value)
        elif isinstance(value, Mapping):
            fields[f.name] = dict(value)

    return fields


def build(kind_id: int, author: KeyPair, field_values: Mapping[str, Any],
          config: Optional[ClientConfig] = None, now: Optional[SystemTime] = None) -> TransactionRecord:
    """
    Build a signed transaction record.

    Args:
        kind_id: Registered transaction kind
        author: Signing identity
        field_values: Values by field name; public_key and time fields may be omitted
        config: Service identity to sign for (defaults to the environment config)
        now: Override for the time substituted into missing time fields

    Returns:
        TransactionRecord with signature and content hash

    Raises:
        UnknownKind: kind_id is not registered
        EncodingError: a field is missing, unknown or malformed
    """
    config = config or ClientConfig()
    schema = schema_for(kind_id)
    fields = _complete_fields(schema, author, field_values, now)

    message = canonical_bytes(
        config.network_id, config.protocol_version, config.service_id,
        schema, author.public_key, fields
    )
    signature = sign(author.secret_key, message)
    digest = content_hash(message)

    record = TransactionRecord(
        kind_id=schema.kind_id,
        service_id=config.service_id,
        author_public_key=author.public_key,
        fields=fields,
        signature=signature,
        content_hash=digest,
        network_id=config.network_id,
        protocol_version=config.protocol_version
    )
    logger.log_transaction_built(schema.name, record.hash_hex, author.public_key_hex)
    return record


def canonical_record_bytes(record: TransactionRecord) -> bytes:
    """Re-encode a record into the bytes its signature and hash should cover."""
    return canonical_bytes(
        record.network_id, record.protocol_version, record.service_id,
        schema_for(record.kind_id), record.author_public_key, record.fields
    )


def verify_record(record: TransactionRecord) -> bool:
    """Check that the signature and content hash still match the record's contents."""
    try:
        message = canonical_record_bytes(record)
    except EncodingError:
        return False
    if content_hash(message) != record.content_hash:
        return False
    return verify(record.author_public_key, message, record.signature)


def to_wire(record: TransactionRecord) -> Dict[str, Any]:
    """JSON body for POST /transactions."""
    schema = schema_for(record.kind_id)
    return {
        "network_id": record.network_id,
        "protocol_version": record.protocol_version,
        "service_id": record.service_id,
        "message_id": record.kind_id,
        "author": record.author_public_key.hex(),
        "body": to_json_fields(schema, record.fields),
        "signature": record.signature_hex,
    }
