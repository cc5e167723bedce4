"""
Wire payloads exchanged with the ledger node.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


def _is_hex(v: str, length: int) -> bool:
    if len(v) != length:
        return False
    try:
        bytes.fromhex(v)
    except ValueError:
        return False
    return True


class TransactionRequest(BaseModel):
    network_id: int
    protocol_version: int
    service_id: int
    message_id: int
    author: str
    body: Dict[str, Any]
    signature: str

    @field_validator('author')
    @classmethod
    def author_must_be_public_key(cls, v):
        if not _is_hex(v, 64):
            raise ValueError('author must be a 32-byte hex public key')
        return v.lower()

    @field_validator('signature')
    @classmethod
    def signature_must_be_64_bytes(cls, v):
        if not _is_hex(v, 128):
            raise ValueError('signature must be 64 bytes of hex')
        return v.lower()


class TransactionResponse(BaseModel):
    """Response to a submission: either a hash or an in-band rejection."""
    model_config = ConfigDict(extra='allow')

    tx_hash: Optional[str] = None
    debug: bool = False
    description: str = ""

    @property
    def rejected(self) -> bool:
        return self.debug


class TransactionStatus(BaseModel):
    """Status of a transaction as reported by the explorer."""
    model_config = ConfigDict(extra='allow')

    type: str
    content: Optional[Dict[str, Any]] = None
    location: Optional[Dict[str, Any]] = None
    status: Optional[Dict[str, Any]] = None

    @field_validator('type')
    @classmethod
    def type_must_be_known(cls, v):
        valid_types = ['committed', 'in-pool', 'unknown']
        if v not in valid_types:
            raise ValueError(f'type must be one of: {valid_types}')
        return v

    @property
    def committed(self) -> bool:
        return self.type == "committed"

    @property
    def execution_failed(self) -> bool:
        return bool(self.status) and self.status.get("type") in ("error", "panic")

    @property
    def failure_description(self) -> str:
        if not self.status:
            return ""
        return str(self.status.get("description", self.status.get("type", "")))

    def metadata(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
