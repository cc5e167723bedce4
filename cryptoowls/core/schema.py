"""
Core record types shared by the builder, the client and the trait decoder.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class KeyPair:
    public_key: bytes  # 32 bytes, Ed25519
    secret_key: bytes  # 32-byte seed

    def __post_init__(self):
        if len(self.public_key) != 32 or len(self.secret_key) != 32:
            raise ValueError("KeyPair expects a 32-byte public key and a 32-byte secret key")

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    @property
    def secret_key_hex(self) -> str:
        return self.secret_key.hex()

    def to_dict(self) -> Dict[str, str]:
        """Flat layout used by the keystore."""
        return {"publicKey": self.public_key_hex, "secretKey": self.secret_key_hex}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'KeyPair':
        return cls(
            public_key=bytes.fromhex(data["publicKey"]),
            secret_key=bytes.fromhex(data["secretKey"])
        )

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key_hex})"


@dataclass(frozen=True)
class TransactionRecord:
    """
    A signed transaction. signature and content_hash are bound to the canonical
    encoding of (network_id, protocol_version, service_id, kind_id, author, fields);
    changing any of them requires building a new record.
    """
    kind_id: int
    service_id: int
    author_public_key: bytes
    fields: Dict[str, Any]
    signature: bytes
    content_hash: bytes
    network_id: int = 0
    protocol_version: int = 0

    @property
    def hash_hex(self) -> str:
        return self.content_hash.hex()

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()


@dataclass(frozen=True)
class SubmissionReceipt:
    transaction_hash: str


@dataclass(frozen=True)
class TraitProfile:
    color: bytes
    eyes: int
    wings: int
    chest: int
    tail: int

    @property
    def color_hex(self) -> str:
        return "#" + self.color.hex()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color_hex,
            "eyes": self.eyes,
            "wings": self.wings,
            "chest": self.chest,
            "tail": self.tail,
        }


@dataclass(frozen=True)
class Committed:
    metadata: Dict[str, Any] = field(default_factory=dict)
    attempts: int = 1

    status = "committed"


@dataclass(frozen=True)
class TimedOut:
    attempts: int

    status = "timed_out"


@dataclass(frozen=True)
class Rejected:
    reason: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    status = "rejected"
