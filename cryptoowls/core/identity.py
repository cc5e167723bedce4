"""
Signing identities - Ed25519 key pairs, signatures and SHA-256 content hashes.
"""

import hashlib

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .schema import KeyPair

SIGNATURE_LENGTH = 64


def _raw_public_bytes(private_key: ed25519.Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def generate_keypair() -> KeyPair:
    """Generate a fresh Ed25519 identity from the OS randomness source."""
    private_key = ed25519.Ed25519PrivateKey.generate()
    secret_key = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption()
    )
    return KeyPair(public_key=_raw_public_bytes(private_key), secret_key=secret_key)


def keypair_from_secret(secret_key: bytes) -> KeyPair:
    """Rebuild a key pair from its 32-byte secret seed."""
    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(secret_key)
    return KeyPair(public_key=_raw_public_bytes(private_key), secret_key=bytes(secret_key))


def sign(secret_key: bytes, data: bytes) -> bytes:
    """
    Sign data with an Ed25519 secret key.

    Args:
        secret_key: 32-byte secret seed
        data: Bytes to sign

    Returns:
        64-byte signature
    """
    private_key = ed25519.Ed25519PrivateKey.from_private_bytes(secret_key)
    return private_key.sign(data)


def verify(public_key: bytes, data: bytes, signature: bytes) -> bool:
    """Return True if signature is a valid signature of data by public_key."""
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(public_key).verify(signature, data)
        return True
    except (InvalidSignature, ValueError):
        return False


def content_hash(data: bytes) -> bytes:
    """SHA-256 digest, the same hash the ledger uses for transaction identity."""
    return hashlib.sha256(data).digest()
