"""
Transaction lifecycle - build, submit and confirm, plus one method per service action.
"""

from typing import Any, Mapping, Optional, Tuple

from ..core.identity import generate_keypair
from ..core.registry import KindId
from ..core.schema import KeyPair, TransactionRecord
from ..core.transaction import build
from .client import LedgerClient
from .poller import ConfirmationPoller, ConfirmationResult

# Parentless owls are bred from the zero hash
ZERO_HASH = bytes(32)


class CryptoOwls:
    """High-level entry point used by the presentation layer."""

    def __init__(self, client: LedgerClient, poller: Optional[ConfirmationPoller] = None):
        self.client = client
        self.config = client.config
        self.poller = poller or ConfirmationPoller(client)

    async def execute(self, kind_id: int, keypair: KeyPair,
                      fields: Mapping[str, Any]) -> Tuple[TransactionRecord, ConfirmationResult]:
        """
        Run one transaction lifecycle: build, sign, submit, then poll until terminal.

        Submission errors (TransactionRejected, TransportError, HashMismatch)
        propagate before any polling starts.
        """
        record = build(kind_id, keypair, fields, config=self.config)
        receipt = await self.client.submit(record)
        result = await self.poller.confirm(receipt.transaction_hash)
        return record, result

    async def create_user(self, name: str) -> Tuple[KeyPair, ConfirmationResult]:
        """Generate a new identity and register it under name."""
        keypair = generate_keypair()
        _, result = await self.execute(KindId.CREATE_USER, keypair, {"name": name})
        return keypair, result

    async def make_owl(self, keypair: KeyPair, name: str,
                       father_id: bytes = ZERO_HASH, mother_id: bytes = ZERO_HASH):
        return await self.execute(KindId.MAKE_OWL, keypair, {
            "name": name,
            "father_id": father_id,
            "mother_id": mother_id
        })

    async def issue(self, keypair: KeyPair):
        return await self.execute(KindId.ISSUE, keypair, {})

    async def create_order(self, keypair: KeyPair, owl_id: bytes, price: int):
        return await self.execute(KindId.CREATE_ORDER, keypair, {"owl_id": owl_id, "price": price})

    async def accept_order(self, keypair: KeyPair, order_id: bytes):
        return await self.execute(KindId.ACCEPT_ORDER, keypair, {"order_id": order_id})
