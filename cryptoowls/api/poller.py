"""
Confirmation poller - waits for a submitted transaction to be committed.

Pending -> Committed | Rejected | TimedOut. The node is queried at a fixed
interval up to a fixed number of times; there is no backoff. Each confirm()
call keeps its own attempt counter so concurrent confirmations never interact.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Union

from util.logging import logger

from ..core.schema import Committed, Rejected, TimedOut
from .client import LedgerClient

ConfirmationResult = Union[Committed, TimedOut, Rejected]


class ConfirmationPoller:
    """Polls transaction status with a bounded, fixed-cadence retry."""

    def __init__(self, client: LedgerClient, max_attempts: Optional[int] = None,
                 interval_ms: Optional[int] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.client = client
        self.max_attempts = client.config.max_attempts if max_attempts is None else max_attempts
        self.interval_ms = client.config.interval_ms if interval_ms is None else interval_ms
        self.sleep = sleep

        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1: {self.max_attempts}")
        if self.interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0: {self.interval_ms}")

    async def confirm(self, tx_hash: str) -> ConfirmationResult:
        """
        Wait for a transaction to reach a terminal state.

        Args:
            tx_hash: Hex hash returned by submission

        Returns:
            Committed with the node's metadata, Rejected if the transaction was
            committed with a failed execution status, or TimedOut once the
            attempt budget is spent

        Raises:
            TransportError: a status query failed at the network level
        """
        remaining = self.max_attempts
        attempt = 0

        while True:
            attempt += 1
            status = await self.client.get_transaction(tx_hash)
            logger.log_poll_attempt(tx_hash, attempt, status.type)

            if status.committed:
                if status.execution_failed:
                    reason = status.failure_description
                    logger.log_confirmation(tx_hash, "rejected", attempt, {"reason": reason})
                    return Rejected(reason=reason, metadata=status.metadata())
                logger.log_confirmation(tx_hash, "committed", attempt)
                return Committed(metadata=status.metadata(), attempts=attempt)

            remaining -= 1
            if remaining <= 0:
                logger.log_confirmation(tx_hash, "timed_out", attempt)
                return TimedOut(attempts=attempt)

            await self.sleep(self.interval_ms / 1000)
