"""
Ledger node HTTP client - transaction submission, status lookup and read-only queries.
"""

from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from util.logging import logger

from ..core.config import ClientConfig, validate_config
from ..core.schema import SubmissionReceipt, TransactionRecord
from ..core.transaction import to_wire
from .schemas import TransactionRequest, TransactionResponse, TransactionStatus


class TransportError(Exception):
    """Network-level failure or an unusable response from the node."""
    pass


class TransactionRejected(Exception):
    """The node refused the transaction in-band. Not retryable."""

    def __init__(self, reason: str, tx_hash: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.tx_hash = tx_hash


class HashMismatch(Exception):
    """The node reported a different hash than the one computed locally."""

    def __init__(self, expected: str, reported: str):
        super().__init__(f"Transaction hash mismatch: local {expected}, node reported {reported}")
        self.expected = expected
        self.reported = reported


class LedgerClient:
    """Async client for one ledger node. Holds no per-transaction state."""

    def __init__(self, config: Optional[ClientConfig] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config or ClientConfig.from_env()
        issues = validate_config(self.config)
        if issues:
            raise ValueError(f"Client configuration invalid: {issues}")

        self._owns_http = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=self.config.http_timeout_sec)

    async def __aenter__(self) -> 'LedgerClient':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_http:
            await self.http.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.log_http_error(method, url, repr(e))
            raise TransportError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    async def submit(self, record: TransactionRecord) -> SubmissionReceipt:
        """
        Send a signed transaction to the node.

        Raises:
            TransactionRejected: the node flagged the transaction in-band
            TransportError: network failure or unusable response
            HashMismatch: the reported hash differs from the local content hash
        """
        url = f"{self.config.explorer_url}/transactions"
        expected = record.hash_hex
        request = TransactionRequest.model_validate(to_wire(record))
        response = await self._request("POST", url, json=request.model_dump())

        parsed: Optional[TransactionResponse] = None
        malformed: Optional[ValidationError] = None
        try:
            parsed = TransactionResponse.model_validate(self._json(response))
        except ValidationError as e:
            malformed = e

        # An in-band rejection wins over the HTTP status code
        if parsed is not None and parsed.rejected:
            logger.log_submission_rejected(expected, parsed.description)
            raise TransactionRejected(parsed.description, tx_hash=expected)

        if response.is_error:
            logger.log_http_error("POST", url, f"HTTP {response.status_code}")
            raise TransportError(f"POST {url} returned HTTP {response.status_code}")

        if parsed is None:
            raise TransportError(f"Malformed submission response: {malformed}") from malformed
        if not parsed.tx_hash:
            raise TransportError("Submission response carries no tx_hash")

        reported = parsed.tx_hash.lower()
        if reported != expected:
            logger.log_submission(expected, "hash_mismatch", {"reported": reported})
            raise HashMismatch(expected, reported)

        logger.log_submission(expected)
        return SubmissionReceipt(transaction_hash=reported)

    async def get_transaction(self, tx_hash: str) -> TransactionStatus:
        """Query a transaction's status; a 404 means the node has never seen it."""
        url = f"{self.config.explorer_url}/transactions/{tx_hash}"
        response = await self._request("GET", url)

        if response.status_code == 404:
            return TransactionStatus(type="unknown")
        if response.is_error:
            logger.log_http_error("GET", url, f"HTTP {response.status_code}")
            raise TransportError(f"GET {url} returned HTTP {response.status_code}")

        try:
            return TransactionStatus.model_validate(self._json(response))
        except ValidationError as e:
            raise TransportError(f"Malformed transaction status: {e}") from e

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._request("GET", url, params=params)
        if response.is_error:
            logger.log_http_error("GET", url, f"HTTP {response.status_code}")
            raise TransportError(f"GET {url} returned HTTP {response.status_code}")
        payload = self._json(response)
        if payload is None:
            raise TransportError(f"GET {url} returned a non-JSON body")
        return payload

    # Explorer introspection
    async def get_blocks(self, count: int, latest: Optional[int] = None) -> Any:
        params = {"count": count}
        if latest is not None:
            params["latest"] = latest
        return await self._get_json(f"{self.config.explorer_url}/blocks", params=params)

    async def get_block(self, height: int) -> Any:
        return await self._get_json(f"{self.config.explorer_url}/blocks/{height}")

    # Service read endpoints
    async def get_users(self) -> Any:
        return await self._get_json(f"{self.config.service_url}/users")

    async def get_user(self, public_key: str) -> Any:
        return await self._get_json(f"{self.config.service_url}/user/{public_key}")

    async def get_user_owls(self, public_key: str) -> Any:
        return await self._get_json(f"{self.config.service_url}/user/{public_key}/owls")

    async def get_user_orders(self, public_key: str) -> Any:
        return await self._get_json(f"{self.config.service_url}/user/{public_key}/orders")

    async def get_owls(self) -> Any:
        return await self._get_json(f"{self.config.service_url}/owls")

    async def get_owl(self, owl_hash: str) -> Any:
        return await self._get_json(f"{self.config.service_url}/owl/{owl_hash}")

    async def get_owl_orders(self, owl_hash: str) -> Any:
        return await self._get_json(f"{self.config.service_url}/owl/{owl_hash}/orders")

    async def get_auctions(self) -> Any:
        return await self._get_json(f"{self.config.service_url}/auctions")
