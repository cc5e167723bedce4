"""
Shared fixtures: an in-process fake ledger node and helpers to drive the async client against it.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from cryptoowls.api.client import LedgerClient
from cryptoowls.api.schemas import TransactionRequest
from cryptoowls.core.codec import EncodingError, canonical_bytes
from cryptoowls.core.config import ClientConfig
from cryptoowls.core.identity import content_hash, verify
from cryptoowls.core.registry import UnknownKind, schema_for

TEST_BASE_URL = "http://ledger.test"


class FakeLedgerNode:
    """
    Minimal stand-in for the ledger's HTTP API.

    Submissions are re-encoded and signature-checked independently, the same
    way the real node does, so a client/node hash disagreement shows up here.
    """

    def __init__(self):
        self.submissions: List[Dict[str, Any]] = []
        self.status_queries: List[str] = []
        self.scripts: Dict[str, List[str]] = {}
        self.default_status = "committed"
        self.execution_status: Dict[str, Any] = {"type": "success"}
        self.reject_reason: Optional[str] = None
        self.hash_override: Optional[str] = None
        self.submit_http_status: Optional[int] = None
        self.users: Dict[str, Dict[str, Any]] = {}
        self.app = self._build_app()

    def script(self, tx_hash: str, statuses: List[str]):
        """Queue status types for a hash; the last one repeats forever."""
        self.scripts[tx_hash] = list(statuses)

    def _next_status(self, tx_hash: str) -> Optional[str]:
        script = self.scripts.get(tx_hash)
        if script:
            return script.pop(0) if len(script) > 1 else script[0]
        if any(s["tx_hash"] == tx_hash for s in self.submissions):
            return self.default_status
        return None

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.post("/api/explorer/v1/transactions")
        async def post_transaction(request: TransactionRequest):
            if self.submit_http_status:
                return JSONResponse(status_code=self.submit_http_status, content={"error": "unavailable"})

            try:
                schema = schema_for(request.message_id)
                message = canonical_bytes(
                    request.network_id, request.protocol_version, request.service_id,
                    schema, bytes.fromhex(request.author), request.body
                )
            except (UnknownKind, EncodingError) as e:
                return {"debug": True, "description": f"Malformed transaction: {e}"}

            if not verify(bytes.fromhex(request.author), message, bytes.fromhex(request.signature)):
                return {"debug": True, "description": "Invalid signature"}
            if self.reject_reason:
                return {"debug": True, "description": self.reject_reason}

            tx_hash = content_hash(message).hex()
            self.submissions.append({"tx_hash": tx_hash, "request": request.model_dump()})
            if schema.name == "create_user":
                self.users[request.author] = {"public_key": request.author, "name": request.body["name"]}
            return {"tx_hash": self.hash_override or tx_hash}

        @app.get("/api/explorer/v1/transactions/{tx_hash}")
        async def get_transaction(tx_hash: str):
            self.status_queries.append(tx_hash)
            status = self._next_status(tx_hash)
            if status is None:
                return JSONResponse(status_code=404, content={"type": "unknown"})
            if status != "committed":
                return {"type": status}
            return {
                "type": "committed",
                "content": {"tx_hash": tx_hash},
                "location": {"block_height": "3", "position_in_block": "0"},
                "status": dict(self.execution_status),
            }

        @app.get("/api/explorer/v1/blocks")
        async def get_blocks(count: int, latest: Optional[int] = None):
            top = 10 if latest is None else latest
            return {"blocks": [{"height": str(h)} for h in range(top, max(top - count, -1), -1)]}

        @app.get("/api/explorer/v1/blocks/{height}")
        async def get_block(height: int):
            return {"block": {"height": str(height)}, "txs": []}

        @app.get("/api/services/cryptoowls/v1/users")
        async def get_users():
            return list(self.users.values())

        @app.get("/api/services/cryptoowls/v1/user/{public_key}")
        async def get_user(public_key: str):
            if public_key not in self.users:
                return JSONResponse(status_code=404, content={"error": "User not found"})
            return self.users[public_key]

        return app


@pytest.fixture
def ledger_node():
    return FakeLedgerNode()


@pytest.fixture
def test_config():
    return ClientConfig(base_url=TEST_BASE_URL, max_attempts=10, interval_ms=500)


@pytest.fixture
def run_client(ledger_node, test_config):
    """Run an async scenario against the fake node: run_client(lambda client: ...)."""
    def runner(scenario, config: Optional[ClientConfig] = None):
        async def main():
            transport = httpx.ASGITransport(app=ledger_node.app)
            async with httpx.AsyncClient(transport=transport) as http:
                client = LedgerClient(config or test_config, http_client=http)
                return await scenario(client)
        return asyncio.run(main())
    return runner


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def sleep(seconds):
        sleeps.append(seconds)
    return sleep
