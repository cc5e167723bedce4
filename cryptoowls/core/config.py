"""
Client configuration - ledger endpoint, service identity and confirmation budget.
Values are read from the environment (and .env) once; components receive an explicit ClientConfig.
"""

import os
from dataclasses import dataclass, replace
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Ledger node configuration
LEDGER_API_URL = os.getenv("LEDGER_API_URL", "http://127.0.0.1:8200")
HTTP_TIMEOUT_SEC = float(os.getenv("HTTP_TIMEOUT_SEC", "10"))

# Service identity - must match the ledger's own numbering
CRYPTOOWLS_SERVICE_ID = int(os.getenv("CRYPTOOWLS_SERVICE_ID", "521"))
CRYPTOOWLS_NETWORK_ID = int(os.getenv("CRYPTOOWLS_NETWORK_ID", "0"))
CRYPTOOWLS_PROTOCOL_VERSION = int(os.getenv("CRYPTOOWLS_PROTOCOL_VERSION", "0"))
SERVICE_NAME = "cryptoowls"

# Confirmation poller budget
CONFIRM_MAX_ATTEMPTS = int(os.getenv("CONFIRM_MAX_ATTEMPTS", "10"))
CONFIRM_INTERVAL_MS = int(os.getenv("CONFIRM_INTERVAL_MS", "500"))

# Local identity persistence
KEYSTORE_PATH = os.getenv("KEYSTORE_PATH", "./data/keypair.json")

EXPLORER_PREFIX = "/api/explorer/v1"
SERVICE_PREFIX = f"/api/services/{SERVICE_NAME}/v1"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings handed to every component at construction time."""
    base_url: str = LEDGER_API_URL
    service_id: int = CRYPTOOWLS_SERVICE_ID
    network_id: int = CRYPTOOWLS_NETWORK_ID
    protocol_version: int = CRYPTOOWLS_PROTOCOL_VERSION
    service_name: str = SERVICE_NAME
    max_attempts: int = CONFIRM_MAX_ATTEMPTS
    interval_ms: int = CONFIRM_INTERVAL_MS
    http_timeout_sec: float = HTTP_TIMEOUT_SEC

    @classmethod
    def from_env(cls) -> 'ClientConfig':
        """Build a config from the current environment, re-reading variables."""
        return cls(
            base_url=os.getenv("LEDGER_API_URL", LEDGER_API_URL),
            service_id=int(os.getenv("CRYPTOOWLS_SERVICE_ID", str(CRYPTOOWLS_SERVICE_ID))),
            network_id=int(os.getenv("CRYPTOOWLS_NETWORK_ID", str(CRYPTOOWLS_NETWORK_ID))),
            protocol_version=int(os.getenv("CRYPTOOWLS_PROTOCOL_VERSION", str(CRYPTOOWLS_PROTOCOL_VERSION))),
            max_attempts=int(os.getenv("CONFIRM_MAX_ATTEMPTS", str(CONFIRM_MAX_ATTEMPTS))),
            interval_ms=int(os.getenv("CONFIRM_INTERVAL_MS", str(CONFIRM_INTERVAL_MS))),
            http_timeout_sec=float(os.getenv("HTTP_TIMEOUT_SEC", str(HTTP_TIMEOUT_SEC))),
        )

    def with_overrides(self, **changes) -> 'ClientConfig':
        """Return a copy with selected settings replaced."""
        return replace(self, **changes)

    @property
    def explorer_url(self) -> str:
        return self.base_url.rstrip("/") + EXPLORER_PREFIX

    @property
    def service_url(self) -> str:
        return self.base_url.rstrip("/") + f"/api/services/{self.service_name}/v1"


def validate_config(config: ClientConfig) -> List[str]:
    """Validate client configuration and return any issues."""
    issues = []

    if not config.base_url:
        issues.append("LEDGER_API_URL must not be empty")

    if not 0 <= config.service_id <= 0xFFFF:
        issues.append(f"Invalid CRYPTOOWLS_SERVICE_ID: {config.service_id} (must fit in u16)")

    if not 0 <= config.network_id <= 0xFF:
        issues.append(f"Invalid CRYPTOOWLS_NETWORK_ID: {config.network_id} (must fit in u8)")

    if not 0 <= config.protocol_version <= 0xFF:
        issues.append(f"Invalid CRYPTOOWLS_PROTOCOL_VERSION: {config.protocol_version} (must fit in u8)")

    if config.max_attempts < 1:
        issues.append("CONFIRM_MAX_ATTEMPTS must be >= 1")

    if config.interval_ms < 0:
        issues.append("CONFIRM_INTERVAL_MS must be >= 0")

    if config.http_timeout_sec <= 0:
        issues.append("HTTP_TIMEOUT_SEC must be > 0")

    return issues
