"""
Structured logging for the ledger client.
Every transaction lifecycle step reports through here so secret material is redacted in one place.
"""

import logging
import os
from typing import Any, Dict, List

SENSITIVE_FIELDS = ['secret_key', 'secretKey', 'seed', 'password']


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


class StructuredLogger:
    """Structured logger for transaction build, submission and confirmation."""

    def __init__(self, name: str = "cryptoowls"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {sanitize_payload(details)}"

        self.logger.log(level, message)

    def log_transaction_built(self, kind: str, tx_hash: str, author: str):
        """Log a freshly signed transaction."""
        details = {"kind": kind, "tx_hash": tx_hash, "author": author}
        self.log_operation("tx.build", "signed", details)

    def log_submission(self, tx_hash: str, status: str = "accepted", details: Dict[str, Any] = None):
        """Log a submission to the ledger node."""
        log_details = {"tx_hash": tx_hash}
        if details:
            log_details.update(details)

        self.log_operation("tx.submit", status, log_details)

    def log_submission_rejected(self, tx_hash: str, reason: str):
        """Log an in-band rejection reported by the node."""
        log_details = {
            "tx_hash": tx_hash,
            "reason": reason[:100] if reason else ""  # Limit reason length
        }
        self.log_operation("tx.submit", "rejected", log_details, level=logging.WARNING)

    def log_poll_attempt(self, tx_hash: str, attempt: int, remote_status: str):
        """Log one confirmation status query."""
        log_details = {
            "tx_hash": tx_hash,
            "attempt": attempt,
            "remote_status": remote_status
        }
        self.log_operation("tx.poll", "queried", log_details, level=logging.DEBUG)

    def log_confirmation(self, tx_hash: str, outcome: str, attempts: int, details: Dict[str, Any] = None):
        """Log the terminal state of a confirmation."""
        log_details = {"tx_hash": tx_hash, "attempts": attempts}
        if details:
            log_details.update(details)

        level = logging.INFO if outcome == "committed" else logging.WARNING
        self.log_operation("tx.confirm", outcome, log_details, level=level)

    def log_http_error(self, method: str, url: str, error: str):
        """Log a transport-level failure."""
        log_details = {"method": method, "url": url, "error": str(error)[:200]}
        self.log_operation("http", "failed", log_details, level=logging.ERROR)

    def log_keystore_operation(self, operation: str, path: str, status: str = "success"):
        """Log an identity persistence operation."""
        self.log_operation(f"keystore.{operation}", status, {"path": path})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Payload sanitization utility
def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for audit logging."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, (bytes, bytearray)):
        return sanitize_payload(bytes(payload).hex(), reveal_sensitive, sensitive_fields)
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload


# Global logger instance
logger = StructuredLogger()
