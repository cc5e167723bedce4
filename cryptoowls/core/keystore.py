"""
Local identity persistence - a single JSON record holding the user's key pair.
A missing file means "no identity yet" and is not an error.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from util.logging import logger

from .config import KEYSTORE_PATH
from .schema import KeyPair


class KeystoreError(Exception):
    """Raised when the stored identity cannot be read or written."""
    pass


class KeyStore:
    """Saves, loads and removes the signing identity."""

    def __init__(self, path: str = KEYSTORE_PATH):
        self.path = Path(path)

    def save(self, keypair: KeyPair) -> None:
        """Write the key pair atomically, replacing any previous identity."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(keypair.to_dict(), f)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            Path(tmp_path).unlink(missing_ok=True)
            logger.log_keystore_operation("save", str(self.path), "failed")
            raise KeystoreError(f"Failed to save identity to {self.path}: {e}") from e

        logger.log_keystore_operation("save", str(self.path))

    def load(self) -> Optional[KeyPair]:
        """Return the stored key pair, or None when no identity has been saved."""
        if not self.path.exists():
            return None

        try:
            with open(self.path) as f:
                data = json.load(f)
            keypair = KeyPair.from_dict(data)
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.log_keystore_operation("load", str(self.path), "failed")
            raise KeystoreError(f"Stored identity at {self.path} is unreadable: {e}") from e

        logger.log_keystore_operation("load", str(self.path))
        return keypair

    def remove(self) -> None:
        """Forget the stored identity."""
        self.path.unlink(missing_ok=True)
        logger.log_keystore_operation("remove", str(self.path))
