#!/usr/bin/env python3
"""
Poll the ledger node until a transaction is committed, rejected or the attempt budget runs out.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cryptoowls.api.client import LedgerClient, TransportError
from cryptoowls.api.poller import ConfirmationPoller
from cryptoowls.core.config import ClientConfig
from cryptoowls.core.schema import Committed, Rejected


async def _confirm(config: ClientConfig, tx_hash: str):
    async with LedgerClient(config) as client:
        return await ConfirmationPoller(client).confirm(tx_hash)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Wait for a CryptoOwls transaction to commit")
    parser.add_argument("tx_hash", help="Hex transaction hash")
    parser.add_argument("--url", help="Ledger node base URL (default: LEDGER_API_URL)")
    parser.add_argument("--attempts", type=int, help="Status queries before giving up")
    parser.add_argument("--interval-ms", type=int, help="Delay between queries")

    args = parser.parse_args(argv)

    config = ClientConfig.from_env()
    overrides = {}
    if args.url:
        overrides["base_url"] = args.url
    if args.attempts is not None:
        overrides["max_attempts"] = args.attempts
    if args.interval_ms is not None:
        overrides["interval_ms"] = args.interval_ms
    if overrides:
        config = config.with_overrides(**overrides)

    try:
        result = asyncio.run(_confirm(config, args.tx_hash))
    except TransportError as e:
        print(f"ERROR: Ledger node unreachable: {e}")
        return 2
    except ValueError as e:
        print(f"ERROR: {e}")
        return 2

    if isinstance(result, Committed):
        print(f"Committed after {result.attempts} attempt(s)")
        location = result.metadata.get("location")
        if location:
            print(f"Location: {location}")
        return 0
    if isinstance(result, Rejected):
        print(f"Rejected: {result.reason}")
        return 1

    print(f"Not yet confirmed after {result.attempts} attempts")
    return 3


if __name__ == "__main__":
    sys.exit(main())
