#!/usr/bin/env python3
"""
Generate a signing identity and print a signed create_user transaction body.

The printed JSON is exactly what the client POSTs to the node, so it can be
replayed with curl against a local ledger.
"""

import argparse
import json
import sys
from pathlib import Path

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cryptoowls.core.config import KEYSTORE_PATH, ClientConfig
from cryptoowls.core.identity import generate_keypair
from cryptoowls.core.keystore import KeyStore, KeystoreError
from cryptoowls.core.registry import KindId
from cryptoowls.core.transaction import build, to_wire


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Create a CryptoOwls identity and a signed create_user transaction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s Alice                     # Print keys and transaction, persist nothing
  %(prog)s Alice --save              # Also store the identity in KEYSTORE_PATH
  %(prog)s Alice --save --force      # Replace an existing stored identity

Environment variables:
- KEYSTORE_PATH=./data/keypair.json
- CRYPTOOWLS_SERVICE_ID=521
        """
    )

    parser.add_argument("name", help="User name to register")
    parser.add_argument(
        "--save", "-s",
        action="store_true",
        help="Persist the generated identity"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite an identity that is already stored"
    )
    parser.add_argument(
        "--keystore",
        default=KEYSTORE_PATH,
        help=f"Identity file (default: {KEYSTORE_PATH})"
    )

    args = parser.parse_args(argv)

    keypair = generate_keypair()
    record = build(KindId.CREATE_USER, keypair, {"name": args.name}, config=ClientConfig.from_env())

    if args.save:
        store = KeyStore(args.keystore)
        try:
            if store.load() is not None and not args.force:
                print(f"ERROR: Identity already stored at {args.keystore} (use --force to replace)")
                return 1
            store.save(keypair)
        except KeystoreError as e:
            print(f"ERROR: {e}")
            return 1

    print(f"Public key: {keypair.public_key_hex}")
    print(f"Secret key: {keypair.secret_key_hex}")
    print(f"Tx hash:    {record.hash_hex}")
    print(json.dumps(to_wire(record), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
