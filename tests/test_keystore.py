"""
Tests for local identity persistence.
"""

import json

import pytest

from cryptoowls.core.identity import generate_keypair
from cryptoowls.core.keystore import KeyStore, KeystoreError


@pytest.fixture
def store(tmp_path):
    return KeyStore(str(tmp_path / "nested" / "keypair.json"))


class TestKeyStore:

    def test_absent_identity_is_none(self, store):
        assert store.load() is None

    def test_save_and_load(self, store):
        keypair = generate_keypair()
        store.save(keypair)
        assert store.load() == keypair

    def test_flat_json_layout(self, store):
        keypair = generate_keypair()
        store.save(keypair)
        data = json.loads(store.path.read_text())
        assert data == {"publicKey": keypair.public_key_hex, "secretKey": keypair.secret_key_hex}

    def test_save_replaces(self, store):
        store.save(generate_keypair())
        second = generate_keypair()
        store.save(second)
        assert store.load() == second
        assert [p.name for p in store.path.parent.iterdir()] == ["keypair.json"]

    def test_remove(self, store):
        store.save(generate_keypair())
        store.remove()
        assert store.load() is None
        # removing twice is fine
        store.remove()

    def test_corrupt_file(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{not json")
        with pytest.raises(KeystoreError):
            store.load()

    def test_wrong_shape(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text(json.dumps({"publicKey": "00"}))
        with pytest.raises(KeystoreError):
            store.load()
