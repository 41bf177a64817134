"""Tests for wallet persistence"""

import json
import logging
import os
import stat

import pytest

from shadow_sdk.api.exceptions import StateCorruptError
from shadow_sdk.core.identity_store import IdentityStore
from shadow_sdk.core.path_resolver import PathResolver
from shadow_sdk.models.identity import KeyPair


@pytest.fixture
def store(tmp_path) -> IdentityStore:
    return IdentityStore(PathResolver(tmp_path))


class TestEnsureIdentity:

    def test_creates_wallet_on_first_use(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            keypair = store.ensure_identity()

        assert store.last_created is True
        assert store.wallet_path.exists()
        assert keypair.public_key_b58 in caplog.text
        assert "no backup" in caplog.text

    def test_second_call_loads_same_key(self, store):
        first = store.ensure_identity()
        second = IdentityStore(store.path_resolver).ensure_identity()

        assert second.secret_key == first.secret_key
        assert second.public_key_b58 == first.public_key_b58

    def test_loaded_wallet_is_not_reported_as_created(self, store):
        store.ensure_identity()
        reloaded = IdentityStore(store.path_resolver)
        reloaded.ensure_identity()
        assert reloaded.last_created is False

    def test_writes_cli_keypair(self, store):
        keypair = store.ensure_identity()
        with open(store.path_resolver.keypair_path) as f:
            assert json.load(f) == list(keypair.secret_key)

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_wallet_is_owner_only(self, store):
        store.ensure_identity()
        mode = stat.S_IMODE(os.stat(store.wallet_path).st_mode)
        assert mode == 0o600

    def test_wallet_layout(self, store):
        keypair = store.ensure_identity()
        with open(store.wallet_path) as f:
            data = json.load(f)
        assert data['publicKey'] == keypair.public_key_b58
        assert len(data['secretKey']) == 64


class TestCorruptWallet:

    def test_invalid_json_raises(self, store):
        store.path_resolver.state_dir.mkdir()
        store.wallet_path.write_text("{not json")

        with pytest.raises(StateCorruptError):
            store.ensure_identity()

    def test_corrupt_wallet_is_never_replaced(self, store):
        store.path_resolver.state_dir.mkdir()
        store.wallet_path.write_text('{"secretKey": [1, 2, 3]}')

        with pytest.raises(StateCorruptError):
            store.ensure_identity()
        assert store.wallet_path.read_text() == '{"secretKey": [1, 2, 3]}'

    def test_public_key_mismatch_raises(self, store):
        keypair = KeyPair.generate()
        data = keypair.to_wallet_dict()
        data['publicKey'] = KeyPair.generate().public_key_b58
        store.path_resolver.state_dir.mkdir()
        store.wallet_path.write_text(json.dumps(data))

        with pytest.raises(StateCorruptError):
            store.load_identity()

    def test_missing_wallet_loads_none(self, store):
        assert store.load_identity() is None


class TestKeyPair:

    def test_secret_key_round_trip(self):
        keypair = KeyPair.generate()
        restored = KeyPair.from_secret_key(keypair.secret_key)
        assert restored.public_key == keypair.public_key

    def test_mismatched_secret_key_rejected(self):
        secret = bytearray(KeyPair.generate().secret_key)
        secret[40] ^= 0xFF
        with pytest.raises(ValueError):
            KeyPair.from_secret_key(bytes(secret))

    def test_wrong_length_rejected(self):
        with pytest.raises(ValueError):
            KeyPair.from_secret_key(b"\x00" * 10)
