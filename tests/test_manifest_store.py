"""Tests for shadow.json persistence"""

import json

import pytest

from shadow_sdk.api.exceptions import StateCorruptError
from shadow_sdk.constants import Network, StorageKind
from shadow_sdk.core.manifest_store import ManifestStore
from shadow_sdk.core.path_resolver import PathResolver
from shadow_sdk.models.manifest import ProjectManifest


@pytest.fixture
def store(tmp_path) -> ManifestStore:
    return ManifestStore(PathResolver(tmp_path))


class TestManifestStore:

    def test_missing_manifest_loads_none(self, store):
        assert store.load() is None
        assert not store.exists()

    def test_save_and_load(self, store):
        manifest = ProjectManifest(
            name="site",
            network=Network.MAINNET,
            storage=StorageKind.ARWEAVE,
            program_address="Fg6PaFpoGXkYsidMpWTK6W2BeZ7FEfcYkg476zPFsLnS",
            storage_cid="bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
            domain="mysite.shadow",
        )
        store.save(manifest)

        loaded = store.load()
        assert loaded.name == "site"
        assert loaded.network == Network.MAINNET
        assert loaded.storage == StorageKind.ARWEAVE
        assert loaded.program_address == manifest.program_address
        assert loaded.storage_cid == manifest.storage_cid
        assert loaded.domain == "mysite.shadow"
        assert loaded.token_mint is None

    def test_uses_camel_case_keys(self, store):
        store.save(ProjectManifest(name="site", program_address="abc"))
        data = json.loads(store.path.read_text())
        assert data['programAddress'] == "abc"
        assert 'program_address' not in data

    def test_unknown_keys_survive(self, store):
        store.path.write_text(json.dumps({"name": "site", "customField": {"a": 1}}))
        manifest = store.load()
        store.save(manifest)
        assert json.loads(store.path.read_text())['customField'] == {"a": 1}

    def test_accepts_cluster_alias(self, store):
        store.path.write_text(json.dumps({"name": "site", "network": "mainnet-beta"}))
        assert store.load().network == Network.MAINNET

    def test_corrupt_json_raises(self, store):
        store.path.write_text('{"name": "site",')
        with pytest.raises(StateCorruptError):
            store.load()

    def test_invalid_content_raises(self, store):
        store.path.write_text(json.dumps({"name": "site", "storage": "floppy"}))
        with pytest.raises(StateCorruptError):
            store.load()

    def test_missing_name_raises(self, store):
        store.path.write_text(json.dumps({"version": "1.0.0"}))
        with pytest.raises(StateCorruptError):
            store.load()

    def test_save_leaves_no_temp_files(self, store):
        store.save(ProjectManifest(name="site"))
        store.save(ProjectManifest(name="site", storage_cid="x"))
        leftovers = [p for p in store.path.parent.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_converted_fields_only_written_when_converted(self, store):
        store.save(ProjectManifest(name="site"))
        assert 'converted' not in json.loads(store.path.read_text())

        store.save(ProjectManifest(name="site", converted=True, converted_at="2024-01-01T00:00:00+00:00"))
        data = json.loads(store.path.read_text())
        assert data['converted'] is True
        assert data['convertedAt'] == "2024-01-01T00:00:00+00:00"

    def test_converted_at_round_trips_without_flag(self, store):
        manifest = ProjectManifest(name="site", converted_at="2024-01-01T00:00:00+00:00")
        store.save(manifest)

        assert store.load() == manifest
