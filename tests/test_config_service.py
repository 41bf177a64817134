"""Tests for SDK settings loading"""

import pytest
import yaml

from shadow_sdk.api.exceptions import ConfigError
from shadow_sdk.constants import (
    DEFAULT_BACKEND_URL,
    DEFAULT_EXCLUDE_PATTERNS,
    ENV_BACKEND_URL,
    ENV_REQUEST_TIMEOUT,
    ENV_RPC_URL,
    Network,
)
from shadow_sdk.models.config import Settings
from shadow_sdk.services.config_service import ConfigService


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (ENV_BACKEND_URL, ENV_REQUEST_TIMEOUT, ENV_RPC_URL):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / ".shadow" / "config.yaml"


class TestConfigService:

    def test_defaults_without_file(self, settings_path):
        settings = ConfigService(settings_path).load_settings()
        assert settings.backend_url == DEFAULT_BACKEND_URL
        assert settings.rpc_url(Network.MAINNET) == "https://api.mainnet-beta.solana.com"

    def test_reads_yaml(self, settings_path):
        settings_path.parent.mkdir()
        settings_path.write_text(yaml.dump({
            'backend_url': "https://api.shadow.example/",
            'rpc_urls': {'mainnet-beta': "https://rpc.example"},
            'toolchain': {'skip_build': True},
            'discovery': {'extra_exclude': ["drafts/**"]},
        }))

        settings = ConfigService(settings_path).load_settings()

        assert settings.backend_url == "https://api.shadow.example"
        assert settings.rpc_url("mainnet") == "https://rpc.example"
        assert settings.toolchain.skip_build is True
        assert settings.discovery.exclude == DEFAULT_EXCLUDE_PATTERNS + ["drafts/**"]

    def test_environment_overrides_file(self, settings_path, monkeypatch):
        settings_path.parent.mkdir()
        settings_path.write_text("backend_url: http://from-file\n")
        monkeypatch.setenv(ENV_BACKEND_URL, "http://from-env")
        monkeypatch.setenv(ENV_RPC_URL, "http://rpc-env")

        settings = ConfigService(settings_path).load_settings()

        assert settings.backend_url == "http://from-env"
        assert settings.rpc_url(Network.DEVNET) == "http://rpc-env"

    def test_overrides_win(self, settings_path, monkeypatch):
        monkeypatch.setenv(ENV_BACKEND_URL, "http://from-env")
        settings = ConfigService(settings_path).load_settings({'backend_url': "http://explicit"})
        assert settings.backend_url == "http://explicit"

    def test_none_overrides_ignored(self, settings_path):
        settings = ConfigService(settings_path).load_settings({'backend_url': None})
        assert settings.backend_url == DEFAULT_BACKEND_URL

    def test_invalid_yaml(self, settings_path):
        settings_path.parent.mkdir()
        settings_path.write_text("backend_url: [unclosed\n")
        with pytest.raises(ConfigError):
            ConfigService(settings_path).load_settings()

    def test_non_mapping(self, settings_path):
        settings_path.parent.mkdir()
        settings_path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            ConfigService(settings_path).load_settings()

    def test_bad_timeout_env(self, settings_path, monkeypatch):
        monkeypatch.setenv(ENV_REQUEST_TIMEOUT, "soon")
        with pytest.raises(ConfigError):
            ConfigService(settings_path).load_settings()

    def test_invalid_values(self, settings_path):
        with pytest.raises(ConfigError):
            ConfigService(settings_path).load_settings({'request_timeout': -1})

    def test_save_and_reload(self, settings_path):
        service = ConfigService(settings_path)
        service.save_settings(Settings(backend_url="http://saved", request_timeout=5))

        settings = ConfigService(settings_path).load_settings()

        assert settings.backend_url == "http://saved"
        assert settings.request_timeout == 5
