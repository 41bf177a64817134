"""SDK settings management service"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    ENV_BACKEND_URL,
    ENV_REQUEST_TIMEOUT,
    ENV_RPC_URL,
)
from ..models.config import Settings
from ..utils.file_utils import atomic_write

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading project SDK settings

    Precedence: explicit overrides > environment > settings file > defaults.
    """

    def __init__(self, settings_path: Optional[Path] = None):
        """Initialize config service

        Args:
            settings_path: Path to .shadow/config.yaml (may not exist)
        """
        self.settings_path = Path(settings_path) if settings_path else None
        self._settings: Optional[Settings] = None

    @property
    def settings(self) -> Settings:
        """Get current settings (lazy load)"""
        if self._settings is None:
            self.load_settings()
        return self._settings

    def load_settings(self, overrides: Optional[Dict[str, Any]] = None) -> Settings:
        """Load settings from file, environment and overrides

        Args:
            overrides: Explicit values that win over everything else

        Returns:
            Loaded settings
        """
        data = self._read_file()
        self._apply_environment(data)

        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        try:
            self._settings = Settings.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid settings: {e}")

        return self._settings

    def save_settings(self, settings: Settings) -> None:
        """Write settings to the settings file"""
        if self.settings_path is None:
            raise ConfigError("No settings path configured")

        content = yaml.dump(settings.to_dict(), default_flow_style=False, sort_keys=False)
        atomic_write(self.settings_path, content)
        self._settings = settings

    def _read_file(self) -> Dict[str, Any]:
        if self.settings_path is None or not self.settings_path.exists():
            return {}

        try:
            with open(self.settings_path, 'r') as f:
                content = f.read()
        except OSError as e:
            raise ConfigError(f"Cannot read settings file {self.settings_path}: {e}")

        # Simple environment variable expansion
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.settings_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file must contain a mapping: {self.settings_path}")

        logger.debug("Loaded settings from %s", self.settings_path)
        return data

    @staticmethod
    def _apply_environment(data: Dict[str, Any]) -> None:
        backend_url = os.environ.get(ENV_BACKEND_URL)
        if backend_url:
            data['backend_url'] = backend_url

        timeout = os.environ.get(ENV_REQUEST_TIMEOUT)
        if timeout:
            try:
                data['request_timeout'] = float(timeout)
            except ValueError:
                raise ConfigError(f"{ENV_REQUEST_TIMEOUT} must be a number, got {timeout!r}")

        rpc_url = os.environ.get(ENV_RPC_URL)
        if rpc_url:
            # A single override applies to every network
            data['rpc_urls'] = {'devnet': rpc_url, 'mainnet': rpc_url}
