"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import (
    ANCHOR_COMMAND,
    DEFAULT_BACKEND_URL,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_READ_CONCURRENCY,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RPC_URLS,
    SPL_TOKEN_COMMAND,
    TOOLCHAIN_TIMEOUT,
    Network,
)


@dataclass
class ToolchainConfig:
    """External toolchain commands"""

    anchor: str = ANCHOR_COMMAND
    spl_token: str = SPL_TOKEN_COMMAND
    timeout: int = TOOLCHAIN_TIMEOUT
    skip_build: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "anchor": self.anchor,
            "spl_token": self.spl_token,
            "timeout": self.timeout,
            "skip_build": self.skip_build
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToolchainConfig':
        """Create from dictionary"""
        return cls(
            anchor=data.get("anchor", ANCHOR_COMMAND),
            spl_token=data.get("spl_token", SPL_TOKEN_COMMAND),
            timeout=int(data.get("timeout", TOOLCHAIN_TIMEOUT)),
            skip_build=bool(data.get("skip_build", False))
        )


@dataclass
class DiscoveryConfig:
    """Content discovery rules"""

    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_PATTERNS))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_PATTERNS))
    read_concurrency: int = DEFAULT_READ_CONCURRENCY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "include": self.include,
            "exclude": self.exclude,
            "read_concurrency": self.read_concurrency
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DiscoveryConfig':
        """Create from dictionary

        ``extra_exclude`` extends the default exclude list instead of
        replacing it.
        """
        exclude = list(data.get("exclude", DEFAULT_EXCLUDE_PATTERNS))
        exclude.extend(data.get("extra_exclude", []))
        return cls(
            include=list(data.get("include", DEFAULT_INCLUDE_PATTERNS)),
            exclude=exclude,
            read_concurrency=int(data.get("read_concurrency", DEFAULT_READ_CONCURRENCY))
        )


@dataclass
class Settings:
    """SDK settings (.shadow/config.yaml plus environment overrides)"""

    backend_url: str = DEFAULT_BACKEND_URL
    rpc_urls: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_RPC_URLS))
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logging: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate settings"""
        if not self.backend_url:
            raise ValueError("backend_url must not be empty")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        self.backend_url = self.backend_url.rstrip("/")

    def rpc_url(self, network: Network) -> str:
        """Get RPC endpoint for a network"""
        network = Network.parse(network)
        return self.rpc_urls.get(network.value) or DEFAULT_RPC_URLS[network.value]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Settings':
        """Create from dictionary"""
        data = data or {}
        rpc_urls = dict(DEFAULT_RPC_URLS)
        for name, url in (data.get("rpc_urls") or {}).items():
            rpc_urls[Network.parse(name).value] = url

        return cls(
            backend_url=data.get("backend_url", DEFAULT_BACKEND_URL),
            rpc_urls=rpc_urls,
            request_timeout=float(data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
            toolchain=ToolchainConfig.from_dict(data.get("toolchain") or {}),
            discovery=DiscoveryConfig.from_dict(data.get("discovery") or {}),
            logging=data.get("logging") or {}
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "backend_url": self.backend_url,
            "rpc_urls": self.rpc_urls,
            "request_timeout": self.request_timeout,
            "toolchain": self.toolchain.to_dict(),
            "discovery": self.discovery.to_dict(),
            "logging": self.logging
        }
