# shadow_sdk/api/__init__.py
"""Public API for shadow-sdk"""

from .exceptions import (
    ShadowSDKError,
    StateCorruptError,
    ProjectNotFoundError,
    ConfigError,
    BackendError,
    RpcError,
    StageError,
    DiscoveryError,
    EmptyFileSetError,
    UploadError,
    ToolchainMissingError,
    DeploymentFailedError,
    AddressExtractionError,
    MintError,
    InvalidDomainError,
    DomainConflictError,
    RegistrationError,
    PipelineFailedError,
)
from .backend import BackendClient
from .rpc import SolanaRpc
from .query import QueryInterface, query
from .deployer import Deployer, deploy, convert

__all__ = [
    # Exceptions
    "ShadowSDKError",
    "StateCorruptError",
    "ProjectNotFoundError",
    "ConfigError",
    "BackendError",
    "RpcError",
    "StageError",
    "DiscoveryError",
    "EmptyFileSetError",
    "UploadError",
    "ToolchainMissingError",
    "DeploymentFailedError",
    "AddressExtractionError",
    "MintError",
    "InvalidDomainError",
    "DomainConflictError",
    "RegistrationError",
    "PipelineFailedError",

    # Clients
    "BackendClient",
    "SolanaRpc",
    "QueryInterface",
    "query",

    # Deployment
    "Deployer",
    "deploy",
    "convert",
]
