"""Shadow SDK - publish static sites addressed on Solana.

Site content goes to IPFS or Arweave, the site's identity is an on-chain
program (optionally with an ownership token and a human-readable domain),
and a per-project shadow.json records how far deployment got.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, deploy, convert
from .api.query import query

# Data models
from .models.identity import KeyPair
from .models.manifest import ProjectManifest
from .models.fileset import FileEntry, FileSet
from .models.result import DeployResult, ConvertResult, PipelineState, StageWarning

# Exceptions
from .api.exceptions import (
    ShadowSDKError,
    StateCorruptError,
    ProjectNotFoundError,
    ConfigError,
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

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",

    # Core API functions
    "deploy",
    "convert",
    "query",

    # Data models
    "KeyPair",
    "ProjectManifest",
    "FileEntry",
    "FileSet",
    "DeployResult",
    "ConvertResult",
    "PipelineState",
    "StageWarning",

    # Exceptions
    "ShadowSDKError",
    "StateCorruptError",
    "ProjectNotFoundError",
    "ConfigError",
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
]
