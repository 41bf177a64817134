"""Global constants for shadow-sdk"""

from enum import Enum
import re

APP_NAME = "shadow"
LOG_FORMAT = "%(message)s"

# Version related
DEFAULT_PROJECT_VERSION = "0.1.0"

# Project identification
MANIFEST_FILE = "shadow.json"
STATE_DIR = ".shadow"
WALLET_FILE = "wallet.json"
KEYPAIR_FILE = "id.json"
SETTINGS_FILE = "config.yaml"
INTEGRATION_FILE = "shadow-integration.js"
ANCHOR_CONFIG_FILE = "Anchor.toml"
DEFAULT_PROGRAM_PATH = "./programs"
DEFAULT_ASSETS_DIR = "assets"

# Secret material is only readable by the owner
SECRET_FILE_MODE = 0o600

# Network endpoints
DEFAULT_BACKEND_URL = "http://localhost:8080"
DEFAULT_RPC_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}
# Cluster names understood by the Solana toolchains
CLUSTER_NAMES = {
    "devnet": "devnet",
    "mainnet": "mainnet-beta",
}
DEFAULT_REQUEST_TIMEOUT = 60.0  # seconds
DEFAULT_READ_CONCURRENCY = 16

# External toolchains
ANCHOR_COMMAND = "anchor"
SPL_TOKEN_COMMAND = "spl-token"
TOOLCHAIN_TIMEOUT = 1800  # seconds

# Placeholder id written by scaffolding, never a deployed program
PLACEHOLDER_PROGRAM_ID = "11111111111111111111111111111111"

# Content discovery
DEFAULT_INCLUDE_PATTERNS = [
    "**/*.{html,css,js,jsx,tsx,json,png,jpg,jpeg,svg,woff,woff2}",
]
DEFAULT_EXCLUDE_PATTERNS = [
    "node_modules/**",
    ".git/**",
    f"{STATE_DIR}/**",
    "programs/**",
    "target/**",
    "anchor/**",
    "dist/**",
    "build/**",
    ".next/**",
    MANIFEST_FILE,
    INTEGRATION_FILE,
    "package-lock.json",
    "yarn.lock",
    "*.log",
]
# Never published, whatever exclude patterns a caller supplies
PROTECTED_PATTERNS = [
    f"{STATE_DIR}/**",
    MANIFEST_FILE,
    INTEGRATION_FILE,
]
ENTRY_POINT_FILE = "index.html"

# Backend API
AUTH_HEADER_NAME = "X-Shadow-Auth"
AUTH_MESSAGE_PREFIX = "shadow-auth"
AUTH_MAX_AGE = 300  # seconds
SHADOW_DOMAIN_SUFFIX = ".shadow"


class Network(Enum):
    DEVNET = "devnet"
    MAINNET = "mainnet"

    @classmethod
    def parse(cls, value) -> 'Network':
        """Parse a network name, accepting the Solana cluster alias"""
        if isinstance(value, cls):
            return value
        if value == "mainnet-beta":
            return cls.MAINNET
        return cls(value)

    @property
    def cluster(self) -> str:
        return CLUSTER_NAMES[self.value]


class StorageKind(Enum):
    IPFS = "ipfs"
    ARWEAVE = "arweave"


# Error codes
class ErrorCode:
    STATE_CORRUPT = "SH001"
    PROJECT_NOT_FOUND = "SH002"
    CONFIG_FORMAT_ERROR = "SH003"
    EMPTY_FILE_SET = "SH004"
    UPLOAD_FAILED = "SH005"
    TOOLCHAIN_MISSING = "SH006"
    DEPLOYMENT_FAILED = "SH007"
    ADDRESS_EXTRACTION_FAILED = "SH008"
    MINT_FAILED = "SH009"
    INVALID_DOMAIN = "SH010"
    DOMAIN_CONFLICT = "SH011"
    REGISTRATION_FAILED = "SH012"
    BACKEND_ERROR = "SH013"
    RPC_ERROR = "SH014"
    PIPELINE_FAILED = "SH015"
    PARTIAL_UPLOAD = "SH016"
    DISCOVERY_FAILED = "SH017"


# Environment variables
ENV_BACKEND_URL = "SHADOW_BACKEND_URL"
ENV_RPC_URL = "SHADOW_RPC_URL"
ENV_REQUEST_TIMEOUT = "SHADOW_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "SHADOW_LOG_LEVEL"

# Validation patterns
DOMAIN_LABEL_PATTERN = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?$", re.IGNORECASE)
PROGRAM_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ROCKET = "🚀"
EMOJI_KEY = "🔑"

# Messages templates
MSG_IDENTITY_CREATED = (
    f"{EMOJI_WARNING} Generated new wallet {{pubkey}} at {{path}}. "
    "This key has no backup: save it securely!"
)
MSG_DEPLOY_SUCCESS = f"{EMOJI_SUCCESS} Deployment complete: {{address}}"
MSG_DOMAIN_CONFLICT_GUIDANCE = (
    "Domain '{domain}' is owned by another wallet. "
    "Pick another domain and run deploy again."
)
