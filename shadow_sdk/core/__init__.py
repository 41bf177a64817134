"""Core functionality for shadow-sdk"""

from .path_resolver import PathResolver
from .identity_store import IdentityStore
from .manifest_store import ManifestStore
from .discovery import ContentDiscovery, PathMatcher, discover
from .toolchain import AnchorToolchain, ToolchainResult, extract_program_id
from .auth import create_auth_header, verify_auth_header
from .project_manager import ProjectManager, ValidationResult, find_project_root

__all__ = [
    "PathResolver",
    "IdentityStore",
    "ManifestStore",
    "ContentDiscovery",
    "PathMatcher",
    "discover",
    "AnchorToolchain",
    "ToolchainResult",
    "extract_program_id",
    "create_auth_header",
    "verify_auth_header",
    "ProjectManager",
    "ValidationResult",
    "find_project_root",
]
