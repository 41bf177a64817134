# shadow_sdk/models/__init__.py
"""Data models for shadow-sdk"""

from .identity import KeyPair
from .manifest import ProjectManifest
from .fileset import FileEntry, FileSet
from .result import (
    PipelineState,
    StagePolicy,
    StageWarning,
    UploadReceipt,
    DeployResult,
    ConvertResult,
)

__all__ = [
    # Identity
    "KeyPair",

    # Manifest
    "ProjectManifest",

    # Content
    "FileEntry",
    "FileSet",

    # Results
    "PipelineState",
    "StagePolicy",
    "StageWarning",
    "UploadReceipt",
    "DeployResult",
    "ConvertResult",
]
