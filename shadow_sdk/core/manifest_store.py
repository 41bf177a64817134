# shadow_sdk/core/manifest_store.py
"""Checkpointed project manifest persistence"""

import json
import logging
from typing import Optional

from .path_resolver import PathResolver
from ..api.exceptions import StateCorruptError
from ..models.manifest import ProjectManifest
from ..utils.file_utils import atomic_write_json

logger = logging.getLogger(__name__)


class ManifestStore:
    """Reads and writes shadow.json

    ``load`` returning None means "not initialized"; a file that exists but
    cannot be parsed raises StateCorruptError instead. ``save`` replaces the
    file atomically so an interrupted write never leaves it unparsable.
    """

    def __init__(self, path_resolver: PathResolver):
        self.path_resolver = path_resolver

    @property
    def path(self):
        return self.path_resolver.manifest_path

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[ProjectManifest]:
        """Load the manifest

        Returns:
            ProjectManifest, or None if the project has no manifest yet

        Raises:
            StateCorruptError: If the manifest exists but is unreadable
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StateCorruptError(f"Manifest is unreadable: {self.path}: {e}", str(self.path))

        try:
            return ProjectManifest.from_dict(data)
        except (TypeError, ValueError) as e:
            raise StateCorruptError(f"Manifest is invalid: {self.path}: {e}", str(self.path))

    def save(self, manifest: ProjectManifest) -> None:
        """Persist the manifest atomically"""
        atomic_write_json(self.path, manifest.to_dict())
        logger.debug("Checkpointed manifest to %s", self.path)
