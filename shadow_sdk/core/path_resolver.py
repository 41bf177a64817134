"""Path resolution module for shadow-sdk projects"""

import os
from pathlib import Path
from typing import Optional, Union

from ..constants import (
    ANCHOR_CONFIG_FILE,
    DEFAULT_PROGRAM_PATH,
    INTEGRATION_FILE,
    KEYPAIR_FILE,
    MANIFEST_FILE,
    SETTINGS_FILE,
    STATE_DIR,
    WALLET_FILE,
)


class PathResolver:
    """Resolves paths within a Shadow project"""

    def __init__(self, project_root: Union[str, Path]):
        """Initialize path resolver

        Args:
            project_root: Root directory of the project
        """
        self.project_root = Path(project_root).resolve()

    def resolve(self, path: Union[str, Path]) -> Path:
        """Resolve a path relative to project root

        Args:
            path: Path to resolve (can be relative or absolute)

        Returns:
            Resolved absolute path
        """
        path = Path(os.path.expanduser(os.path.expandvars(str(path))))

        if path.is_absolute():
            return path

        # Resolve relative to project root
        return (self.project_root / path).resolve()

    @property
    def manifest_path(self) -> Path:
        """Path to shadow.json"""
        return self.project_root / MANIFEST_FILE

    @property
    def state_dir(self) -> Path:
        """Path to the project-scoped local state directory"""
        return self.project_root / STATE_DIR

    @property
    def wallet_path(self) -> Path:
        """Path to the wallet file"""
        return self.state_dir / WALLET_FILE

    @property
    def keypair_path(self) -> Path:
        """Path to the Solana CLI compatible keypair file"""
        return self.state_dir / KEYPAIR_FILE

    @property
    def settings_path(self) -> Path:
        """Path to the optional SDK settings file"""
        return self.state_dir / SETTINGS_FILE

    @property
    def integration_path(self) -> Path:
        """Path to the generated browser integration module"""
        return self.project_root / INTEGRATION_FILE

    def get_program_dir(self, program_path: Optional[str] = None) -> Path:
        """Get the on-chain program workspace directory

        The Anchor workspace is the directory holding Anchor.toml. Projects
        created by ``shadow init`` keep it at the project root with the
        program sources under ``programs/``; older layouts keep the whole
        workspace under ``programs/``.

        Args:
            program_path: Program path recorded in the manifest

        Returns:
            Directory to run the toolchain in
        """
        candidate = self.resolve(program_path or DEFAULT_PROGRAM_PATH)
        if (candidate / ANCHOR_CONFIG_FILE).exists():
            return candidate
        if (self.project_root / ANCHOR_CONFIG_FILE).exists():
            return self.project_root
        return candidate

    def make_relative(self, path: Union[str, Path]) -> Path:
        """Make a path relative to project root

        Args:
            path: Path to make relative

        Returns:
            Relative path
        """
        path = Path(path).resolve()

        try:
            return path.relative_to(self.project_root)
        except ValueError:
            # Path is not under project root
            return path
