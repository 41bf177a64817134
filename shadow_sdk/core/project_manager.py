# shadow_sdk/core/project_manager.py
"""Project lifecycle management"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .manifest_store import ManifestStore
from .path_resolver import PathResolver
from .validation import is_placeholder_address, validate_pubkey
from ..api.exceptions import ConfigError, ShadowSDKError
from ..constants import (
    ANCHOR_COMMAND,
    ANCHOR_CONFIG_FILE,
    DEFAULT_ASSETS_DIR,
    DEFAULT_PROGRAM_PATH,
    DEFAULT_PROJECT_VERSION,
    MANIFEST_FILE,
    PLACEHOLDER_PROGRAM_ID,
    PROGRAM_NAME_PATTERN,
)
from ..models.manifest import ProjectManifest
from ..templates import render
from ..utils.process_utils import CommandRunner, run_command
from ..utils.template_utils import module_name
from ..utils.version_utils import is_valid_version

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of project validation"""
    success: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add error message"""
        self.errors.append(message)
        self.success = False

    def add_warning(self, message: str) -> None:
        """Add warning message"""
        self.warnings.append(message)

    def add_info(self, message: str) -> None:
        """Add info message"""
        self.info.append(message)


def find_project_root(start_path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Find the nearest directory holding shadow.json

    Args:
        start_path: Starting directory (defaults to current directory)

    Returns:
        Project root path or None if not found
    """
    current = Path(start_path).resolve() if start_path else Path.cwd()

    for candidate in [current, *current.parents]:
        if (candidate / MANIFEST_FILE).is_file():
            return candidate

    return None


class ProjectManager:
    """Creates and validates Shadow site projects"""

    def __init__(self,
                 runner: CommandRunner = run_command,
                 anchor_command: str = ANCHOR_COMMAND):
        """Initialize project manager

        Args:
            runner: Command runner used for ``anchor init``
            anchor_command: Anchor CLI executable
        """
        self.runner = runner
        self.anchor_command = anchor_command

    def create_project(self, name: str, directory: Optional[Union[str, Path]] = None) -> Path:
        """Scaffold a new site project

        Creates ``<directory>/<name>`` with an Anchor program (via
        ``anchor init`` when available, otherwise a minimal layout), an
        ``assets/index.html`` page, shadow.json, .gitignore and README.md.

        Args:
            name: Project name, also the directory and program name
            directory: Parent directory (defaults to current directory)

        Returns:
            Path to the new project

        Raises:
            ConfigError: If the name is invalid or the directory exists
        """
        if not PROGRAM_NAME_PATTERN.match(name):
            raise ConfigError(
                f"Invalid project name '{name}': use letters, digits, '-' and '_', "
                "starting with a letter"
            )

        parent = Path(directory).resolve() if directory else Path.cwd()
        project_root = parent / name
        if project_root.exists():
            raise ConfigError(f"Directory {project_root} already exists")

        if not self._anchor_init(name, parent):
            self._create_basic_anchor_structure(project_root, name)

        assets_dir = project_root / DEFAULT_ASSETS_DIR
        assets_dir.mkdir(parents=True, exist_ok=True)
        (assets_dir / "index.html").write_text(render("index.html", name=name), encoding='utf-8')

        manifest = ProjectManifest(
            name=name,
            version=DEFAULT_PROJECT_VERSION,
            program_path=DEFAULT_PROGRAM_PATH
        )
        manifest.touch()
        ManifestStore(PathResolver(project_root)).save(manifest)

        gitignore = project_root / ".gitignore"
        existing = gitignore.read_text(encoding='utf-8') if gitignore.exists() else ""
        gitignore.write_text(existing + render("gitignore"), encoding='utf-8')

        (project_root / "README.md").write_text(render("README.md", name=name), encoding='utf-8')

        logger.info("Created project %s at %s", name, project_root)
        return project_root

    def _anchor_init(self, name: str, parent: Path) -> bool:
        """Run ``anchor init``; False when the toolchain is unavailable"""
        parent.mkdir(parents=True, exist_ok=True)
        try:
            result = self.runner([self.anchor_command, "init", name, "--no-git"], parent, 600)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("Anchor CLI not available (%s), creating basic structure", e)
            return False

        if not result.ok:
            logger.warning("anchor init failed, creating basic structure:\n%s", result.tail(5))
            return False
        return True

    def _create_basic_anchor_structure(self, project_root: Path, name: str) -> None:
        """Minimal Anchor workspace with the placeholder program id"""
        src_dir = project_root / "programs" / name / "src"
        src_dir.mkdir(parents=True, exist_ok=True)

        variables = {
            'module_name': module_name(name),
            'program_id': PLACEHOLDER_PROGRAM_ID,
        }
        (src_dir / "lib.rs").write_text(render("lib.rs", **variables), encoding='utf-8')
        (project_root / ANCHOR_CONFIG_FILE).write_text(
            render("Anchor.toml", **variables), encoding='utf-8'
        )

    def validate_project(self, path_resolver: PathResolver) -> ValidationResult:
        """Check a project for problems that would break deployment

        Args:
            path_resolver: Resolver for the project

        Returns:
            ValidationResult
        """
        result = ValidationResult()

        try:
            manifest = ManifestStore(path_resolver).load()
        except ShadowSDKError as e:
            result.add_error(str(e))
            return result

        if manifest is None:
            result.add_error(f"{MANIFEST_FILE} not found in {path_resolver.project_root}")
            return result

        if not is_valid_version(manifest.version):
            result.add_warning(f"Version '{manifest.version}' is not a valid version string")

        program_dir = path_resolver.get_program_dir(manifest.program_path)
        if not (program_dir / ANCHOR_CONFIG_FILE).exists():
            result.add_warning(f"{ANCHOR_CONFIG_FILE} not found in {program_dir}")
        else:
            result.add_info(f"Program workspace: {path_resolver.make_relative(program_dir)}")

        address = manifest.program_address
        if address and (not validate_pubkey(address) or is_placeholder_address(address)):
            result.add_error(f"Recorded program address is invalid: {address}")

        if not path_resolver.wallet_path.exists():
            result.add_info("No wallet yet: one is generated on first deploy")

        return result
