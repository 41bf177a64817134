# shadow_sdk/core/toolchain.py
"""Anchor build/deploy toolchain adapter

All knowledge of the toolchain's text output lives in
``extract_program_id``; callers only ever see a ToolchainResult or a
typed error.
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .validation import is_placeholder_address, validate_pubkey
from ..api.exceptions import (
    AddressExtractionError,
    DeploymentFailedError,
    ToolchainMissingError,
)
from ..constants import ANCHOR_COMMAND, ANCHOR_CONFIG_FILE, TOOLCHAIN_TIMEOUT, Network
from ..utils.process_utils import CommandResult, CommandRunner, run_command

logger = logging.getLogger(__name__)

# Known "program id" lines printed by anchor deploy / solana program deploy
PROGRAM_ID_PATTERNS = [
    re.compile(r"Program Id:\s*([1-9A-HJ-NP-Za-km-z]{32,44})\b"),
    re.compile(r"Program ID:\s*([1-9A-HJ-NP-Za-km-z]{32,44})\b"),
    re.compile(r"\"?programId\"?\s*[:=]\s*\"?([1-9A-HJ-NP-Za-km-z]{32,44})\b"),
]
ANCHOR_PROGRAMS_SECTION = re.compile(r"^\s*\[programs\.([A-Za-z-]+)\]\s*$")
ANCHOR_PROGRAM_ENTRY = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*=\s*\"([^\"]+)\"\s*$")
ANCHOR_SECTION = re.compile(r"^\s*\[")


@dataclass(frozen=True)
class ToolchainResult:
    """Program address produced or resolved by the toolchain"""
    address: str
    source: str  # "output", "anchor_toml" or "manifest"


def _valid_address(candidate: str) -> bool:
    return validate_pubkey(candidate) and not is_placeholder_address(candidate)


def parse_anchor_programs(anchor_toml_text: str, cluster_names: Iterable[str]) -> List[str]:
    """Return program ids listed under ``[programs.<cluster>]`` tables

    Args:
        anchor_toml_text: Contents of Anchor.toml
        cluster_names: Table suffixes to accept, e.g. ("devnet",)

    Returns:
        Program ids in file order
    """
    wanted = {name.lower() for name in cluster_names}
    in_section = False
    ids = []

    for line in anchor_toml_text.splitlines():
        section = ANCHOR_PROGRAMS_SECTION.match(line)
        if section:
            in_section = section.group(1).lower() in wanted
            continue
        if ANCHOR_SECTION.match(line):
            in_section = False
            continue
        if in_section:
            entry = ANCHOR_PROGRAM_ENTRY.match(line)
            if entry:
                ids.append(entry.group(2))

    return ids


def extract_program_id(output: str,
                       anchor_toml_text: Optional[str] = None,
                       network: Network = Network.DEVNET) -> ToolchainResult:
    """Extract the deployed program address

    Deploy output is searched first; Anchor.toml's ``[programs.<cluster>]``
    table is the fallback. Every candidate must be a base58 32-byte key and
    must not be the scaffolding placeholder.

    Raises:
        AddressExtractionError: If no valid address is found
    """
    rejected = []

    for pattern in PROGRAM_ID_PATTERNS:
        for match in pattern.finditer(output or ""):
            candidate = match.group(1)
            if _valid_address(candidate):
                return ToolchainResult(address=candidate, source="output")
            rejected.append(candidate)

    if anchor_toml_text:
        network = Network.parse(network)
        clusters = {network.value, network.cluster}
        for candidate in parse_anchor_programs(anchor_toml_text, clusters):
            if _valid_address(candidate):
                return ToolchainResult(address=candidate, source="anchor_toml")
            rejected.append(candidate)

    message = "Could not extract program ID from deploy output"
    if rejected:
        message += f" (rejected candidates: {', '.join(rejected)})"
    raise AddressExtractionError(message, context={'network': Network.parse(network).value})


class AnchorToolchain:
    """Runs ``anchor build`` and ``anchor deploy`` in the program workspace"""

    def __init__(self,
                 program_dir: Path,
                 command: str = ANCHOR_COMMAND,
                 runner: CommandRunner = run_command,
                 timeout: float = TOOLCHAIN_TIMEOUT):
        self.program_dir = Path(program_dir)
        self.command = command
        self.runner = runner
        self.timeout = timeout

    @property
    def anchor_toml(self) -> Path:
        return self.program_dir / ANCHOR_CONFIG_FILE

    def check_workspace(self) -> None:
        """Ensure there is an Anchor workspace to build

        Raises:
            ToolchainMissingError: If Anchor.toml is missing
        """
        if not self.anchor_toml.exists():
            raise ToolchainMissingError(
                f"{ANCHOR_CONFIG_FILE} not found in {self.program_dir}. "
                "Run 'anchor init' or 'shadow init' first.",
                context={'program_dir': str(self.program_dir)}
            )

    def _run(self, args: List[str], network: Network) -> CommandResult:
        try:
            result = self.runner(args, self.program_dir, self.timeout)
        except FileNotFoundError as e:
            raise ToolchainMissingError(
                f"'{self.command}' is not installed. Install the Anchor CLI "
                "(https://www.anchor-lang.com/docs/installation) and retry.",
                context={'command': self.command},
                cause=e
            )
        except subprocess.TimeoutExpired as e:
            raise DeploymentFailedError(
                f"'{' '.join(args)}' timed out after {self.timeout}s",
                context={'network': network.value},
                cause=e
            )

        if not result.ok:
            raise DeploymentFailedError(
                f"'{' '.join(args)}' exited with code {result.returncode}. "
                "Check network connectivity and wallet funds.\n"
                f"{result.tail()}",
                context={'network': network.value}
            )
        return result

    def build(self, network: Network = Network.DEVNET) -> CommandResult:
        """Run ``anchor build``"""
        self.check_workspace()
        logger.info("Building Anchor program in %s", self.program_dir)
        return self._run([self.command, "build"], Network.parse(network))

    def deploy(self,
               network: Network = Network.DEVNET,
               wallet_path: Optional[Path] = None) -> ToolchainResult:
        """Run ``anchor deploy`` and return the deployed program address

        Raises:
            ToolchainMissingError: If anchor or the workspace is missing
            DeploymentFailedError: If the deployment command fails
            AddressExtractionError: If the address cannot be determined
        """
        network = Network.parse(network)
        self.check_workspace()

        args = [self.command, "deploy", "--provider.cluster", network.cluster]
        if wallet_path is not None:
            args.extend(["--provider.wallet", str(wallet_path)])

        logger.info("Deploying Anchor program to %s", network.value)
        result = self._run(args, network)

        anchor_toml_text = None
        try:
            anchor_toml_text = self.anchor_toml.read_text(encoding='utf-8')
        except OSError:
            logger.debug("Could not read %s for program id fallback", self.anchor_toml)

        return extract_program_id(result.output, anchor_toml_text, network)
