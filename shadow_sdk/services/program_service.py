"""Program deployment stage"""

import logging
from typing import Optional

from ..api.exceptions import AddressExtractionError
from ..constants import Network
from ..core.path_resolver import PathResolver
from ..core.toolchain import AnchorToolchain, ToolchainResult
from ..core.validation import is_placeholder_address, validate_pubkey
from ..models.config import ToolchainConfig
from ..models.identity import KeyPair
from ..models.manifest import ProjectManifest
from ..utils.process_utils import CommandRunner, run_command

logger = logging.getLogger(__name__)


class ProgramService:
    """Builds and deploys the on-chain program, or resolves a recorded one"""

    def __init__(self,
                 path_resolver: PathResolver,
                 toolchain_config: Optional[ToolchainConfig] = None,
                 runner: CommandRunner = run_command):
        self.path_resolver = path_resolver
        self.toolchain_config = toolchain_config or ToolchainConfig()
        self.runner = runner

    def toolchain_for(self, manifest: ProjectManifest) -> AnchorToolchain:
        return AnchorToolchain(
            self.path_resolver.get_program_dir(manifest.program_path),
            command=self.toolchain_config.anchor,
            runner=self.runner,
            timeout=self.toolchain_config.timeout
        )

    @staticmethod
    def resolve_recorded(manifest: ProjectManifest) -> Optional[ToolchainResult]:
        """Return the recorded program address, if any

        Raises:
            AddressExtractionError: If the recorded value is not a usable
                address
        """
        address = manifest.program_address
        if not address:
            return None

        if not validate_pubkey(address) or is_placeholder_address(address):
            raise AddressExtractionError(
                f"Recorded program address is invalid: {address}",
                context={'network': manifest.network.value}
            )
        return ToolchainResult(address=address, source="manifest")

    def deploy_or_resolve(self,
                          manifest: ProjectManifest,
                          identity: KeyPair,
                          network: Network) -> ToolchainResult:
        """Return the program address, deploying only when none is recorded

        Args:
            manifest: Project manifest (read only)
            identity: Wallet paying the deployment fees
            network: Target cluster

        Raises:
            ToolchainMissingError: If anchor or the workspace is missing
            DeploymentFailedError: If the build or deployment fails
            AddressExtractionError: If no valid address can be determined
        """
        recorded = self.resolve_recorded(manifest)
        if recorded is not None:
            logger.info("Using recorded program address %s", recorded.address)
            return recorded

        network = Network.parse(network)
        toolchain = self.toolchain_for(manifest)

        if not self.toolchain_config.skip_build:
            toolchain.build(network)

        logger.info("Deploying program as %s", identity.public_key_b58)
        result = toolchain.deploy(network, wallet_path=self.path_resolver.keypair_path)
        logger.info("Program deployed: %s (from %s)", result.address, result.source)
        return result
