"""Deployer API for deployment operations"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .backend import BackendClient
from .exceptions import EmptyFileSetError, ProjectNotFoundError
from .rpc import SolanaRpc
from ..constants import Network, StorageKind
from ..core.discovery import ContentDiscovery
from ..core.identity_store import IdentityStore
from ..core.path_resolver import PathResolver
from ..core.project_manager import ProjectManager, find_project_root
from ..models.config import Settings
from ..models.result import ConvertResult, DeployResult
from ..services.config_service import ConfigService
from ..services.convert_service import ConvertService
from ..services.deploy_service import DeployOptions, DeployService, resume
from ..services.domain_service import DomainService
from ..services.mint_service import create_mint_service
from ..services.upload_service import UploadService
from ..utils.async_utils import run_async

logger = logging.getLogger(__name__)


class Deployer:
    """Deployer class for deployment operations"""

    def __init__(self,
                 project_root: Optional[Union[str, Path]] = None,
                 settings: Optional[Settings] = None,
                 backend_url: Optional[str] = None):
        """
        Initialize deployer

        Args:
            project_root: Project directory, or any directory below it
                (defaults to the current directory)
            settings: Explicit settings; loaded from .shadow/config.yaml and
                the environment when omitted
            backend_url: Backend URL override
        """
        root = find_project_root(project_root)
        if root is None:
            raise ProjectNotFoundError()

        self.path_resolver = PathResolver(root)
        if settings is None:
            settings = ConfigService(self.path_resolver.settings_path).load_settings(
                overrides={'backend_url': backend_url}
            )
        self.settings = settings

    @property
    def project_root(self) -> Path:
        return self.path_resolver.project_root

    def create_service(self, **collaborators) -> DeployService:
        """Deploy service for this project (collaborators may be injected)"""
        return DeployService(self.path_resolver, settings=self.settings, **collaborators)

    def deploy(self,
               network: Union[str, Network] = Network.DEVNET,
               storage: Union[str, StorageKind] = StorageKind.IPFS,
               domain: Optional[str] = None,
               mint_token: bool = False,
               include: Optional[List[str]] = None,
               exclude: Optional[List[str]] = None,
               require_domain: bool = False,
               raise_on_failure: bool = False) -> DeployResult:
        """
        Deploy the project

        Args:
            network: Target cluster
            storage: Content storage backend
            domain: Optional alias to register for the program
            mint_token: Mint a site ownership token
            include: Include patterns (default: site asset extensions)
            exclude: Exclude patterns (default: build and dependency dirs)
            require_domain: Treat domain registration failure as fatal
            raise_on_failure: Raise PipelineFailedError instead of
                returning a failed result

        Returns:
            DeployResult: Deployment result
        """
        options = DeployOptions(
            network=network,
            storage=storage,
            domain=domain,
            mint_token=mint_token,
            include_patterns=include,
            exclude_patterns=exclude,
            domain_required=require_domain,
            raise_on_failure=raise_on_failure
        )
        return run_async(self.deploy_async(options))

    async def deploy_async(self, options: DeployOptions) -> DeployResult:
        """Async implementation of deploy"""
        return await self.create_service().run(options)

    def status(self, verify: bool = False) -> Dict[str, Any]:
        """
        Describe the project's deployment state

        Args:
            verify: Also check the recorded program on-chain

        Returns:
            Dictionary with manifest, wallet, validation, next stage and,
            when requested, on-chain verification
        """
        service = self.create_service()
        manifest = service.load_manifest()
        wallet = IdentityStore(self.path_resolver).load_identity()
        validation = ProjectManager().validate_project(self.path_resolver)

        discovery = self.settings.discovery
        try:
            file_set = ContentDiscovery(
                discovery.include, discovery.exclude, discovery.read_concurrency
            ).discover(self.project_root)
            digest = file_set.digest()
            files = len(file_set)
        except EmptyFileSetError:
            digest = None
            files = 0

        options = DeployOptions(network=manifest.network, storage=manifest.storage)
        status = {
            'manifest': manifest.to_dict(),
            'wallet': wallet.public_key_b58 if wallet else None,
            'files': files,
            'next_state': resume(manifest, options, digest).value,
            'validation': validation,
        }

        if verify and manifest.program_address:
            rpc = SolanaRpc(self.settings.rpc_url(manifest.network), self.settings.request_timeout)
            status['verification'] = run_async(rpc.verify_program(manifest.program_address))

        return status


def convert(site_path: Union[str, Path] = ".",
            network: Union[str, Network] = Network.DEVNET,
            storage: Union[str, StorageKind] = StorageKind.IPFS,
            mint_token: bool = True,
            settings: Optional[Settings] = None) -> ConvertResult:
    """
    Convert an existing static site into a Shadow site

    Args:
        site_path: Site directory
        network: Target cluster
        storage: Content storage backend
        mint_token: Mint a site token used as the site address
        settings: Explicit settings

    Returns:
        ConvertResult
    """
    resolver = PathResolver(site_path)
    if not resolver.project_root.is_dir():
        raise EmptyFileSetError(
            f"Directory not found: {resolver.project_root}",
            context={'path': str(resolver.project_root)}
        )

    if settings is None:
        settings = ConfigService(resolver.settings_path).load_settings()

    async def run() -> ConvertResult:
        async with BackendClient(settings.backend_url, settings.request_timeout) as backend:
            service = ConvertService(
                resolver,
                UploadService(backend),
                create_mint_service(settings, resolver.keypair_path),
                DomainService(backend)
            )
            return await service.convert(network, storage, mint_token)

    return run_async(run())


def deploy(project_root: Union[str, Path] = ".", **kwargs) -> DeployResult:
    """
    Convenience function for deployment

    Args:
        project_root: Project directory
        **kwargs: Arguments passed to Deployer.deploy

    Returns:
        DeployResult: Deployment result
    """
    deployer = Deployer(project_root)
    return deployer.deploy(**kwargs)
