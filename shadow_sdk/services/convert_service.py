"""Convert an existing static site into a Shadow site"""

import asyncio
import logging

from .domain_service import DomainService
from .mint_service import MintService
from .upload_service import UploadService
from ..api.exceptions import DomainConflictError, ShadowSDKError, describe_error
from ..constants import (
    DEFAULT_INCLUDE_PATTERNS,
    INTEGRATION_FILE,
    MANIFEST_FILE,
    SHADOW_DOMAIN_SUFFIX,
    Network,
    StorageKind,
)
from ..core.discovery import ContentDiscovery
from ..core.identity_store import IdentityStore
from ..core.manifest_store import ManifestStore
from ..core.path_resolver import PathResolver
from ..models.manifest import ProjectManifest, utc_now
from ..models.result import ConvertResult, StageWarning
from ..templates import render

logger = logging.getLogger(__name__)

# Existing sites keep their programs elsewhere; only build output is skipped
CONVERT_EXCLUDE_PATTERNS = [
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".next/**",
    ".shadow/**",
    MANIFEST_FILE,
    INTEGRATION_FILE,
    "package-lock.json",
    "yarn.lock",
]
CONVERTED_VERSION = "1.0.0"


def token_domain(token_mint: str) -> str:
    """The .shadow alias derived from a token mint address"""
    return f"{token_mint[:8].lower()}{SHADOW_DOMAIN_SUFFIX}"


class ConvertService:
    """Publishes an existing site and writes shadow.json for it

    The site's address is its ownership token when one is minted, or the
    wallet itself otherwise. No on-chain program is deployed.
    """

    def __init__(self,
                 path_resolver: PathResolver,
                 upload_service: UploadService,
                 mint_service: MintService,
                 domain_service: DomainService):
        self.path_resolver = path_resolver
        self.identity_store = IdentityStore(path_resolver)
        self.manifest_store = ManifestStore(path_resolver)
        self.upload_service = upload_service
        self.mint_service = mint_service
        self.domain_service = domain_service

    async def convert(self,
                      network: Network = Network.DEVNET,
                      storage: StorageKind = StorageKind.IPFS,
                      mint_token: bool = True) -> ConvertResult:
        """Convert the site at the resolver's project root

        Returns:
            ConvertResult; ``already_converted`` is set, with no side
            effects, when shadow.json already exists

        Raises:
            StateCorruptError: If the wallet or manifest is corrupt
            EmptyFileSetError: If the site has no publishable files
            UploadError: If the upload fails
        """
        existing = self.manifest_store.load()
        if existing is not None:
            logger.warning("Site already has %s", MANIFEST_FILE)
            return ConvertResult(manifest=existing, already_converted=True)

        network = Network.parse(network)
        storage = StorageKind(storage) if not isinstance(storage, StorageKind) else storage
        root = self.path_resolver.project_root

        identity = self.identity_store.ensure_identity()
        result = ConvertResult(
            manifest=ProjectManifest(name=root.name, version=CONVERTED_VERSION,
                                     network=network, storage=storage),
            identity_created=self.identity_store.last_created,
            wallet=identity.public_key_b58
        )
        manifest = result.manifest

        discovery = ContentDiscovery(DEFAULT_INCLUDE_PATTERNS, CONVERT_EXCLUDE_PATTERNS)
        file_set = await discovery.discover_async(root)
        receipt = await self.upload_service.upload(file_set, storage)
        manifest.storage_cid = receipt.cid
        manifest.content_digest = file_set.digest()
        if receipt.partial:
            result.warnings.append(StageWarning(
                stage="upload",
                message=f"{storage.value} published {receipt.files_published} of {receipt.files_total} files"
            ))

        if mint_token:
            loop = asyncio.get_running_loop()
            try:
                manifest.token_mint = await loop.run_in_executor(
                    None, self.mint_service.mint_ownership_token, identity, network
                )
            except ShadowSDKError as e:
                self._warn(result, "mint", e)

        manifest.program_address = manifest.token_mint or identity.public_key_b58

        if manifest.token_mint:
            domain = token_domain(manifest.token_mint)
            try:
                await self.domain_service.register_alias(domain, manifest.program_address, identity)
                manifest.domain = domain
            except ShadowSDKError as e:
                self._warn(result, "domain", e)

        manifest.converted = True
        manifest.converted_at = utc_now()
        manifest.touch()
        self.manifest_store.save(manifest)

        integration_path = self.path_resolver.integration_path
        integration_path.write_text(render(
            "integration.js",
            program_address=manifest.program_address,
            token_mint=manifest.token_mint or "",
            domain=manifest.domain or "",
            storage_cid=manifest.storage_cid,
            network=network.value,
        ), encoding='utf-8')
        result.integration_path = str(integration_path)

        logger.info("Site converted: %s", manifest.program_address)
        return result

    @staticmethod
    def _warn(result: ConvertResult, stage: str, error: ShadowSDKError) -> None:
        guidance = error.guidance if isinstance(error, DomainConflictError) else None
        warning = StageWarning(
            stage=stage,
            message=describe_error(stage, error),
            error_code=error.error_code,
            guidance=guidance
        )
        result.warnings.append(warning)
        logger.warning("%s", warning)
