"""Deployment orchestrator

Sequences identity, upload, program, mint and domain stages. Each stage
has a fixed policy: a fatal stage failure ends the run in ``failed``, a
recoverable one becomes a warning and the run continues. The manifest is
checkpointed after every stage so an interrupted run resumes from the
first stage whose output is not recorded yet.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Union

from .config_service import ConfigService
from .domain_service import DomainService
from .mint_service import MintService, create_mint_service
from .program_service import ProgramService
from .upload_service import UploadService
from ..api.backend import BackendClient
from ..api.exceptions import (
    DomainConflictError,
    PipelineFailedError,
    ProjectNotFoundError,
    ShadowSDKError,
    describe_error,
)
from ..constants import EMOJI_WARNING, MSG_DEPLOY_SUCCESS, ErrorCode, Network, StorageKind
from ..core.discovery import ContentDiscovery
from ..core.identity_store import IdentityStore
from ..core.manifest_store import ManifestStore
from ..core.path_resolver import PathResolver
from ..models.config import Settings
from ..models.fileset import FileSet
from ..models.identity import KeyPair
from ..models.manifest import ProjectManifest
from ..models.result import DeployResult, PipelineState, StagePolicy, StageWarning

logger = logging.getLogger(__name__)

# Order of successful transitions
STATE_ORDER = [
    PipelineState.INIT,
    PipelineState.IDENTITY_READY,
    PipelineState.ASSETS_UPLOADED,
    PipelineState.PROGRAM_READY,
    PipelineState.TOKEN_MINTED,
    PipelineState.DOMAIN_REGISTERED,
    PipelineState.COMPLETE,
]


def state_index(state: PipelineState) -> int:
    return STATE_ORDER.index(state)


@dataclass
class DeployOptions:
    """What a deployment run should do"""
    network: Network = Network.DEVNET
    storage: StorageKind = StorageKind.IPFS
    domain: Optional[str] = None
    mint_token: bool = False
    include_patterns: Optional[List[str]] = None
    exclude_patterns: Optional[List[str]] = None
    domain_required: bool = False
    raise_on_failure: bool = False

    def __post_init__(self):
        self.network = Network.parse(self.network)
        if not isinstance(self.storage, StorageKind):
            self.storage = StorageKind(self.storage)
        if self.domain:
            self.domain = self.domain.strip().lower()


@dataclass
class PipelineContext:
    """State threaded through the stages of one run"""
    manifest: ProjectManifest
    options: DeployOptions
    result: DeployResult
    identity: Optional[KeyPair] = None
    file_set: Optional[FileSet] = None

    @property
    def content_digest(self) -> Optional[str]:
        return self.file_set.digest() if self.file_set is not None else None


@dataclass
class Stage:
    """One pipeline step and what its failure means"""
    name: str
    state: PipelineState
    policy: StagePolicy
    run: Callable[[PipelineContext], Awaitable[None]]
    enabled: Callable[[DeployOptions], bool] = field(default=lambda options: True)


def resume(manifest: ProjectManifest,
           options: DeployOptions,
           content_digest: Optional[str] = None) -> PipelineState:
    """Next state the pipeline has to reach, from what the manifest records

    Returns the target state of the first stage whose output is missing,
    or COMPLETE when every requested stage is already recorded. A recorded
    upload only counts when ``content_digest`` is known and matches the
    digest it was produced for.
    """
    if (not manifest.storage_cid
            or manifest.storage != options.storage
            or content_digest is None
            or manifest.content_digest != content_digest):
        return PipelineState.ASSETS_UPLOADED

    if not manifest.program_address or manifest.network != options.network:
        return PipelineState.PROGRAM_READY

    if options.mint_token and not manifest.token_mint:
        return PipelineState.TOKEN_MINTED

    if options.domain and manifest.domain != options.domain:
        return PipelineState.DOMAIN_REGISTERED

    return PipelineState.COMPLETE


class DeployService:
    """Runs the deployment pipeline for one project directory

    Not safe to run concurrently against the same project: the manifest
    is the only shared state and is not locked.
    """

    def __init__(self,
                 path_resolver: PathResolver,
                 settings: Optional[Settings] = None,
                 backend: Optional[BackendClient] = None,
                 upload_service: Optional[UploadService] = None,
                 program_service: Optional[ProgramService] = None,
                 mint_service: Optional[MintService] = None,
                 domain_service: Optional[DomainService] = None):
        self.path_resolver = path_resolver
        if settings is None:
            settings = ConfigService(path_resolver.settings_path).load_settings()
        self.settings = settings

        self.backend = backend or BackendClient(settings.backend_url, settings.request_timeout)
        self.identity_store = IdentityStore(path_resolver)
        self.manifest_store = ManifestStore(path_resolver)
        self.upload_service = upload_service or UploadService(self.backend)
        self.program_service = program_service or ProgramService(path_resolver, settings.toolchain)
        self.mint_service = mint_service or create_mint_service(settings, path_resolver.keypair_path)
        self.domain_service = domain_service or DomainService(self.backend)

        self.stages = [
            Stage("identity", PipelineState.IDENTITY_READY, StagePolicy.FATAL,
                  self._identity_stage),
            Stage("upload", PipelineState.ASSETS_UPLOADED, StagePolicy.FATAL,
                  self._upload_stage),
            Stage("program", PipelineState.PROGRAM_READY, StagePolicy.FATAL,
                  self._program_stage),
            Stage("mint", PipelineState.TOKEN_MINTED, StagePolicy.RECOVERABLE,
                  self._mint_stage, enabled=lambda options: options.mint_token),
            Stage("domain", PipelineState.DOMAIN_REGISTERED, StagePolicy.RECOVERABLE,
                  self._domain_stage, enabled=lambda options: bool(options.domain)),
        ]

    def policy_for(self, stage: Stage, options: DeployOptions) -> StagePolicy:
        if stage.name == "domain" and options.domain_required:
            return StagePolicy.FATAL
        return stage.policy

    def load_manifest(self) -> ProjectManifest:
        """Load shadow.json

        Raises:
            ProjectNotFoundError: If the project has no manifest
            StateCorruptError: If the manifest cannot be parsed
        """
        manifest = self.manifest_store.load()
        if manifest is None:
            raise ProjectNotFoundError()
        return manifest

    def checkpoint(self, manifest: ProjectManifest) -> None:
        manifest.touch()
        self.manifest_store.save(manifest)

    async def run(self, options: DeployOptions) -> DeployResult:
        """Run the pipeline

        Returns:
            DeployResult in state COMPLETE or FAILED

        Raises:
            ProjectNotFoundError: If the project has no manifest
            StateCorruptError: If the manifest cannot be parsed
            PipelineFailedError: On a fatal stage error when
                ``options.raise_on_failure`` is set
        """
        manifest = self.load_manifest()
        self._apply_options(manifest, options)

        result = DeployResult(state=PipelineState.INIT, manifest=manifest)
        ctx = PipelineContext(manifest=manifest, options=options, result=result)

        try:
            for stage in self.stages:
                if not stage.enabled(options):
                    continue

                if stage.name not in ("identity", "upload"):
                    target = resume(manifest, options, ctx.content_digest)
                    if state_index(stage.state) < state_index(target):
                        logger.info("Stage %s already recorded, skipping", stage.name)
                        result.skipped_stages.append(stage.name)
                        result.state = stage.state
                        continue

                logger.info("Running stage: %s", stage.name)
                try:
                    await stage.run(ctx)
                except ShadowSDKError as e:
                    if self.policy_for(stage, options) == StagePolicy.RECOVERABLE:
                        self._record_warning(result, stage, e)
                        continue
                    return self._fail(ctx, stage, e)

                result.state = stage.state
                if stage.name not in result.skipped_stages:
                    result.completed_stages.append(stage.name)
                self.checkpoint(manifest)

        except PipelineFailedError:
            raise
        except Exception:
            # Unexpected errors still leave confirmed stages on disk
            result.finish(PipelineState.FAILED)
            self.checkpoint(manifest)
            raise
        finally:
            result.upload_calls = self.upload_service.calls
            await self.backend.close()

        result.finish(PipelineState.COMPLETE)
        self.checkpoint(manifest)
        logger.info(MSG_DEPLOY_SUCCESS.format(address=manifest.program_address))
        return result

    def _apply_options(self, manifest: ProjectManifest, options: DeployOptions) -> None:
        if manifest.network != options.network:
            if manifest.program_address:
                logger.info(
                    "Network changed from %s to %s: recorded program, token and domain are not reused",
                    manifest.network.value, options.network.value
                )
            manifest.program_address = None
            manifest.token_mint = None
            manifest.domain = None
            manifest.network = options.network

        if manifest.storage != options.storage:
            manifest.storage_cid = None
            manifest.content_digest = None
            manifest.storage = options.storage

    def _fail(self, ctx: PipelineContext, stage: Stage, error: Exception) -> DeployResult:
        result = ctx.result
        result.failed_stage = stage.name
        result.error = describe_error(stage.name, error)
        result.finish(PipelineState.FAILED)
        logger.error("Deployment failed at stage %s: %s", stage.name, result.error)

        self.checkpoint(ctx.manifest)

        if ctx.options.raise_on_failure:
            raise PipelineFailedError(stage.name, error, result) from error
        return result

    @staticmethod
    def _record_warning(result: DeployResult, stage: Stage, error: Exception) -> None:
        guidance = None
        if isinstance(error, DomainConflictError):
            guidance = error.guidance

        warning = StageWarning(
            stage=stage.name,
            message=describe_error(stage.name, error),
            error_code=getattr(error, 'error_code', None),
            guidance=guidance
        )
        result.add_warning(warning)
        logger.warning("%s %s", EMOJI_WARNING, warning)

    # Stages

    async def _identity_stage(self, ctx: PipelineContext) -> None:
        ctx.identity = self.identity_store.ensure_identity()
        ctx.result.identity_created = self.identity_store.last_created
        ctx.result.wallet = ctx.identity.public_key_b58

    async def _upload_stage(self, ctx: PipelineContext) -> None:
        options = ctx.options
        discovery_config = self.settings.discovery
        discovery = ContentDiscovery(
            options.include_patterns or discovery_config.include,
            options.exclude_patterns if options.exclude_patterns is not None
            else discovery_config.exclude,
            discovery_config.read_concurrency
        )

        # Discovery fails before any network call when there is nothing to publish
        ctx.file_set = await discovery.discover_async(self.path_resolver.project_root)
        digest = ctx.content_digest

        if state_index(resume(ctx.manifest, options, digest)) > state_index(PipelineState.ASSETS_UPLOADED):
            logger.info("Content unchanged since %s, not uploading again", ctx.manifest.storage_cid)
            ctx.result.skipped_stages.append("upload")
            return

        receipt = await self.upload_service.upload(ctx.file_set, options.storage)
        ctx.manifest.storage_cid = receipt.cid
        ctx.manifest.content_digest = digest

        if receipt.partial:
            ctx.result.add_warning(StageWarning(
                stage="upload",
                message=(
                    f"{options.storage.value} published {receipt.files_published} of "
                    f"{receipt.files_total} files"
                ),
                error_code=ErrorCode.PARTIAL_UPLOAD,
                guidance="Use --storage ipfs to publish the whole site"
            ))

    async def _program_stage(self, ctx: PipelineContext) -> None:
        loop = asyncio.get_running_loop()
        program = await loop.run_in_executor(
            None,
            self.program_service.deploy_or_resolve,
            ctx.manifest,
            ctx.identity,
            ctx.options.network
        )
        ctx.manifest.program_address = program.address

    async def _mint_stage(self, ctx: PipelineContext) -> None:
        if ctx.manifest.token_mint:
            # Minting is not idempotent: never mint a second token
            logger.info("Token already minted: %s", ctx.manifest.token_mint)
            return

        loop = asyncio.get_running_loop()
        ctx.manifest.token_mint = await loop.run_in_executor(
            None,
            self.mint_service.mint_ownership_token,
            ctx.identity,
            ctx.options.network
        )

    async def _domain_stage(self, ctx: PipelineContext) -> None:
        await self.domain_service.register_alias(
            ctx.options.domain,
            ctx.manifest.program_address,
            ctx.identity
        )
        ctx.manifest.domain = ctx.options.domain


async def deploy_project(project_root: Union[str, PathResolver],
                         options: Optional[DeployOptions] = None,
                         **kwargs) -> DeployResult:
    """Convenience wrapper: build a DeployService and run it"""
    resolver = project_root if isinstance(project_root, PathResolver) else PathResolver(project_root)
    service = DeployService(resolver, **kwargs)
    return await service.run(options or DeployOptions())
