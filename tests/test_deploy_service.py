"""End-to-end tests for the deployment pipeline"""

import json

import pytest

from shadow_sdk.api.exceptions import (
    EmptyFileSetError,
    PipelineFailedError,
    ProjectNotFoundError,
    StateCorruptError,
    UploadError,
)
from shadow_sdk.constants import ErrorCode, Network, StorageKind
from shadow_sdk.core.manifest_store import ManifestStore
from shadow_sdk.core.path_resolver import PathResolver
from shadow_sdk.models.manifest import ProjectManifest
from shadow_sdk.models.result import PipelineState, StagePolicy
from shadow_sdk.services.deploy_service import DeployOptions, resume
from shadow_sdk.utils.process_utils import CommandResult

from tests.conftest import ARWEAVE_TX, SITE_CID, new_address, read_manifest

DOMAIN = "mysite.shadow"


class TestHappyPath:

    @pytest.mark.asyncio
    async def test_three_files_ipfs_no_mint(self, project, make_service, backend, runner):
        result = await make_service(project).run(DeployOptions(storage=StorageKind.IPFS))

        assert result.state == PipelineState.COMPLETE
        assert result.success
        assert result.upload_calls == 1
        assert len(backend.upload_requests) == 1
        assert result.manifest.storage_cid == SITE_CID
        assert result.manifest.program_address == runner.program_id
        assert result.manifest.token_mint is None
        assert result.warnings == []
        assert result.completed_stages == ["identity", "upload", "program"]

        on_disk = read_manifest(project)
        assert on_disk['storageCid'] == SITE_CID
        assert on_disk['programAddress'] == runner.program_id
        assert on_disk['contentDigest']

    @pytest.mark.asyncio
    async def test_custom_exclude_keeps_wallet_private(self, project, make_service, backend):
        result = await make_service(project).run(DeployOptions(exclude_patterns=["*.map"]))

        assert result.success
        body = backend.upload_requests[0].read()
        assert b".shadow/" not in body
        assert b"secretKey" not in body
        assert b"shadow.json" not in body

    @pytest.mark.asyncio
    async def test_build_then_deploy(self, project, make_service, runner):
        await make_service(project).run(DeployOptions())

        assert [call[1] for call in runner.calls] == ["build", "deploy"]

    @pytest.mark.asyncio
    async def test_first_run_creates_wallet(self, project, make_service):
        result = await make_service(project).run(DeployOptions())

        assert result.identity_created
        assert project.wallet_path.exists()
        assert result.wallet

    @pytest.mark.asyncio
    async def test_mint_and_domain(self, project, make_service, backend, minter):
        result = await make_service(project).run(
            DeployOptions(mint_token=True, domain=DOMAIN)
        )

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.token_mint == minter.address
        assert result.manifest.domain == DOMAIN
        assert len(backend.calls("POST", "/api/domains")) == 1
        assert read_manifest(project)['tokenMint'] == minter.address


class TestFatalFailures:

    @pytest.mark.asyncio
    async def test_upload_500_fails_and_persists_nothing(self, project, make_service, backend, runner):
        backend.route("POST", "/api/upload/ipfs/directory", (500, {"error": "down"}))

        result = await make_service(project).run(DeployOptions())

        assert result.state == PipelineState.FAILED
        assert result.failed_stage == "upload"
        assert "[upload]" in result.error
        assert runner.calls == []

        on_disk = read_manifest(project)
        assert on_disk['storageCid'] is None
        assert on_disk['programAddress'] is None

    @pytest.mark.asyncio
    async def test_raise_on_failure(self, project, make_service, backend):
        backend.route("POST", "/api/upload/ipfs/directory", (500, {"error": "down"}))

        with pytest.raises(PipelineFailedError) as exc_info:
            await make_service(project).run(DeployOptions(raise_on_failure=True))

        error = exc_info.value
        assert error.stage == "upload"
        assert isinstance(error.error, UploadError)
        assert error.result.state == PipelineState.FAILED
        assert error.error_code == ErrorCode.PIPELINE_FAILED

    @pytest.mark.asyncio
    async def test_empty_project_fails_before_network(self, empty_project, make_service, backend):
        with pytest.raises(PipelineFailedError) as exc_info:
            await make_service(empty_project).run(DeployOptions(raise_on_failure=True))

        assert isinstance(exc_info.value.error, EmptyFileSetError)
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_program_failure_keeps_upload(self, project, make_service, runner):
        runner.responses["deploy"] = lambda args: CommandResult(args, 1, stderr="RPC timeout")

        result = await make_service(project).run(DeployOptions())

        assert result.state == PipelineState.FAILED
        assert result.failed_stage == "program"
        on_disk = read_manifest(project)
        assert on_disk['storageCid'] == SITE_CID
        assert on_disk['programAddress'] is None

    @pytest.mark.asyncio
    async def test_corrupt_wallet_is_fatal(self, project, make_service, backend):
        project.state_dir.mkdir()
        project.wallet_path.write_text("garbage")

        with pytest.raises(PipelineFailedError) as exc_info:
            await make_service(project).run(DeployOptions(raise_on_failure=True))

        assert exc_info.value.stage == "identity"
        assert isinstance(exc_info.value.error, StateCorruptError)
        assert project.wallet_path.read_text() == "garbage"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_missing_manifest(self, tmp_path, make_service):
        with pytest.raises(ProjectNotFoundError):
            await make_service(PathResolver(tmp_path)).run(DeployOptions())


class TestRecoverableFailures:

    @pytest.mark.asyncio
    async def test_mint_failure_is_a_warning(self, project, make_service, failing_minter):
        service = make_service(project, minter_override=failing_minter)

        result = await service.run(DeployOptions(mint_token=True))

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.token_mint is None
        assert [w.stage for w in result.warnings] == ["mint"]
        assert result.warnings[0].error_code == ErrorCode.MINT_FAILED
        assert read_manifest(project)['tokenMint'] is None

    @pytest.mark.asyncio
    async def test_domain_conflict_is_a_warning(self, project, make_service, backend):
        backend.route("GET", f"/api/domains/{DOMAIN}", (200, {
            'owner_pubkey': new_address(), 'program_address': new_address(),
        }))

        result = await make_service(project).run(DeployOptions(domain=DOMAIN))

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.domain is None
        warning = result.warnings[0]
        assert warning.stage == "domain"
        assert warning.error_code == ErrorCode.DOMAIN_CONFLICT
        assert DOMAIN in warning.guidance

    @pytest.mark.asyncio
    async def test_required_domain_is_fatal(self, project, make_service, backend):
        backend.route("GET", f"/api/domains/{DOMAIN}", (200, {
            'owner_pubkey': new_address(), 'program_address': new_address(),
        }))

        result = await make_service(project).run(
            DeployOptions(domain=DOMAIN, domain_required=True)
        )

        assert result.state == PipelineState.FAILED
        assert result.failed_stage == "domain"
        assert read_manifest(project)['programAddress'] is not None

    @pytest.mark.asyncio
    async def test_invalid_domain_makes_no_domain_calls(self, project, make_service, backend):
        result = await make_service(project).run(DeployOptions(domain="not a domain"))

        assert result.state == PipelineState.COMPLETE
        assert result.warnings[0].error_code == ErrorCode.INVALID_DOMAIN
        assert backend.domain_requests == []

    @pytest.mark.asyncio
    async def test_arweave_partial_upload_warning(self, project, make_service):
        result = await make_service(project).run(DeployOptions(storage=StorageKind.ARWEAVE))

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.storage_cid == ARWEAVE_TX
        warning = result.warnings[0]
        assert warning.stage == "upload"
        assert warning.error_code == ErrorCode.PARTIAL_UPLOAD
        assert "1 of 3" in warning.message

    def test_stage_policies(self, project, make_service):
        service = make_service(project)
        policies = {stage.name: stage.policy for stage in service.stages}

        assert policies == {
            'identity': StagePolicy.FATAL,
            'upload': StagePolicy.FATAL,
            'program': StagePolicy.FATAL,
            'mint': StagePolicy.RECOVERABLE,
            'domain': StagePolicy.RECOVERABLE,
        }


class TestResume:

    @pytest.mark.asyncio
    async def test_rerun_skips_recorded_stages(self, project, make_service, backend, runner):
        first = await make_service(project).run(DeployOptions())
        calls_after_first = len(runner.calls)

        second = await make_service(project).run(DeployOptions())

        assert second.state == PipelineState.COMPLETE
        assert len(runner.calls) == calls_after_first
        assert len(backend.upload_requests) == 1
        assert second.upload_calls == 0
        assert second.manifest.program_address == first.manifest.program_address
        assert set(second.skipped_stages) == {"upload", "program"}

    @pytest.mark.asyncio
    async def test_resume_after_upload_failure(self, project, make_service, backend, runner):
        backend.route("POST", "/api/upload/ipfs/directory", (500, {}))
        await make_service(project).run(DeployOptions())

        backend.route("POST", "/api/upload/ipfs/directory", (200, {"cid": SITE_CID}))
        result = await make_service(project).run(DeployOptions())

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.storage_cid == SITE_CID
        assert len(runner.commands("deploy")) == 1

    @pytest.mark.asyncio
    async def test_recorded_program_skips_toolchain(self, project, make_service, runner):
        address = new_address()
        store = ManifestStore(project)
        manifest = store.load()
        manifest.program_address = address
        store.save(manifest)

        result = await make_service(project).run(DeployOptions())

        assert result.manifest.program_address == address
        assert runner.calls == []

    @pytest.mark.asyncio
    async def test_changed_content_uploads_again_but_keeps_program(
            self, project, make_service, backend, runner):
        await make_service(project).run(DeployOptions())
        (project.project_root / "assets" / "index.html").write_text("<html>v2</html>")

        result = await make_service(project).run(DeployOptions())

        assert len(backend.upload_requests) == 2
        assert len(runner.commands("deploy")) == 1
        assert "program" in result.skipped_stages

    @pytest.mark.asyncio
    async def test_network_change_redeploys(self, project, make_service, backend, runner):
        await make_service(project).run(DeployOptions(network=Network.DEVNET))

        result = await make_service(project).run(DeployOptions(network=Network.MAINNET))

        assert result.manifest.network == Network.MAINNET
        deploys = runner.commands("deploy")
        assert len(deploys) == 2
        assert "mainnet-beta" in deploys[1]
        assert len(backend.upload_requests) == 1

    @pytest.mark.asyncio
    async def test_token_is_never_minted_twice(self, project, make_service, minter):
        await make_service(project).run(DeployOptions(mint_token=True))
        await make_service(project).run(DeployOptions(mint_token=True))

        assert len(minter.calls) == 1

    @pytest.mark.asyncio
    async def test_retry_after_mint_failure(self, project, make_service, failing_minter, minter):
        await make_service(project, minter_override=failing_minter).run(DeployOptions(mint_token=True))

        result = await make_service(project, minter_override=minter).run(DeployOptions(mint_token=True))

        assert result.manifest.token_mint == minter.address
        assert result.warnings == []


class TestResumeFunction:

    def _manifest(self, **kwargs) -> ProjectManifest:
        return ProjectManifest(name="site", **kwargs)

    def test_fresh_manifest_starts_at_upload(self):
        assert resume(self._manifest(), DeployOptions(), "d") == PipelineState.ASSETS_UPLOADED

    def test_unknown_digest_requires_upload(self):
        manifest = self._manifest(storage_cid="cid", content_digest="d", program_address="p")
        assert resume(manifest, DeployOptions(), None) == PipelineState.ASSETS_UPLOADED

    def test_storage_change_requires_upload(self):
        manifest = self._manifest(storage_cid="cid", content_digest="d")
        options = DeployOptions(storage=StorageKind.ARWEAVE)
        assert resume(manifest, options, "d") == PipelineState.ASSETS_UPLOADED

    def test_program_next(self):
        manifest = self._manifest(storage_cid="cid", content_digest="d")
        assert resume(manifest, DeployOptions(), "d") == PipelineState.PROGRAM_READY

    def test_mint_next_only_when_requested(self):
        manifest = self._manifest(storage_cid="cid", content_digest="d", program_address="p")
        assert resume(manifest, DeployOptions(), "d") == PipelineState.COMPLETE
        assert resume(manifest, DeployOptions(mint_token=True), "d") == PipelineState.TOKEN_MINTED

    def test_domain_next(self):
        manifest = self._manifest(storage_cid="cid", content_digest="d", program_address="p")
        options = DeployOptions(domain="MySite.shadow")
        assert resume(manifest, options, "d") == PipelineState.DOMAIN_REGISTERED

        manifest.domain = "mysite.shadow"
        assert resume(manifest, options, "d") == PipelineState.COMPLETE

    def test_does_not_modify_manifest(self):
        manifest = self._manifest(storage_cid="cid")
        before = json.dumps(manifest.to_dict(), sort_keys=True)
        resume(manifest, DeployOptions(network=Network.MAINNET), "d")
        assert json.dumps(manifest.to_dict(), sort_keys=True) == before
