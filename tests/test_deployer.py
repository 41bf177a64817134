"""Tests for the public Python API"""

import pytest

from shadow_sdk import Deployer, PipelineState
from shadow_sdk.api.exceptions import ProjectNotFoundError, StateCorruptError

from tests.conftest import SITE_CID


@pytest.fixture
def deployer(project, make_service, monkeypatch) -> Deployer:
    monkeypatch.setattr(Deployer, "create_service", lambda self: make_service(self.path_resolver))
    return Deployer(project.project_root)


class TestDeployer:

    def test_requires_project(self, tmp_path):
        with pytest.raises(ProjectNotFoundError):
            Deployer(tmp_path)

    def test_finds_root_from_subdirectory(self, project):
        deployer = Deployer(project.project_root / "assets")
        assert deployer.project_root == project.project_root

    def test_deploy(self, deployer, runner):
        result = deployer.deploy(network="devnet", storage="ipfs")

        assert result.state == PipelineState.COMPLETE
        assert result.manifest.storage_cid == SITE_CID
        assert result.manifest.program_address == runner.program_id

    def test_deploy_with_include(self, deployer, backend):
        result = deployer.deploy(include=["assets/*.html"])

        assert result.success
        assert backend.upload_requests[0].url.path == "/api/upload/ipfs"

    def test_status_before_deploy(self, deployer):
        status = deployer.status()

        assert status['manifest']['name'] == "site"
        assert status['wallet'] is None
        assert status['files'] == 3
        assert status['next_state'] == PipelineState.ASSETS_UPLOADED.value
        assert status['validation'].success
        assert 'verification' not in status

    def test_status_after_deploy(self, deployer):
        deployer.deploy()

        status = deployer.status()

        assert status['wallet']
        assert status['next_state'] == PipelineState.COMPLETE.value
        assert status['manifest']['storageCid'] == SITE_CID

    def test_status_notices_changed_content(self, deployer, project):
        deployer.deploy()
        (project.project_root / "assets" / "new.html").write_text("<p>new</p>")

        assert deployer.status()['next_state'] == PipelineState.ASSETS_UPLOADED.value

    def test_status_with_corrupt_manifest_raises(self, deployer, project):
        project.manifest_path.write_text("{")
        with pytest.raises(StateCorruptError):
            deployer.status()
