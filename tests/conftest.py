"""Shared fixtures: a scratch project, a recording backend and fake toolchains."""

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from shadow_sdk.api.backend import BackendClient
from shadow_sdk.api.exceptions import MintError
from shadow_sdk.constants import Network
from shadow_sdk.core.manifest_store import ManifestStore
from shadow_sdk.core.path_resolver import PathResolver
from shadow_sdk.models.config import Settings, ToolchainConfig
from shadow_sdk.models.identity import KeyPair
from shadow_sdk.models.manifest import ProjectManifest
from shadow_sdk.services.deploy_service import DeployService
from shadow_sdk.services.domain_service import DomainService
from shadow_sdk.services.mint_service import MintService
from shadow_sdk.services.program_service import ProgramService
from shadow_sdk.services.upload_service import UploadService
from shadow_sdk.utils.process_utils import CommandResult

BACKEND_URL = "http://backend.test"
SITE_CID = "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi"
SINGLE_CID = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"
ARWEAVE_TX = "bNbA3TEQVL60xlgCcqdz4ZPHFZ711cZ3hmkpGttDt_U"

ANCHOR_TOML = """[programs.devnet]
site = "11111111111111111111111111111111"

[provider]
cluster = "devnet"
wallet = "~/.config/solana/id.json"
"""


def new_address() -> str:
    """A fresh, valid base58 public key"""
    return KeyPair.generate().public_key_b58


def write_files(root: Path, files: Dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')


@pytest.fixture
def project(tmp_path) -> PathResolver:
    """Project with shadow.json, an Anchor workspace and three site assets"""
    root = tmp_path / "site"
    root.mkdir()
    write_files(root, {
        "Anchor.toml": ANCHOR_TOML,
        "programs/site/src/lib.rs": "// program",
        "assets/index.html": "<html><body>hello</body></html>",
        "assets/style.css": "body { color: black; }",
        "assets/app.js": "console.log('hi');",
    })
    resolver = PathResolver(root)
    ManifestStore(resolver).save(ProjectManifest(name="site"))
    return resolver


@pytest.fixture
def empty_project(tmp_path) -> PathResolver:
    """Project with shadow.json but nothing publishable"""
    root = tmp_path / "empty"
    root.mkdir()
    write_files(root, {"Anchor.toml": ANCHOR_TOML, "notes.txt": "not a site asset"})
    resolver = PathResolver(root)
    ManifestStore(resolver).save(ProjectManifest(name="empty"))
    return resolver


class RecordingBackend:
    """httpx MockTransport handler with canned responses per route

    Routes are ``(method, path)`` keys mapping to ``(status, json_body)``
    or to a callable taking the request. Unknown routes answer 404.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], object] = {
            ("POST", "/api/upload/ipfs"): (200, {"cid": SINGLE_CID}),
            ("POST", "/api/upload/ipfs/directory"): (200, {"cid": SITE_CID}),
            ("POST", "/api/upload/arweave"): (200, {"tx_id": ARWEAVE_TX}),
            ("POST", "/api/domains"): (201, {"success": True}),
        }

    def route(self, method: str, path: str, response) -> None:
        self.routes[(method, path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(response):
            return response(request)
        status, body = response
        return httpx.Response(status, json=body)

    def calls(self, method: Optional[str] = None, prefix: str = "") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and r.url.path.startswith(prefix)
        ]

    @property
    def upload_requests(self) -> List[httpx.Request]:
        return self.calls("POST", "/api/upload")

    @property
    def domain_requests(self) -> List[httpx.Request]:
        return self.calls(prefix="/api/domains")

    def client(self) -> BackendClient:
        return BackendClient(BACKEND_URL, timeout=5, transport=httpx.MockTransport(self))


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


class FakeRunner:
    """Command runner standing in for anchor and spl-token"""

    def __init__(self, program_id: Optional[str] = None):
        self.program_id = program_id or new_address()
        self.calls: List[List[str]] = []
        self.responses: Dict[str, Callable[[List[str]], CommandResult]] = {}

    def __call__(self, args, cwd=None, timeout=None) -> CommandResult:
        self.calls.append(list(args))
        handler = self.responses.get(args[1] if len(args) > 1 else args[0])
        if handler is not None:
            return handler(args)
        if args[1] == "deploy":
            return CommandResult(args, 0, stdout=f"Deploying...\nProgram Id: {self.program_id}\n")
        return CommandResult(args, 0, stdout="ok")

    def commands(self, name: str) -> List[List[str]]:
        return [call for call in self.calls if len(call) > 1 and call[1] == name]


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


class FakeMinter:
    """Minter returning a fixed address, or raising"""

    def __init__(self, error: Optional[Exception] = None):
        self.address = new_address()
        self.error = error
        self.calls: List[Tuple[Network, str]] = []

    def mint(self, network: Network, rpc_url: str) -> str:
        self.calls.append((network, rpc_url))
        if self.error is not None:
            raise self.error
        return self.address


@pytest.fixture
def minter() -> FakeMinter:
    return FakeMinter()


@pytest.fixture
def failing_minter() -> FakeMinter:
    return FakeMinter(MintError("spl-token exited with code 1"))


@pytest.fixture
def settings() -> Settings:
    return Settings(backend_url=BACKEND_URL)


@pytest.fixture
def make_service(settings, backend, runner, minter):
    """Factory building a DeployService wired to the fakes"""

    def factory(resolver: PathResolver, minter_override: Optional[FakeMinter] = None,
                runner_override: Optional[FakeRunner] = None) -> DeployService:
        client = backend.client()
        return DeployService(
            resolver,
            settings=settings,
            backend=client,
            upload_service=UploadService(client),
            program_service=ProgramService(
                resolver, ToolchainConfig(), runner=runner_override or runner
            ),
            mint_service=MintService(settings, minter_override or minter),
            domain_service=DomainService(client),
        )

    return factory


def read_manifest(resolver: PathResolver) -> dict:
    with open(resolver.manifest_path, 'r', encoding='utf-8') as f:
        return json.load(f)
