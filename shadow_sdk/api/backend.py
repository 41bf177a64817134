"""Backend REST API client"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote

import httpx

from .exceptions import BackendError
from ..constants import AUTH_HEADER_NAME, DEFAULT_BACKEND_URL, DEFAULT_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

# Keys the upload endpoints have used for the content identifier
IPFS_CID_KEYS = ('cid', 'ipfs_hash', 'IpfsHash')
ARWEAVE_ID_KEYS = ('tx_id', 'id')


def _pick(data: Any, keys: Sequence[str]) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return None


class BackendClient:
    """Async client for the Shadow backend

    Every method makes exactly one HTTP request. Non-2xx responses and
    transport failures are raised as BackendError; retrying is left to the
    caller.
    """

    def __init__(self,
                 base_url: str = DEFAULT_BACKEND_URL,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize backend client

        Args:
            base_url: Backend root URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            )
        return self._client

    async def _request(self,
                       method: str,
                       path: str,
                       auth_header: Optional[str] = None,
                       **kwargs) -> httpx.Response:
        headers = dict(kwargs.pop('headers', None) or {})
        if auth_header:
            headers[AUTH_HEADER_NAME] = auth_header

        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = await self.client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {e}")

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            raise BackendError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=body
            )

        return response

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        response = await self._request(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise BackendError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                body=response.text
            )

    # Uploads

    async def upload_ipfs(self, content: bytes, filename: str) -> str:
        """Upload a single file to IPFS and return its CID"""
        data = await self._json(
            'POST', '/api/upload/ipfs',
            files={'file': (filename, content)}
        )
        return self._require_id(data, IPFS_CID_KEYS, '/api/upload/ipfs')

    async def upload_ipfs_directory(self, files: Sequence[Tuple[str, bytes]]) -> str:
        """Upload files as one IPFS directory and return the root CID

        Args:
            files: (relative path, content) pairs; the path is sent as the
                multipart filename so the directory layout is kept
        """
        data = await self._json(
            'POST', '/api/upload/ipfs/directory',
            files=[('files', (path, content)) for path, content in files]
        )
        return self._require_id(data, IPFS_CID_KEYS, '/api/upload/ipfs/directory')

    async def upload_arweave(self, content: bytes, filename: str) -> str:
        """Upload a single object to Arweave and return its transaction id"""
        data = await self._json(
            'POST', '/api/upload/arweave',
            content=content,
            headers={
                'Content-Type': 'application/octet-stream',
                'X-Filename': filename,
            }
        )
        return self._require_id(data, ARWEAVE_ID_KEYS, '/api/upload/arweave')

    @staticmethod
    def _require_id(data: Any, keys: Sequence[str], path: str) -> str:
        value = _pick(data, keys)
        if not value:
            raise BackendError(f"POST {path} response has no content identifier", body=data)
        return value

    # Domains

    async def register_domain(self,
                              domain: str,
                              program_address: str,
                              owner: str,
                              auth_header: str) -> Dict[str, Any]:
        return await self._json(
            'POST', '/api/domains',
            auth_header=auth_header,
            json={
                'domain': domain,
                'program_address': program_address,
                'owner_pubkey': owner,
            }
        )

    async def get_domain(self, domain: str) -> Optional[Dict[str, Any]]:
        """Domain record, or None if the domain is not registered"""
        try:
            return await self._json('GET', f"/api/domains/{quote(domain, safe='')}")
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    async def update_domain(self, domain: str, program_address: str, auth_header: str) -> None:
        await self._request(
            'PUT', f"/api/domains/{quote(domain, safe='')}",
            auth_header=auth_header,
            json={'program_address': program_address}
        )

    async def verify_domain(self, domain: str, auth_header: str) -> None:
        await self._request(
            'POST', f"/api/domains/{quote(domain, safe='')}/verify",
            auth_header=auth_header,
            json={}
        )

    async def list_owner_domains(self, owner: str) -> List[Dict[str, Any]]:
        return await self._json('GET', f"/api/domains/owner/{quote(owner, safe='')}") or []

    async def search_domains(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        return await self._json(
            'GET', '/api/domains/search',
            params={'q': query, 'limit': limit}
        ) or []

    # Sites and profiles

    async def register_site(self,
                            owner: str,
                            storage_cid: str,
                            name: str,
                            description: str,
                            auth_header: str) -> Dict[str, Any]:
        return await self._json(
            'POST', '/api/sites',
            auth_header=auth_header,
            json={
                'owner_pubkey': owner,
                'storage_cid': storage_cid,
                'name': name,
                'description': description,
            }
        )

    async def get_site(self, program_address: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._json('GET', f"/api/sites/{quote(program_address, safe='')}")
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise

    async def get_profile(self, wallet: str) -> Optional[Dict[str, Any]]:
        try:
            return await self._json('GET', f"/api/profiles/{quote(wallet, safe='')}")
        except BackendError as e:
            if e.status_code == 404:
                return None
            raise
