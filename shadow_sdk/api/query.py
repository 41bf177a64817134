"""Query API for domains, sites and profiles"""

from typing import Any, Dict, List, Optional

from .backend import BackendClient
from ..constants import DEFAULT_BACKEND_URL, DEFAULT_REQUEST_TIMEOUT
from ..utils.async_utils import run_async


class QueryInterface:
    """Synchronous read-only queries against the backend"""

    def __init__(self,
                 backend_url: str = DEFAULT_BACKEND_URL,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 transport=None):
        """
        Initialize query interface

        Args:
            backend_url: Backend root URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport
        """
        self.backend_url = backend_url
        self.timeout = timeout
        self._transport = transport

    def _call(self, method: str, *args, **kwargs) -> Any:
        async def run():
            async with BackendClient(self.backend_url, self.timeout, self._transport) as backend:
                return await getattr(backend, method)(*args, **kwargs)

        return run_async(run())

    def domain(self, domain: str) -> Optional[Dict[str, Any]]:
        """Domain record or None"""
        return self._call('get_domain', domain)

    def domains_by_owner(self, owner: str) -> List[Dict[str, Any]]:
        return self._call('list_owner_domains', owner)

    def search_domains(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        return self._call('search_domains', query, limit)

    def domain_for_program(self, program_address: str) -> Optional[Dict[str, Any]]:
        """First domain pointing at a program address, if any"""
        matches = self.search_domains(program_address, limit=1)
        return matches[0] if matches else None

    def site(self, program_address: str) -> Optional[Dict[str, Any]]:
        return self._call('get_site', program_address)

    def profile(self, wallet: str) -> Optional[Dict[str, Any]]:
        return self._call('get_profile', wallet)


def query(backend_url: str = DEFAULT_BACKEND_URL, **kwargs) -> QueryInterface:
    """Create a query interface"""
    return QueryInterface(backend_url, **kwargs)
