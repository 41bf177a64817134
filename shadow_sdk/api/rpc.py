"""Minimal Solana JSON-RPC client for account queries"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .exceptions import RpcError
from ..constants import DEFAULT_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


@dataclass
class AccountInfo:
    """Subset of getAccountInfo we care about"""
    address: str
    owner: str
    executable: bool
    lamports: int
    size: int


class SolanaRpc:
    """Account-info queries against a Solana cluster"""

    _ids = itertools.count(1)

    def __init__(self,
                 url: str,
                 timeout: float = DEFAULT_REQUEST_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def call(self, method: str, params: list) -> Any:
        payload = {
            'jsonrpc': '2.0',
            'id': next(self._ids),
            'method': method,
            'params': params,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RpcError(f"RPC {method} failed: {e}")

        if data.get('error'):
            error = data['error']
            raise RpcError(f"RPC {method} error {error.get('code')}: {error.get('message')}")
        return data.get('result')

    async def get_account_info(self, address: str) -> Optional[AccountInfo]:
        """Account info, or None if the account does not exist"""
        result = await self.call(
            'getAccountInfo',
            [address, {'encoding': 'base64', 'commitment': 'confirmed'}]
        )
        value = (result or {}).get('value')
        if value is None:
            return None

        data = value.get('data') or []
        size = value.get('space')
        if size is None:
            # base64 payload length, good enough when "space" is absent
            size = (len(data[0]) * 3) // 4 if data else 0

        return AccountInfo(
            address=address,
            owner=value.get('owner', ''),
            executable=bool(value.get('executable')),
            lamports=int(value.get('lamports', 0)),
            size=int(size),
        )

    async def verify_program(self, address: str) -> Dict[str, Any]:
        """Check that an address holds a deployed, executable program"""
        info = await self.get_account_info(address)
        if info is None:
            return {'exists': False, 'executable': False, 'owner': None, 'size': 0}
        return {
            'exists': True,
            'executable': info.executable,
            'owner': info.owner,
            'size': info.size,
        }
