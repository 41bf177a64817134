# shadow_sdk/models/manifest.py
"""Project manifest model (shadow.json)"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..constants import (
    DEFAULT_PROGRAM_PATH,
    DEFAULT_PROJECT_VERSION,
    Network,
    StorageKind,
)


def utc_now() -> str:
    """Current UTC time as an ISO 8601 string"""
    return datetime.now(timezone.utc).isoformat()


# Attribute name -> key in shadow.json
_FIELD_KEYS = {
    'name': 'name',
    'version': 'version',
    'network': 'network',
    'storage': 'storage',
    'program_path': 'programPath',
    'program_address': 'programAddress',
    'storage_cid': 'storageCid',
    'content_digest': 'contentDigest',
    'token_mint': 'tokenMint',
    'domain': 'domain',
    'created_at': 'createdAt',
    'updated_at': 'updatedAt',
    'converted': 'converted',
    'converted_at': 'convertedAt',
}


@dataclass
class ProjectManifest:
    """Per-project record of deployment progress and resulting addresses

    Fields are filled in pipeline order: storage_cid, program_address,
    token_mint, domain. Unknown keys found on disk are kept in ``extra``
    and written back unchanged.
    """
    name: str
    version: str = DEFAULT_PROJECT_VERSION
    network: Network = Network.DEVNET
    storage: StorageKind = StorageKind.IPFS
    program_path: str = DEFAULT_PROGRAM_PATH
    program_address: Optional[str] = None
    storage_cid: Optional[str] = None
    content_digest: Optional[str] = None
    token_mint: Optional[str] = None
    domain: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    converted: bool = False
    converted_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        """Update timestamps"""
        now = utc_now()
        if not self.created_at:
            self.created_at = now
        self.updated_at = now

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the shadow.json layout"""
        data = dict(self.extra)
        for attr, key in _FIELD_KEYS.items():
            value = getattr(self, attr)
            if attr in ('network', 'storage'):
                value = value.value
            if attr == 'converted' and not value:
                continue
            if attr == 'converted_at' and value is None:
                continue
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectManifest':
        """Create from the shadow.json layout

        Raises:
            ValueError: If required keys are missing or values are invalid
        """
        if not isinstance(data, dict):
            raise ValueError("Manifest must be a JSON object")
        if not data.get('name'):
            raise ValueError("Manifest is missing 'name'")

        known = set(_FIELD_KEYS.values())
        extra = {k: v for k, v in data.items() if k not in known}

        return cls(
            name=str(data['name']),
            version=str(data.get('version') or DEFAULT_PROJECT_VERSION),
            network=Network.parse(data.get('network') or Network.DEVNET.value),
            storage=StorageKind(data.get('storage') or StorageKind.IPFS.value),
            program_path=data.get('programPath') or DEFAULT_PROGRAM_PATH,
            program_address=data.get('programAddress'),
            storage_cid=data.get('storageCid'),
            content_digest=data.get('contentDigest'),
            token_mint=data.get('tokenMint'),
            domain=data.get('domain'),
            created_at=data.get('createdAt'),
            updated_at=data.get('updatedAt'),
            converted=bool(data.get('converted', False)),
            converted_at=data.get('convertedAt'),
            extra=extra,
        )
