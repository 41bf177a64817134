"""Storage backend factory"""

from typing import Dict, Type, Union

from .base import ContentStorage
from .ipfs import IpfsStorage
from .arweave import ArweaveStorage
from ..api.backend import BackendClient
from ..constants import StorageKind


class StorageFactory:
    """Factory for creating storage backend instances"""

    # Registry of storage backends
    _backends: Dict[StorageKind, Type[ContentStorage]] = {
        StorageKind.IPFS: IpfsStorage,
        StorageKind.ARWEAVE: ArweaveStorage,
    }

    @classmethod
    def create(cls, kind: Union[str, StorageKind], backend: BackendClient) -> ContentStorage:
        """Create storage backend

        Args:
            kind: Storage kind or its name
            backend: Backend client the storage uploads through

        Returns:
            Storage backend instance

        Raises:
            ValueError: If storage kind is not supported
        """
        try:
            kind_enum = StorageKind(kind) if not isinstance(kind, StorageKind) else kind
        except ValueError:
            raise ValueError(f"Invalid storage type: {kind}")

        if kind_enum not in cls._backends:
            raise ValueError(f"Unsupported storage type: {kind_enum.value}")

        return cls._backends[kind_enum](backend)

    @classmethod
    def is_supported(cls, kind: str) -> bool:
        """Check if a storage type is supported"""
        try:
            return StorageKind(kind) in cls._backends
        except ValueError:
            return False
