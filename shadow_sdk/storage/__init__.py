# shadow_sdk/storage/__init__.py
"""Content storage backends for shadow-sdk"""

from .base import ContentStorage
from .ipfs import IpfsStorage
from .arweave import ArweaveStorage
from .factory import StorageFactory

__all__ = [
    'ContentStorage',
    'IpfsStorage',
    'ArweaveStorage',
    'StorageFactory',
]
