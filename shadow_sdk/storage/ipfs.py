"""IPFS storage backend"""

import logging

from .base import ContentStorage
from ..constants import StorageKind
from ..models.fileset import FileSet
from ..models.result import UploadReceipt

logger = logging.getLogger(__name__)


class IpfsStorage(ContentStorage):
    """IPFS via the backend pinning endpoints

    Multi-file sets are bundled into a single directory upload so the whole
    set lives under one root CID.
    """

    kind = StorageKind.IPFS
    supports_directories = True

    async def upload(self, file_set: FileSet) -> UploadReceipt:
        if len(file_set) == 1:
            entry = file_set[0]
            logger.info("Uploading %s to IPFS", entry.relative_path)
            cid = await self.backend.upload_ipfs(entry.content, entry.filename)
        else:
            logger.info("Uploading %d files to IPFS as one directory", len(file_set))
            cid = await self.backend.upload_ipfs_directory(
                [(entry.relative_path, entry.content) for entry in file_set]
            )

        return self._receipt(cid, file_set, len(file_set))
