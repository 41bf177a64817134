"""Arweave storage backend"""

import logging

from .base import ContentStorage
from ..constants import StorageKind
from ..models.fileset import FileSet
from ..models.result import UploadReceipt

logger = logging.getLogger(__name__)


class ArweaveStorage(ContentStorage):
    """Arweave single-object uploads

    The backend endpoint stores one object per transaction, so only the
    site entry point is published. The receipt reports the upload as
    partial whenever the set holds more than one file.
    """

    kind = StorageKind.ARWEAVE
    supports_directories = False

    async def upload(self, file_set: FileSet) -> UploadReceipt:
        entry = self.entry_point(file_set)
        if len(file_set) > 1:
            logger.warning(
                "Arweave stores a single object: publishing %s only (%d files skipped)",
                entry.relative_path, len(file_set) - 1
            )

        tx_id = await self.backend.upload_arweave(entry.content, entry.filename)
        return self._receipt(tx_id, file_set, 1)
