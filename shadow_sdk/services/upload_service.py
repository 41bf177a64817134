"""Storage upload stage"""

import logging
from typing import Union

from ..api.backend import BackendClient
from ..api.exceptions import BackendError, UploadError
from ..constants import StorageKind
from ..models.fileset import FileSet
from ..models.result import UploadReceipt
from ..storage import StorageFactory

logger = logging.getLogger(__name__)


class UploadService:
    """Pushes a discovered file set to content-addressed storage

    Makes exactly one attempt. Failures surface as UploadError carrying
    the backend, file count and cause so the caller can decide whether
    to run the stage again.
    """

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self.calls = 0

    async def upload(self, file_set: FileSet, kind: Union[str, StorageKind]) -> UploadReceipt:
        """Upload a file set

        Args:
            file_set: Files to publish
            kind: Storage backend (ipfs or arweave)

        Returns:
            UploadReceipt; ``partial`` is set when the backend could not
            store every file of the set

        Raises:
            UploadError: If the storage backend call fails
        """
        kind = StorageKind(kind) if not isinstance(kind, StorageKind) else kind
        storage = StorageFactory.create(kind, self.backend)
        context = {'backend': kind.value, 'files': len(file_set)}

        self.calls += 1
        try:
            receipt = await storage.upload(file_set)
        except BackendError as e:
            if e.status_code is not None:
                context['status'] = e.status_code
            raise UploadError(f"Upload to {kind.value} failed", context=context, cause=e)

        logger.info(
            "Uploaded %d/%d files to %s: %s",
            receipt.files_published, receipt.files_total, kind.value, receipt.cid
        )
        return receipt
