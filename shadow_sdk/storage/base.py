# shadow_sdk/storage/base.py
"""Content storage abstract base class"""

from abc import ABC, abstractmethod

from ..api.backend import BackendClient
from ..constants import ENTRY_POINT_FILE, StorageKind
from ..models.fileset import FileEntry, FileSet
from ..models.result import UploadReceipt


class ContentStorage(ABC):
    """Abstract base class for content-addressed storage backends

    Uploads go through the Shadow backend, which pins the content and
    returns its identifier. One call to ``upload`` is one attempt.
    """

    kind: StorageKind
    supports_directories: bool = False

    def __init__(self, backend: BackendClient):
        """
        Initialize storage backend

        Args:
            backend: Backend REST client used for the upload calls
        """
        self.backend = backend

    @abstractmethod
    async def upload(self, file_set: FileSet) -> UploadReceipt:
        """
        Upload a file set

        Args:
            file_set: Files captured by content discovery

        Returns:
            UploadReceipt with the content identifier and how many files
            of the set it covers

        Raises:
            BackendError: If the backend call fails
        """
        pass

    @staticmethod
    def entry_point(file_set: FileSet) -> FileEntry:
        """The file to publish when only one object can be stored

        A root ``index.html`` wins, then any ``index.html``, then the first
        path in order.
        """
        root = file_set.find(ENTRY_POINT_FILE)
        if root is not None:
            return root

        for entry in file_set:
            if entry.filename == ENTRY_POINT_FILE:
                return entry

        return file_set[0]

    def _receipt(self, cid: str, file_set: FileSet, published: int) -> UploadReceipt:
        return UploadReceipt(
            cid=cid,
            kind=self.kind.value,
            files_total=len(file_set),
            files_published=published
        )
