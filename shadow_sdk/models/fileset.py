# shadow_sdk/models/fileset.py
"""Discovered content models"""

import hashlib
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple


@dataclass(frozen=True)
class FileEntry:
    """A single publishable file"""
    relative_path: str  # POSIX path relative to the project root
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def filename(self) -> str:
        return self.relative_path.rsplit('/', 1)[-1]


class FileSet:
    """Immutable, path-ordered collection of files captured for one run"""

    def __init__(self, entries: Iterable[FileEntry]):
        ordered = sorted(entries, key=lambda e: e.relative_path)
        paths = [e.relative_path for e in ordered]
        if len(set(paths)) != len(paths):
            raise ValueError("FileSet contains duplicate paths")
        self._entries: Tuple[FileEntry, ...] = tuple(ordered)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> FileEntry:
        return self._entries[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, FileSet):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"FileSet({len(self)} files, {self.total_size} bytes)"

    @property
    def paths(self) -> List[str]:
        return [e.relative_path for e in self._entries]

    @property
    def total_size(self) -> int:
        return sum(e.size for e in self._entries)

    def find(self, relative_path: str):
        """Return the entry with the given path or None"""
        for entry in self._entries:
            if entry.relative_path == relative_path:
                return entry
        return None

    def digest(self) -> str:
        """sha256 over paths and contents, stable across runs"""
        hasher = hashlib.sha256()
        for entry in self._entries:
            path = entry.relative_path.encode('utf-8')
            hasher.update(len(path).to_bytes(8, 'big'))
            hasher.update(path)
            hasher.update(len(entry.content).to_bytes(8, 'big'))
            hasher.update(entry.content)
        return hasher.hexdigest()
