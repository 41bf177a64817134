# shadow_sdk/core/discovery.py
"""Content discovery: which project files get published"""

import logging
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Sequence, Union

import aiofiles

from ..api.exceptions import DiscoveryError, EmptyFileSetError
from ..constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_READ_CONCURRENCY,
    PROTECTED_PATTERNS,
)
from ..models.fileset import FileEntry, FileSet
from ..utils.async_utils import gather_limited, run_async

logger = logging.getLogger(__name__)

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives in a glob pattern

    >>> expand_braces("*.{js,css}")
    ['*.js', '*.css']
    """
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]

    head, tail = pattern[:match.start()], pattern[match.end():]
    expanded = []
    for option in match.group(1).split(','):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def glob_to_regex(pattern: str) -> Pattern:
    """Compile a single (brace-free) glob pattern

    Patterns are matched against POSIX paths relative to the project root.
    ``**/`` matches zero or more directories, ``**`` anything, ``*`` and
    ``?`` never cross a ``/``.
    """
    i, n = 0, len(pattern)
    parts = []
    while i < n:
        c = pattern[i]
        if pattern.startswith('**/', i):
            parts.append('(?:.*/)?')
            i += 3
        elif pattern.startswith('**', i):
            parts.append('.*')
            i += 2
        elif c == '*':
            parts.append('[^/]*')
            i += 1
        elif c == '?':
            parts.append('[^/]')
            i += 1
        else:
            parts.append(re.escape(c))
            i += 1
    return re.compile('^' + ''.join(parts) + '$')


class PathMatcher:
    """Matches relative paths against a list of glob patterns"""

    def __init__(self, patterns: Iterable[str]):
        self.patterns = list(patterns)
        self._regexes = [
            glob_to_regex(expanded)
            for pattern in self.patterns
            for expanded in expand_braces(pattern.strip().lstrip('/'))
            if expanded
        ]
        # Patterns of the form "dir/**" let the walk skip whole subtrees
        self._dir_regexes = [
            glob_to_regex(expanded[:-3])
            for pattern in self.patterns
            for expanded in expand_braces(pattern.strip().lstrip('/'))
            if expanded.endswith('/**') and len(expanded) > 3
        ]

    def matches(self, relative_path: str) -> bool:
        return any(regex.match(relative_path) for regex in self._regexes)

    def prunes_directory(self, relative_dir: str) -> bool:
        return any(regex.match(relative_dir) for regex in self._dir_regexes)


class ContentDiscovery:
    """Enumerates files eligible for publication

    Include patterns are applied first, then exclude patterns; exclude
    always wins. The resulting FileSet is ordered by relative path so
    repeated runs over an unchanged tree produce identical sets.
    """

    def __init__(self,
                 include_patterns: Optional[Sequence[str]] = None,
                 exclude_patterns: Optional[Sequence[str]] = None,
                 read_concurrency: int = DEFAULT_READ_CONCURRENCY):
        self.include = PathMatcher(include_patterns or DEFAULT_INCLUDE_PATTERNS)
        exclude = list(DEFAULT_EXCLUDE_PATTERNS if exclude_patterns is None else exclude_patterns)
        exclude.extend(p for p in PROTECTED_PATTERNS if p not in exclude)
        self.exclude = PathMatcher(exclude)
        self.read_concurrency = read_concurrency

    def list_paths(self, project_path: Union[str, Path]) -> List[str]:
        """List matching relative paths without reading contents"""
        root = Path(project_path).resolve()
        if not root.is_dir():
            raise EmptyFileSetError(
                f"Project directory not found: {root}",
                context={'path': str(root)}
            )

        selected = []
        for dirpath, dirnames, filenames in os.walk(root):
            rel_dir = Path(dirpath).relative_to(root).as_posix()
            rel_dir = '' if rel_dir == '.' else rel_dir

            # Prune excluded subtrees in place, keeping walk order stable
            kept = []
            for dirname in sorted(dirnames):
                rel = f"{rel_dir}/{dirname}" if rel_dir else dirname
                if not self.exclude.prunes_directory(rel):
                    kept.append(dirname)
            dirnames[:] = kept

            for filename in filenames:
                rel = f"{rel_dir}/{filename}" if rel_dir else filename
                if not os.path.isfile(os.path.join(dirpath, filename)):
                    continue
                if self.include.matches(rel) and not self.exclude.matches(rel):
                    selected.append(rel)

        return sorted(selected)

    async def discover_async(self, project_path: Union[str, Path]) -> FileSet:
        """Capture the publishable file set

        Raises:
            EmptyFileSetError: If no file is eligible for publication
            DiscoveryError: If an eligible file cannot be read
        """
        root = Path(project_path).resolve()
        paths = self.list_paths(root)

        if not paths:
            raise EmptyFileSetError(
                "No files found to publish",
                context={
                    'path': str(root),
                    'include': ', '.join(self.include.patterns),
                }
            )

        async def read_entry(relative_path: str) -> FileEntry:
            try:
                async with aiofiles.open(root / relative_path, 'rb') as f:
                    content = await f.read()
            except OSError as e:
                raise DiscoveryError(
                    f"Cannot read {relative_path}",
                    context={'path': str(root / relative_path)},
                    cause=e
                )
            return FileEntry(relative_path=relative_path, content=content)

        entries = await gather_limited(paths, read_entry, self.read_concurrency)
        file_set = FileSet(entries)
        logger.info("Discovered %d files (%d bytes)", len(file_set), file_set.total_size)
        return file_set

    def discover(self, project_path: Union[str, Path]) -> FileSet:
        """Synchronous wrapper around discover_async"""
        return run_async(self.discover_async(project_path))


def discover(project_path: Union[str, Path],
             include_patterns: Optional[Sequence[str]] = None,
             exclude_patterns: Optional[Sequence[str]] = None) -> FileSet:
    """Discover publishable files in a project directory"""
    return ContentDiscovery(include_patterns, exclude_patterns).discover(project_path)
