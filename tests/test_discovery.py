"""Tests for content discovery"""

import aiofiles
import pytest

from shadow_sdk.api.exceptions import DiscoveryError, EmptyFileSetError
from shadow_sdk.core.discovery import (
    ContentDiscovery,
    PathMatcher,
    discover,
    expand_braces,
    glob_to_regex,
)
from shadow_sdk.models.fileset import FileEntry, FileSet

from tests.conftest import write_files


class TestPatterns:

    def test_expand_braces(self):
        assert expand_braces("*.{js,css}") == ["*.js", "*.css"]
        assert expand_braces("{a,b}/{c,d}") == ["a/c", "a/d", "b/c", "b/d"]
        assert expand_braces("plain") == ["plain"]

    def test_double_star_matches_any_depth(self):
        regex = glob_to_regex("**/*.html")
        assert regex.match("index.html")
        assert regex.match("a/b/index.html")
        assert not regex.match("index.htm")

    def test_single_star_does_not_cross_directories(self):
        regex = glob_to_regex("*.log")
        assert regex.match("debug.log")
        assert not regex.match("logs/debug.log")

    def test_directory_pruning(self):
        matcher = PathMatcher(["node_modules/**"])
        assert matcher.prunes_directory("node_modules")
        assert matcher.matches("node_modules/pkg/index.js")
        assert not matcher.prunes_directory("src")


class TestContentDiscovery:

    def test_include_and_default_exclude(self, tmp_path):
        write_files(tmp_path, {
            "index.html": "<html></html>",
            "css/site.css": "body {}",
            "notes.txt": "not included",
            "node_modules/lib/index.js": "excluded",
            "programs/site/src/lib.rs": "excluded",
            "shadow.json": "{}",
        })

        paths = ContentDiscovery().list_paths(tmp_path)

        assert paths == ["css/site.css", "index.html"]

    def test_exclude_wins_over_include(self, tmp_path):
        write_files(tmp_path, {"public/index.html": "x", "public/draft.html": "y"})

        file_set = discover(tmp_path, ["**/*.html"], ["public/draft.html"])

        assert file_set.paths == ["public/index.html"]

    def test_custom_exclude_replaces_defaults(self, tmp_path):
        write_files(tmp_path, {"dist/index.html": "x"})

        assert discover(tmp_path, ["dist/**"], []).paths == ["dist/index.html"]
        with pytest.raises(EmptyFileSetError):
            discover(tmp_path, ["dist/**"])

    def test_state_and_manifest_never_published(self, tmp_path):
        write_files(tmp_path, {
            "index.html": "x",
            ".shadow/wallet.json": '{"secretKey": []}',
            ".shadow/id.json": "[]",
            "shadow.json": "{}",
            "shadow-integration.js": "//",
        })

        paths = discover(tmp_path, ["**/*", ".shadow/*"], ["*.map"]).paths

        assert paths == ["index.html"]

    def test_brace_include(self, tmp_path):
        write_files(tmp_path, {"a.js": "1", "b.css": "2", "c.md": "3"})

        assert discover(tmp_path, ["*.{js,css}"]).paths == ["a.js", "b.css"]

    def test_empty_project_raises(self, tmp_path):
        write_files(tmp_path, {"README.md": "# nothing to publish"})

        with pytest.raises(EmptyFileSetError) as exc_info:
            discover(tmp_path)
        assert exc_info.value.stage == "discovery"

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(EmptyFileSetError):
            discover(tmp_path / "missing")

    def test_reads_contents(self, tmp_path):
        write_files(tmp_path, {"index.html": "<p>hi</p>"})

        file_set = discover(tmp_path)

        assert file_set.find("index.html").content == b"<p>hi</p>"
        assert file_set.total_size == len(b"<p>hi</p>")

    def test_repeated_discovery_is_identical(self, tmp_path):
        write_files(tmp_path, {
            "z.html": "z", "a.html": "a", "m/n.js": "n", "b/c/d.css": "d",
        })

        first = discover(tmp_path)
        second = discover(tmp_path)

        assert first == second
        assert first.digest() == second.digest()
        assert first.paths == sorted(first.paths)

    def test_unreadable_file_is_a_discovery_error(self, tmp_path, monkeypatch):
        write_files(tmp_path, {"index.html": "x"})

        def denied(path, mode='r', **kwargs):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr(aiofiles, "open", denied)

        with pytest.raises(DiscoveryError) as exc_info:
            discover(tmp_path)
        assert exc_info.value.stage == "discovery"
        assert exc_info.value.context['path'].endswith("index.html")
        assert isinstance(exc_info.value.cause, PermissionError)

    @pytest.mark.asyncio
    async def test_discover_async(self, tmp_path):
        write_files(tmp_path, {f"page{i}.html": str(i) for i in range(40)})

        file_set = await ContentDiscovery(read_concurrency=4).discover_async(tmp_path)

        assert len(file_set) == 40


class TestFileSet:

    def test_digest_changes_with_content(self):
        a = FileSet([FileEntry("index.html", b"one")])
        b = FileSet([FileEntry("index.html", b"two")])
        assert a.digest() != b.digest()

    def test_digest_independent_of_input_order(self):
        entries = [FileEntry("b.js", b"b"), FileEntry("a.js", b"a")]
        assert FileSet(entries).digest() == FileSet(reversed(entries)).digest()

    def test_duplicate_paths_rejected(self):
        with pytest.raises(ValueError):
            FileSet([FileEntry("a.js", b"1"), FileEntry("a.js", b"2")])
