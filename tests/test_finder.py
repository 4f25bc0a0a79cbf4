"""Tests for source file discovery."""

import pytest

from i18nkit.errors import InvalidConfigurationError, UnreadableFileError
from i18nkit.finder import read_source, resolve_files, search_files, split_option


@pytest.fixture
def tree(write_source):
    write_source("src/Controller/PagesController.php", "<?php")
    write_source("src/View/page.PHP", "<?php")
    write_source("tests/PagesTest.php", "<?php")
    write_source("vendor/lib/Lib.php", "<?php")
    write_source("src/readme.txt", "text")
    return write_source.root


class TestSplitOption:
    def test_blank_values_dropped(self):
        assert split_option("en, fr,,de ") == ["en", "fr", "de"]
        assert split_option(None) == []


class TestSearchFiles:
    """Test recursive discovery."""

    def test_finds_php_files_sorted(self, tree):
        files = search_files([str(tree)])
        names = [file.rsplit("/", 1)[-1] for file in files]
        assert names == ["PagesController.php", "page.PHP", "PagesTest.php", "Lib.php"]

    def test_exclude_path_segments(self, tree):
        files = search_files([str(tree)], exclude=["tests", "vendor"])
        assert [file.rsplit("/", 1)[-1] for file in files] == [
            "PagesController.php",
            "page.PHP",
        ]

    def test_overlapping_paths_are_deduplicated(self, tree):
        files = search_files([str(tree / "src"), str(tree)])
        assert len(files) == len(set(files)) == 4

    def test_missing_path(self, tmp_path):
        with pytest.raises(InvalidConfigurationError):
            search_files([str(tmp_path / "nope")])


class TestFiles:
    def test_resolve_files_keeps_order(self, tree):
        first = tree / "vendor" / "lib" / "Lib.php"
        second = tree / "tests" / "PagesTest.php"
        assert resolve_files([str(first), str(second), str(first)]) == [
            str(first.resolve()),
            str(second.resolve()),
        ]

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(UnreadableFileError) as excinfo:
            read_source(str(tmp_path / "missing.php"))
        assert excinfo.value.path.endswith("missing.php")

    def test_read_non_utf8_file(self, tmp_path):
        path = tmp_path / "latin1.php"
        path.write_bytes("<?php __('Café');".encode("latin-1"))
        with pytest.raises(UnreadableFileError) as excinfo:
            read_source(str(path))
        assert "not valid UTF-8" in excinfo.value.reason
