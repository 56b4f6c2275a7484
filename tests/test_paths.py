"""Tests for the path helpers behind import resolution."""

from __future__ import annotations

import pytest

from import_migrator.paths import (
    backup_filename,
    candidate_paths,
    ensure_leading_slash,
    is_backup_filename,
    is_script_filename,
    is_url_specifier,
    normalize,
    parent_directories,
    paths_equal_exact,
    paths_equal_under_import_convention,
    remove_leading_slash,
)


class TestLeadingSlash:
    def test_remove(self):
        assert remove_leading_slash("/a/b.js") == "a/b.js"
        assert remove_leading_slash("a/b.js") == "a/b.js"

    def test_ensure(self):
        assert ensure_leading_slash("a/b.js") == "/a/b.js"
        assert ensure_leading_slash("/a/b.js") == "/a/b.js"


class TestParentDirectories:
    def test_nested_script(self):
        assert parent_directories("/scripts/lib/main.js") == ["/scripts/lib/", "/scripts/", "/"]

    def test_nested_without_leading_slash(self):
        assert parent_directories("scripts/main.js") == ["/scripts/", "/"]

    def test_root_script(self):
        assert parent_directories("main.js") == ["/"]
        assert parent_directories("/main.js") == ["/"]


class TestNormalize:
    def test_absolute_path(self):
        assert normalize("/helpers.js") == "/helpers.js"

    def test_relative_without_bases_is_root_relative(self):
        assert normalize("helpers.js") == "/helpers.js"
        assert normalize("./helpers.js") == "/helpers.js"

    def test_relative_joined_onto_first_base(self):
        assert normalize("util.js", ["/scripts/", "/"]) == "/scripts/util.js"

    def test_parent_segments(self):
        assert normalize("../util.js", ["/scripts/lib/", "/scripts/", "/"]) == "/scripts/util.js"
        assert normalize("/a/./b/../c.js") == "/a/c.js"

    def test_escaping_root_falls_through_to_next_base(self):
        # Too many '..' for the first base, enough for none: no valid candidate.
        assert normalize("../../x.js", ["/a/", "/"]) is None
        assert normalize("../x.js", ["/a/b/", "/"]) == "/a/x.js"

    def test_base_without_trailing_separator(self):
        assert normalize("x.js", ["scripts"]) == "/scripts/x.js"

    def test_trailing_separator_removed(self):
        assert normalize("/scripts/") == "/scripts"

    @pytest.mark.parametrize(
        "path",
        ["", "   ", "/", "a//b.js", "bad name.js", "a\\b.js", "https://cdn.example.com/x.js", "../x.js"],
    )
    def test_invalid_paths(self, path):
        assert normalize(path) is None


class TestCandidatePaths:
    def test_extensionless_specifier_gets_js_retry(self):
        assert candidate_paths("util", ["/scripts/", "/"]) == ["/scripts/util", "/scripts/util.js"]

    def test_js_specifier_has_single_candidate(self):
        assert candidate_paths("util.js", ["/scripts/", "/"]) == ["/scripts/util.js"]

    def test_invalid_specifier_has_no_candidates(self):
        assert candidate_paths("../../nowhere", ["/"]) == []


class TestEquality:
    def test_exact_ignores_leading_slash_only(self):
        assert paths_equal_exact("scripts/util.js", "/scripts/util.js")
        assert not paths_equal_exact("scripts/util.js", "/scripts/util")

    def test_import_convention_strips_legacy_prefix(self):
        assert paths_equal_under_import_convention("helpers.js", "./helpers.js")
        assert paths_equal_under_import_convention("helpers.js", "/helpers.js")

    def test_import_convention_extension_optional(self):
        assert paths_equal_under_import_convention("helpers.js", "helpers")
        assert paths_equal_under_import_convention("lib/x.js", "./lib/x")

    def test_import_convention_different_files(self):
        assert not paths_equal_under_import_convention("scripts/util.js", "util.js")


class TestScriptFilenames:
    def test_script_extensions(self):
        assert is_script_filename("main.js")
        assert is_script_filename("/legacy/old.ns")
        assert not is_script_filename("notes.txt")

    def test_custom_extensions(self):
        assert is_script_filename("old.script", (".script",))

    def test_url_specifiers(self):
        assert is_url_specifier("https://cdn.example.com/lib.js")
        assert is_url_specifier("blob:abc-123")
        assert not is_url_specifier("./helpers.js")
        assert not is_url_specifier("/scripts/util.js")

    def test_backup_filenames(self):
        assert backup_filename("helpers.js") == "/BACKUP/helpers.js"
        assert backup_filename("/scripts/util.js") == "/BACKUP/scripts/util.js"
        assert is_backup_filename("/BACKUP/helpers.js")
        assert is_backup_filename("BACKUP/scripts/util.js")
        assert not is_backup_filename("BACKUPS.js")
