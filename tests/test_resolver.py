"""Tests for the priority-ordered import resolution strategies."""

from __future__ import annotations

import pytest

from import_migrator.rewrite import (
    DirectoryRewrite,
    ImportResolver,
    RootRewrite,
    Unresolved,
    UnresolvedReason,
    locate_imports,
)


def _record(specifier: str):
    return locate_imports(f'import x from "{specifier}";')[0]


@pytest.fixture
def resolver(known_scripts):
    return ImportResolver(known_scripts)


class TestLegacyRootStrategy:
    def test_dot_slash_root_script(self, resolver):
        outcome = resolver.resolve(_record("./helpers.js"), "/scripts/main.js")

        assert isinstance(outcome, RootRewrite)
        assert outcome.new_specifier == "/helpers.js"
        assert outcome.target == "helpers.js"

    def test_root_preferred_over_directory_candidate(self, make_script):
        resolver = ImportResolver(
            [
                make_script("helpers.js"),
                make_script("scripts/helpers.js"),
                make_script("scripts/main.js"),
            ]
        )
        outcome = resolver.resolve(_record("./helpers.js"), "/scripts/main.js")

        assert isinstance(outcome, RootRewrite)
        assert outcome.new_specifier == "/helpers.js"

    def test_extensionless_root_specifier(self, resolver):
        outcome = resolver.resolve(_record("./helpers"), "main.js")

        assert isinstance(outcome, RootRewrite)
        assert outcome.new_specifier == "/helpers.js"

    def test_nested_legacy_path(self, resolver):
        outcome = resolver.resolve(_record("./scripts/util.js"), "main.js")

        assert isinstance(outcome, RootRewrite)
        assert outcome.new_specifier == "/scripts/util.js"

    def test_filename_with_leading_slash_not_doubled(self, make_script):
        resolver = ImportResolver([make_script("/lib/x.js")])
        outcome = resolver.resolve(_record("./lib/x.js"), "main.js")

        assert outcome.new_specifier == "/lib/x.js"

    def test_already_root_relative_is_noop(self, resolver):
        outcome = resolver.resolve(_record("/helpers.js"), "main.js")

        assert isinstance(outcome, Unresolved)
        assert outcome.reason == UnresolvedReason.UP_TO_DATE
        assert not outcome.needs_annotation

    def test_first_match_wins(self, make_script):
        first = make_script("dup.js", "// first")
        second = make_script("/dup.js", "// second")
        outcome = ImportResolver([first, second]).resolve(_record("./dup.js"), "main.js")

        assert outcome.target == "dup.js"


class TestDirectoryStrategy:
    def test_directory_fallback(self, resolver):
        outcome = resolver.resolve(_record("util.js"), "/scripts/main.js")

        assert isinstance(outcome, DirectoryRewrite)
        assert outcome.new_specifier == "scripts/util.js"

    def test_extension_retry(self, resolver):
        outcome = resolver.resolve(_record("util"), "/scripts/main.js")

        assert isinstance(outcome, DirectoryRewrite)
        assert outcome.new_specifier == "scripts/util.js"

    def test_parent_segments(self, resolver):
        outcome = resolver.resolve(_record("../util.js"), "/scripts/lib/deep.js")

        assert isinstance(outcome, DirectoryRewrite)
        assert outcome.new_specifier == "scripts/util.js"

    def test_dot_slash_relative_to_importer(self, resolver):
        # No root-level deep.js, so './' is taken relative to the importer.
        outcome = resolver.resolve(_record("./deep.js"), "scripts/lib/other.js")

        assert isinstance(outcome, DirectoryRewrite)
        assert outcome.new_specifier == "scripts/lib/deep.js"

    def test_already_directory_relative_is_rewritten(self, resolver):
        # Only the root strategy checks for a no-op.
        outcome = resolver.resolve(_record("scripts/util.js"), "main.js")

        assert isinstance(outcome, RootRewrite)
        assert outcome.new_specifier == "/scripts/util.js"


class TestUnresolved:
    def test_missing_file(self, resolver):
        outcome = resolver.resolve(_record("missing.js"), "main.js")

        assert isinstance(outcome, Unresolved)
        assert outcome.reason == UnresolvedReason.NOT_FOUND
        assert outcome.needs_annotation

    def test_normalization_failure(self, resolver):
        outcome = resolver.resolve(_record("../../../nowhere.js"), "main.js")

        assert outcome.reason == UnresolvedReason.NOT_FOUND

    def test_url_specifier_left_alone(self, resolver):
        outcome = resolver.resolve(_record("https://cdn.example.com/lib.js"), "main.js")

        assert outcome.reason == UnresolvedReason.EXTERNAL
        assert not outcome.needs_annotation

    def test_to_dict(self, resolver):
        outcome = resolver.resolve(_record("missing.js"), "main.js")

        payload = outcome.to_dict()
        assert payload["outcome"] == "unresolved"
        assert payload["reason"] == "not_found"
        assert payload["specifier"] == "missing.js"


def test_snapshot_is_not_affected_by_later_list_changes(make_script):
    scripts = [make_script("helpers.js")]
    resolver = ImportResolver(scripts)
    scripts.append(make_script("late.js"))

    assert len(resolver.known_scripts) == 1
    assert resolver.resolve(_record("./late.js"), "main.js").reason == UnresolvedReason.NOT_FOUND
