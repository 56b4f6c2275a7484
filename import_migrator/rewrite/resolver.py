"""
Import resolution against the scripts known on a server.

Strategies are tried in priority order and the first one that finds a
candidate decides the outcome:

1. Legacy root: the old convention used ``./`` for root-level scripts, so the
   prefix is stripped and the specifier is looked up from the root. A match
   becomes ``/<filename>``.
2. Directory relative: the specifier is resolved against each ancestor
   directory of the importer (literal, then with ``.js``) and looked up
   exactly. A match becomes the matched filename verbatim.
3. Otherwise the import is unresolved and gets annotated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from import_migrator.models import ScriptRecord
from import_migrator.paths import (
    LEGACY_ROOT_PREFIX,
    candidate_paths,
    ensure_leading_slash,
    is_url_specifier,
    parent_directories,
    paths_equal_exact,
    paths_equal_under_import_convention,
)

from .models import (
    DirectoryRewrite,
    ImportRecord,
    ResolutionOutcome,
    RootRewrite,
    Unresolved,
    UnresolvedReason,
)

LOG = logging.getLogger("rewrite.resolver")


class ImportResolver:
    """
    Resolves located imports against a snapshot of known scripts.

    The snapshot is taken at construction and never changes afterwards, so a
    single resolver can serve every script of one server.
    """

    def __init__(self, known_scripts: Iterable[ScriptRecord]):
        self._known: tuple[ScriptRecord, ...] = tuple(known_scripts)

    @property
    def known_scripts(self) -> tuple[ScriptRecord, ...]:
        return self._known

    def resolve(self, record: ImportRecord, importer_filename: str) -> ResolutionOutcome:
        """
        Decide whether and how to rewrite one import.

        Args:
            record: The located import
            importer_filename: Filename of the script containing the import

        Returns:
            RootRewrite, DirectoryRewrite, or Unresolved
        """
        specifier = record.specifier

        if is_url_specifier(specifier):
            return Unresolved(record, UnresolvedReason.EXTERNAL)

        root_match = self._match_root(specifier)
        if root_match is not None:
            new_specifier = ensure_leading_slash(root_match.filename)
            if new_specifier == specifier:
                return Unresolved(record, UnresolvedReason.UP_TO_DATE)
            LOG.debug("Root match for %r in %s: %s", specifier, importer_filename, new_specifier)
            return RootRewrite(record, new_specifier=new_specifier, target=root_match.filename)

        directory_match = self._match_directory(specifier, importer_filename)
        if directory_match is not None:
            LOG.debug("Directory match for %r in %s: %s", specifier, importer_filename, directory_match.filename)
            return DirectoryRewrite(record, new_specifier=directory_match.filename, target=directory_match.filename)

        LOG.debug("No match for %r in %s", specifier, importer_filename)
        return Unresolved(record, UnresolvedReason.NOT_FOUND)

    def _match_root(self, specifier: str) -> Optional[ScriptRecord]:
        if specifier.startswith(LEGACY_ROOT_PREFIX):
            specifier = specifier[len(LEGACY_ROOT_PREFIX) :]
        return next(
            (s for s in self._known if paths_equal_under_import_convention(s.filename, specifier)),
            None,
        )

    def _match_directory(self, specifier: str, importer_filename: str) -> Optional[ScriptRecord]:
        for candidate in candidate_paths(specifier, parent_directories(importer_filename)):
            match = next((s for s in self._known if paths_equal_exact(s.filename, candidate)), None)
            if match is not None:
                return match
        return None
