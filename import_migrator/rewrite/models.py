"""
Ephemeral types produced while rewriting one script.

None of these outlive the processing of a single script: records come out of
the locator, outcomes out of the resolver, and edits out of the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class SourceRange:
    """Half-open character range ``[start, end)`` within a source text."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid source range: [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: SourceRange) -> bool:
        return self.start <= other.start and other.end <= self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


@dataclass(frozen=True)
class ImportRecord:
    """One import declaration located in a script."""

    specifier: str  # Raw text between the quotes
    specifier_range: SourceRange  # Quotes excluded
    statement_range: SourceRange
    line: int = 1

    def __post_init__(self) -> None:
        if not len(self.specifier_range):
            raise ValueError("Import specifier range must not be empty")
        if not self.statement_range.contains(self.specifier_range):
            raise ValueError(
                f"Specifier range {self.specifier_range} lies outside statement range {self.statement_range}"
            )

    def to_dict(self) -> dict:
        return {
            "specifier": self.specifier,
            "specifier_range": [self.specifier_range.start, self.specifier_range.end],
            "statement_range": [self.statement_range.start, self.statement_range.end],
            "line": self.line,
        }


class UnresolvedReason(str, Enum):
    """Why an import was left without a rewrite."""

    NOT_FOUND = "not_found"  # No strategy matched; gets a warning comment
    UP_TO_DATE = "up_to_date"  # Already uses the root-relative form
    ANNOTATED = "annotated"  # Migrated or flagged by an earlier run
    EXTERNAL = "external"  # URL specifier, not a script on the server


@dataclass(frozen=True)
class RootRewrite:
    """The import targets a root-level script; rewrite to ``/<filename>``."""

    record: ImportRecord
    new_specifier: str
    target: str

    def to_dict(self) -> dict:
        return {
            "outcome": "root_rewrite",
            "new_specifier": self.new_specifier,
            "target": self.target,
            **self.record.to_dict(),
        }


@dataclass(frozen=True)
class DirectoryRewrite:
    """The import targets a script relative to the importer's directory."""

    record: ImportRecord
    new_specifier: str
    target: str

    def to_dict(self) -> dict:
        return {
            "outcome": "directory_rewrite",
            "new_specifier": self.new_specifier,
            "target": self.target,
            **self.record.to_dict(),
        }


@dataclass(frozen=True)
class Unresolved:
    record: ImportRecord
    reason: UnresolvedReason = UnresolvedReason.NOT_FOUND

    @property
    def needs_annotation(self) -> bool:
        return self.reason == UnresolvedReason.NOT_FOUND

    def to_dict(self) -> dict:
        return {"outcome": "unresolved", "reason": self.reason.value, **self.record.to_dict()}


ResolutionOutcome = Union[RootRewrite, DirectoryRewrite, Unresolved]


@dataclass(frozen=True)
class Edit:
    """Replace ``[start, end)`` of the original text with ``text``. Insertions have start == end."""

    start: int
    end: int
    text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid edit range: [{self.start}, {self.end})")


class RewriteState(str, Enum):
    PENDING = "pending"
    REWRITING = "rewriting"
    UNCHANGED = "unchanged"
    REWRITTEN = "rewritten"
