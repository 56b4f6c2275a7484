"""
Rewrite engine: folds resolution outcomes back into a script's text.

All changes are expressed as an edit list over the untouched original text
and applied in one pass from the end of the text towards the start, so the
offsets of edits that have not been applied yet stay valid.

For every rewritten import the original statement is kept above it inside a
banner comment; imports that could not be resolved get a single warning
line. Both markers are recognised on later runs, which makes the rewrite
idempotent. A warned import whose target has since appeared is rewritten
and loses its warning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from import_migrator.models import ScriptRecord

from .errors import EditConflictError
from .locator import locate_imports
from .models import (
    DirectoryRewrite,
    Edit,
    ImportRecord,
    ResolutionOutcome,
    RewriteState,
    RootRewrite,
    SourceRange,
    Unresolved,
    UnresolvedReason,
)
from .resolver import ImportResolver

LOG = logging.getLogger("rewrite.engine")

WARNING_COMMENT = "// This import statement may be broken by a recent upgrade. Check the path to the script."
BANNER_OPEN = "// =============================== original line ==============================="
BANNER_CLOSE = "// ============================================================================="


def banner_block(statement: str) -> str:
    """
    Comment block preserving an original import statement.

    Every line of the statement is prefixed with `` * `` and any ``*/`` in it
    is written as ``*\\/`` so it cannot close the comment early.
    """
    body = statement.replace("*/", "*\\/").replace("\n", "\n * ")
    return "\n" + BANNER_OPEN + "\n" + "/**\n" + " * " + body + "\n" + " */\n" + BANNER_CLOSE + "\n"


def warning_block() -> str:
    return "\n" + WARNING_COMMENT + "\n"


def is_rewritten(source: str, record: ImportRecord) -> bool:
    """True if an earlier run already rewrote the statement and left a banner above it."""
    return source.endswith(BANNER_CLOSE + "\n", 0, record.statement_range.start)


def warning_span(source: str, record: ImportRecord) -> SourceRange | None:
    """Range of a warning left above the statement by an earlier run, if any."""
    start = record.statement_range.start
    for marker in (warning_block(), WARNING_COMMENT + "\n"):
        if source.endswith(marker, 0, start):
            return SourceRange(start - len(marker), start)
    return None


def plan_edits(source: str, outcomes: Iterable[ResolutionOutcome]) -> list[Edit]:
    """
    Translate outcomes into edits against the original text.

    A warning from an earlier run is removed once its import resolves.
    """
    edits: list[Edit] = []
    for outcome in outcomes:
        record = outcome.record
        statement_start = record.statement_range.start

        if isinstance(outcome, (RootRewrite, DirectoryRewrite)):
            original_statement = record.statement_range.slice(source)
            edits.append(Edit(record.specifier_range.start, record.specifier_range.end, outcome.new_specifier))
            edits.append(Edit(statement_start, statement_start, banner_block(original_statement)))
        elif outcome.needs_annotation:
            edits.append(Edit(statement_start, statement_start, warning_block()))

        if isinstance(outcome, (RootRewrite, DirectoryRewrite)) or outcome.reason == UnresolvedReason.UP_TO_DATE:
            stale = warning_span(source, record)
            if stale is not None:
                edits.append(Edit(stale.start, stale.end, ""))
    return edits


def apply_edits(source: str, edits: Iterable[Edit]) -> str:
    """
    Apply edits to the original text in a single descending pass.

    Raises:
        EditConflictError: If two edits overlap or an edit lies outside the text
    """
    ordered = sorted(edits, key=lambda e: (e.start, e.end), reverse=True)
    text = source
    bound = len(source)

    for edit in ordered:
        if edit.end > bound:
            raise EditConflictError(
                f"Edit [{edit.start}, {edit.end}) overlaps a later edit or the end of the text ({bound})"
            )
        text = text[: edit.start] + edit.text + text[edit.end :]
        bound = edit.start

    return text


@dataclass
class RewriteResult:
    """Result of rewriting one script."""

    original: str
    code: str
    state: RewriteState
    outcomes: list[ResolutionOutcome] = field(default_factory=list)
    edits: list[Edit] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.state == RewriteState.REWRITTEN

    @property
    def rewritten(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, (RootRewrite, DirectoryRewrite)))

    @property
    def flagged(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, Unresolved) and o.needs_annotation)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "changed": self.changed,
            "code": self.code,
            "imports": [o.to_dict() for o in self.outcomes],
        }


class ScriptRewriter:
    """
    Rewrites the imports of a single script.

    State moves PENDING -> REWRITING -> UNCHANGED | REWRITTEN. The script
    record itself is never modified; committing the new code is the
    caller's job so it can take a backup first.
    """

    def __init__(self, script: ScriptRecord, known_scripts: Iterable[ScriptRecord] | ImportResolver):
        self.script = script
        if isinstance(known_scripts, ImportResolver):
            self._resolver = known_scripts
        else:
            self._resolver = ImportResolver(known_scripts)
        self.state = RewriteState.PENDING
        self.result: RewriteResult | None = None

    def resolve(self, source: str, records: Iterable[ImportRecord]) -> list[ResolutionOutcome]:
        outcomes: list[ResolutionOutcome] = []
        for record in records:
            if is_rewritten(source, record):
                outcomes.append(Unresolved(record, UnresolvedReason.ANNOTATED))
                continue
            outcome = self._resolver.resolve(record, self.script.filename)
            if isinstance(outcome, Unresolved) and outcome.needs_annotation:
                if warning_span(source, record) is not None:
                    outcome = Unresolved(record, UnresolvedReason.ANNOTATED)
            outcomes.append(outcome)
        return outcomes

    def run(self) -> RewriteResult:
        """
        Locate, resolve, and apply.

        Raises:
            ParseFailure: If the script cannot be parsed
            EditConflictError: If the planned edits overlap
        """
        if self.result is not None:
            return self.result

        source = self.script.code
        self.state = RewriteState.REWRITING
        try:
            records = locate_imports(source)
            outcomes = self.resolve(source, records)
            # Later statements first, so earlier offsets stay valid.
            ordered = sorted(outcomes, key=lambda o: o.record.specifier_range.start, reverse=True)
            edits = plan_edits(source, ordered)
            code = apply_edits(source, edits) if edits else source
        except Exception:
            self.state = RewriteState.PENDING
            raise

        self.state = RewriteState.REWRITTEN if edits else RewriteState.UNCHANGED
        self.result = RewriteResult(original=source, code=code, state=self.state, outcomes=outcomes, edits=edits)

        LOG.debug(
            "%s: %d imports, %d rewritten, %d flagged",
            self.script.filename,
            len(outcomes),
            self.result.rewritten,
            self.result.flagged,
        )
        return self.result


def rewrite_script(
    script: ScriptRecord,
    known_scripts: Iterable[ScriptRecord] | ImportResolver,
) -> RewriteResult:
    """Rewrite one script against the known scripts of its server."""
    return ScriptRewriter(script, known_scripts).run()


def convert(script: ScriptRecord, scripts: Iterable[ScriptRecord]) -> str:
    """
    Return the script's code with its imports migrated.

    The result is the input text itself when nothing needed to change.

    Raises:
        ParseFailure: If the script cannot be parsed
    """
    return rewrite_script(script, scripts).code
