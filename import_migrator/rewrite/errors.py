"""
Exceptions raised by the rewriting core.

Unresolvable imports are not errors: they become ``Unresolved`` outcomes and
are annotated in the output. Only problems that make a script impossible to
rewrite safely are raised.
"""

from __future__ import annotations


class RewriteError(Exception):
    """Base exception for import rewriting errors."""

    pass


class ParseFailure(RewriteError):
    """The script is not syntactically valid as a module."""

    def __init__(self, syntax_error: str, line: int | None = None, column: int | None = None):
        self.syntax_error = syntax_error
        self.line = line
        self.column = column
        location = f" ({line}:{column})" if line is not None else ""
        super().__init__(f"Error processing script for migration, parse error: {syntax_error}{location}")


class EditConflictError(RewriteError):
    """Two text edits target overlapping source ranges."""

    pass
