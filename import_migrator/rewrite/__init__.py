"""
Import rewriting core.

Locates import declarations in a script, resolves them against the scripts
known on the same server, and rewrites them to the root-relative convention,
leaving an audit banner above every rewritten statement and a warning above
every statement that could not be resolved.

Usage:
    from import_migrator.rewrite import rewrite_script

    result = rewrite_script(script, server.scripts)
    if result.changed:
        script.code = result.code
"""

from .engine import (
    BANNER_CLOSE,
    BANNER_OPEN,
    WARNING_COMMENT,
    RewriteResult,
    ScriptRewriter,
    apply_edits,
    banner_block,
    convert,
    plan_edits,
    rewrite_script,
    warning_block,
)
from .errors import EditConflictError, ParseFailure, RewriteError
from .locator import ImportLocator, locate_imports
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

__all__ = [
    # Engine
    "rewrite_script",
    "convert",
    "ScriptRewriter",
    "RewriteResult",
    "RewriteState",
    "plan_edits",
    "apply_edits",
    "banner_block",
    "warning_block",
    "WARNING_COMMENT",
    "BANNER_OPEN",
    "BANNER_CLOSE",
    # Locator
    "ImportLocator",
    "locate_imports",
    # Resolver
    "ImportResolver",
    # Types
    "ImportRecord",
    "SourceRange",
    "Edit",
    "ResolutionOutcome",
    "RootRewrite",
    "DirectoryRewrite",
    "Unresolved",
    "UnresolvedReason",
    # Errors
    "RewriteError",
    "ParseFailure",
    "EditConflictError",
]
