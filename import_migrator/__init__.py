"""
import-migrator: migrate script imports from the legacy ``./`` root convention.

Older scripts used ``./name.js`` to import a script at the root of their
server, no matter where the importing script lived. Under the new
convention ``./`` is relative to the importer, so those imports must be
rewritten to ``/name.js``. This package:

1. **Locates** import declarations with a real JavaScript parser (tree-sitter)
2. **Resolves** each specifier against the scripts known on the same server
   (root first, then the importer's directories, ``.js`` optional)
3. **Rewrites** the specifier in place, keeping the original statement in a
   banner comment, or flags it with a warning when it cannot be resolved
4. **Drives** whole workspaces, taking backups before any script changes

Usage:
    from import_migrator import ServerRecord, ScriptRecord, rewrite_imports

    report = rewrite_imports([server])
    print(report.render())
"""

from .config import MigratorConfig
from .driver import migrate_server, migrate_workspace, rewrite_imports
from .models import MigrationReport, ReportEntry, ReportStatus, ScriptRecord, ServerRecord
from .rewrite import ParseFailure, RewriteError, RewriteResult, convert, rewrite_script

__version__ = "0.1.0"

__all__ = [
    "MigratorConfig",
    "ScriptRecord",
    "ServerRecord",
    "ReportEntry",
    "ReportStatus",
    "MigrationReport",
    "rewrite_script",
    "convert",
    "RewriteResult",
    "RewriteError",
    "ParseFailure",
    "migrate_server",
    "rewrite_imports",
    "migrate_workspace",
]
