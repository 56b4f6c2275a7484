"""Command line entry point for migrating a workspace of servers.

Usage:
    import-migrator WORKSPACE --dry-run   # preview changes
    import-migrator WORKSPACE             # apply changes
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from import_migrator.config import MigratorConfig
from import_migrator.driver import migrate_workspace
from import_migrator.storage import DirectoryScriptStore

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser(config: MigratorConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="import-migrator",
        description="Rewrite legacy './' script imports to the root-relative convention.",
    )
    parser.add_argument(
        "workspace",
        nargs="?",
        default=config.workspace_dir,
        help="Directory holding one sub-directory per server (default: %(default)s)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Report changes without writing anything")
    parser.add_argument("--show-unchanged", action="store_true", help="Also list scripts that needed no change")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=config.log_level,
        help="Logging level (default: %(default)s)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = MigratorConfig.from_env()
    args = build_parser(config).parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    store = DirectoryScriptStore(args.workspace, config=config)
    report = migrate_workspace(store, dry_run=args.dry_run, config=config)

    label = "[DRY RUN] " if args.dry_run else ""
    for line in report.render(include_unchanged=args.show_unchanged).splitlines():
        print(f"{label}{line}")

    mode = "would change" if args.dry_run else "changed"
    print(f"\nTotal: {report.changed} scripts {mode}, {report.unchanged} unchanged, {report.failed} failed.")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
