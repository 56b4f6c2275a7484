"""
Batch driver: migrate the imports of every script on every server.

Scripts are processed one at a time in server order. Each server's scripts
are resolved against a snapshot of that server's script list taken before
the first rewrite, and backups are only added to the server once all of its
scripts have been processed.

A script that fails to parse is reported and skipped; it never stops the
rest of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from import_migrator.config import MigratorConfig
from import_migrator.models import MigrationReport, ReportEntry, ReportStatus, ScriptRecord, ServerRecord
from import_migrator.paths import backup_filename, is_backup_filename, is_script_filename, paths_equal_exact
from import_migrator.rewrite import ImportResolver, RewriteError, rewrite_script
from import_migrator.storage import ScriptStore

LOG = logging.getLogger("driver")


def _store_backup(backups: list[ScriptRecord], backup: ScriptRecord) -> None:
    for index, existing in enumerate(backups):
        if paths_equal_exact(existing.filename, backup.filename):
            backups[index] = backup
            return
    backups.append(backup)


def migrate_server(server: ServerRecord, config: MigratorConfig | None = None) -> list[ReportEntry]:
    """
    Migrate every script on one server in place.

    The original code of each changed script is saved as a backup script
    before the new code is assigned.

    Args:
        server: Server whose scripts are migrated
        config: Migration settings (extensions, backup directory)

    Returns:
        One ReportEntry per processed script
    """
    config = config or MigratorConfig()
    resolver = ImportResolver(server.scripts)
    entries: list[ReportEntry] = []
    backups: list[ScriptRecord] = []

    for script in list(server.scripts):
        if not is_script_filename(script.filename, config.script_extensions):
            continue
        if is_backup_filename(script.filename, config.backup_dir):
            continue

        try:
            result = rewrite_script(script, resolver)
        except RewriteError as exc:
            LOG.warning("Failed to convert %s on %s: %s", script.filename, server.hostname, exc)
            entries.append(
                ReportEntry(
                    hostname=server.hostname,
                    filename=script.filename,
                    status=ReportStatus.FAILED,
                    reason=str(exc),
                )
            )
            continue

        if result.code == script.code:
            entries.append(ReportEntry(hostname=server.hostname, filename=script.filename, status=ReportStatus.NO_CHANGE))
            continue

        _store_backup(
            backups,
            ScriptRecord(
                filename=backup_filename(script.filename, config.backup_dir),
                code=script.code,
                server=server.hostname,
            ),
        )
        script.code = result.code
        entries.append(
            ReportEntry(
                hostname=server.hostname,
                filename=script.filename,
                status=ReportStatus.CHANGED,
                rewritten=result.rewritten,
                flagged=result.flagged,
            )
        )
        LOG.info("Changed import statements in %s on %s", script.filename, server.hostname)

    for backup in backups:
        existing = server.get_script(backup.filename)
        if existing is not None:
            existing.code = backup.code
        else:
            server.scripts.append(backup)

    return entries


def rewrite_imports(
    servers: Iterable[ServerRecord],
    store: ScriptStore | None = None,
    config: MigratorConfig | None = None,
) -> MigrationReport:
    """
    Migrate all servers and collect a report.

    Args:
        servers: Servers to migrate, processed in order
        store: If given, changed servers are saved and the change log is written
        config: Migration settings

    Returns:
        MigrationReport with one entry per processed script
    """
    config = config or MigratorConfig()
    report = MigrationReport()

    for server in servers:
        entries = migrate_server(server, config)
        report.entries.extend(entries)
        if store is not None and any(e.status == ReportStatus.CHANGED for e in entries):
            store.save_server(server)

    LOG.info(
        "Import migration finished: %d changed, %d unchanged, %d failed",
        report.changed,
        report.unchanged,
        report.failed,
    )

    if store is not None and report.has_changes:
        store.write_change_log(report)

    return report


def migrate_workspace(
    store: ScriptStore,
    dry_run: bool = False,
    config: MigratorConfig | None = None,
) -> MigrationReport:
    """Load every server from a store and migrate it, persisting unless dry_run."""
    servers = store.load_servers()
    return rewrite_imports(servers, store=None if dry_run else store, config=config)
