"""
Directory-backed script store.

Layout:
    <root>/<hostname>/<script path>

Every direct sub-directory of the root is a server. Scripts keep their path
relative to the server directory as filename, so root-level scripts have no
leading separator ("helpers.js") and nested ones keep their directories
("scripts/util.js"). The change log is written as a text file on the home
server.
"""

from __future__ import annotations

import logging
from pathlib import Path

from import_migrator.config import MigratorConfig
from import_migrator.models import MigrationReport, ScriptRecord, ServerRecord
from import_migrator.paths import is_script_filename, remove_leading_slash

from .script_store import ScriptStore

LOG = logging.getLogger("storage.directory")


def _read_script(path: Path) -> str:
    # newline="" keeps CRLF line endings intact.
    with path.open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


class DirectoryScriptStore(ScriptStore):
    """Stores each server as a directory of script files."""

    def __init__(self, root: Path | str, config: MigratorConfig | None = None) -> None:
        self.root = Path(root)
        self.config = config or MigratorConfig()

    def server_path(self, hostname: str) -> Path:
        return self.root / hostname

    def script_path(self, hostname: str, filename: str) -> Path:
        return self.server_path(hostname) / remove_leading_slash(filename)

    def load_servers(self) -> list[ServerRecord]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Workspace directory does not exist: {self.root}")

        servers: list[ServerRecord] = []
        for server_dir in sorted(p for p in self.root.iterdir() if p.is_dir()):
            if server_dir.name.startswith("."):
                continue
            server = ServerRecord(hostname=server_dir.name)
            for file_path in sorted(server_dir.rglob("*")):
                if not file_path.is_file() or not is_script_filename(file_path.name, self.config.script_extensions):
                    continue
                try:
                    code = _read_script(file_path)
                except UnicodeDecodeError as exc:
                    LOG.warning("Skipping undecodable script %s: %s", file_path, exc)
                    continue
                server.scripts.append(
                    ScriptRecord(
                        filename=file_path.relative_to(server_dir).as_posix(),
                        code=code,
                        server=server.hostname,
                    )
                )
            LOG.debug("Loaded %d scripts from %s", len(server.scripts), server.hostname)
            servers.append(server)
        return servers

    def save_server(self, server: ServerRecord) -> None:
        written = 0
        for script in server.scripts:
            path = self.script_path(server.hostname, script.filename)
            if path.exists() and _read_script(path) == script.code:
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(script.code)
            written += 1
        LOG.info("Saved %d scripts on %s", written, server.hostname)

    def write_change_log(self, report: MigrationReport) -> None:
        path = self.server_path(self.config.home_hostname) / self.config.change_log
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(report.render(), encoding="utf-8")
        LOG.info("Wrote change log to %s", path)
