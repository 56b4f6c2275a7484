from __future__ import annotations

import logging
from typing import List, Optional

from import_migrator.config import MigratorConfig
from import_migrator.driver import migrate_workspace
from import_migrator.models import ScriptRecord
from import_migrator.paths import paths_equal_exact
from import_migrator.rewrite import ParseFailure, locate_imports, rewrite_script
from import_migrator.storage import DirectoryScriptStore

LOG = logging.getLogger("server")

try:
    from mcp.server.fastmcp import FastMCP
except ImportError as exc:  # pragma: no cover - dependency is optional at import time
    FastMCP = None
    _IMPORT_ERROR = exc
else:
    _IMPORT_ERROR = None


def _require_server() -> "FastMCP":
    if FastMCP is None:
        raise SystemExit(
            "The mcp package is required to run the server. "
            "Install it with `pip install mcp` or `pip install mcp[cli]`."
        ) from _IMPORT_ERROR
    return FastMCP("import-migrator-server")


def _validate_required(name: str, value: Optional[str]) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required field: {name}")


def locate_imports_payload(code: str) -> dict:
    try:
        records = locate_imports(code)
    except ParseFailure as exc:
        return {"ok": False, "error": str(exc)}
    return {"ok": True, "imports": [r.to_dict() for r in records]}


def rewrite_script_payload(filename: str, code: str, knownFiles: List[str], hostname: str = "home") -> dict:
    script = ScriptRecord(filename=filename, code=code, server=hostname)
    known = [script] + [
        ScriptRecord(filename=name, server=hostname) for name in knownFiles if not paths_equal_exact(name, filename)
    ]
    try:
        result = rewrite_script(script, known)
    except ParseFailure as exc:
        LOG.warning("Failed to convert %s: %s", filename, exc)
        return {"ok": False, "state": "failed", "error": str(exc)}
    return {"ok": True, **result.to_dict()}


def migrate_workspace_payload(workspaceDirectory: str, dryRun: bool = False) -> dict:
    config = MigratorConfig.from_env()
    store = DirectoryScriptStore(workspaceDirectory, config=config)
    report = migrate_workspace(store, dry_run=dryRun, config=config)
    payload = report.model_dump(mode="json")
    payload.update(
        changed=report.changed,
        unchanged=report.unchanged,
        failed=report.failed,
        changeLog=report.render(include_unchanged=True),
    )
    return payload


def build_server() -> "FastMCP":
    server = _require_server()

    @server.tool(
            description="List the import declarations of a script with their source ranges."
    )
    def locate_imports_tool(code: str) -> dict:
        _validate_required("code", code)
        return locate_imports_payload(code)

    @server.tool(
            description="Rewrite the imports of one script against a list of files known on its server."
    )
    def rewrite_script_tool(filename: str, code: str, knownFiles: List[str], hostname: str = "home") -> dict:
        _validate_required("filename", filename)
        _validate_required("code", code)
        return rewrite_script_payload(filename, code, knownFiles, hostname)

    @server.tool(
            description="Migrate every script of every server in a workspace directory and return the change report."
    )
    def migrate_workspace_tool(workspaceDirectory: str, dryRun: bool = False) -> dict:
        _validate_required("workspaceDirectory", workspaceDirectory)
        return migrate_workspace_payload(workspaceDirectory, dryRun)

    return server


def main() -> None:
    config = MigratorConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    server = build_server()
    server.run()


if __name__ == "__main__":
    main()
