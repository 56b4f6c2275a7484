"""Configuration for the import migrator.

Loads settings from environment variables with sensible defaults.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from import_migrator.paths import BACKUP_DIRECTORY, SCRIPT_EXTENSIONS


def _split_extensions(value: str) -> tuple[str, ...]:
    extensions = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        extensions.append(item if item.startswith(".") else "." + item)
    return tuple(extensions)


@dataclass
class MigratorConfig:
    """Batch migration configuration."""
    workspace_dir: str = "."
    home_hostname: str = "home"
    change_log: str = "IMPORT_DETECTED_CHANGES.txt"
    backup_dir: str = BACKUP_DIRECTORY
    script_extensions: tuple[str, ...] = field(default=SCRIPT_EXTENSIONS)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "MigratorConfig":
        return cls(
            workspace_dir=os.getenv("IMPORT_MIGRATOR_WORKSPACE_DIR", "."),
            home_hostname=os.getenv("IMPORT_MIGRATOR_HOME_HOSTNAME", "home"),
            change_log=os.getenv("IMPORT_MIGRATOR_CHANGE_LOG", "IMPORT_DETECTED_CHANGES.txt"),
            backup_dir=os.getenv("IMPORT_MIGRATOR_BACKUP_DIR", BACKUP_DIRECTORY),
            script_extensions=_split_extensions(os.getenv("IMPORT_MIGRATOR_SCRIPT_EXTENSIONS", ".js,.ns")),
            log_level=os.getenv("IMPORT_MIGRATOR_LOG_LEVEL", "INFO").upper(),
        )
