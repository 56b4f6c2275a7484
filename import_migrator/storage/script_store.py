"""
Abstract script store interface.

A store enumerates the servers to migrate and persists what the batch
driver changes. Implementations decide where servers live.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from import_migrator.models import MigrationReport, ServerRecord


class ScriptStore(ABC):
    """Abstract interface for loading and persisting servers' scripts."""

    @abstractmethod
    def load_servers(self) -> list[ServerRecord]:
        """Load every server with all of its scripts."""

    @abstractmethod
    def save_server(self, server: ServerRecord) -> None:
        """Persist every script of a server, backups included."""

    @abstractmethod
    def write_change_log(self, report: MigrationReport) -> None:
        """Write the human-readable change log for a migration run."""
