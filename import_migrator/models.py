from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from import_migrator.paths import paths_equal_exact


class ScriptRecord(BaseModel):
    filename: str
    code: str = ""
    server: str = ""


class ServerRecord(BaseModel):
    hostname: str
    scripts: List[ScriptRecord] = Field(default_factory=list)

    def get_script(self, filename: str) -> Optional[ScriptRecord]:
        return next((s for s in self.scripts if paths_equal_exact(s.filename, filename)), None)


class ReportStatus(str, Enum):
    NO_CHANGE = "no_change"
    CHANGED = "changed"
    FAILED = "failed"


class ReportEntry(BaseModel):
    hostname: str
    filename: str
    status: ReportStatus
    reason: Optional[str] = None
    rewritten: int = 0
    flagged: int = 0

    def render(self) -> str:
        if self.status == ReportStatus.CHANGED:
            return f"// Changed import statements in {self.filename} on {self.hostname}"
        if self.status == ReportStatus.FAILED:
            return f"// Failed to convert {self.filename} on {self.hostname}, reason: {self.reason}"
        return f"// No change to {self.filename} on {self.hostname}"


class MigrationReport(BaseModel):
    entries: List[ReportEntry] = Field(default_factory=list)

    def _count(self, status: ReportStatus) -> int:
        return sum(1 for e in self.entries if e.status == status)

    @property
    def changed(self) -> int:
        return self._count(ReportStatus.CHANGED)

    @property
    def failed(self) -> int:
        return self._count(ReportStatus.FAILED)

    @property
    def unchanged(self) -> int:
        return self._count(ReportStatus.NO_CHANGE)

    @property
    def has_changes(self) -> bool:
        return bool(self.changed or self.failed)

    def render(self, include_unchanged: bool = False) -> str:
        lines = [
            entry.render()
            for entry in self.entries
            if include_unchanged or entry.status != ReportStatus.NO_CHANGE
        ]
        return "".join(line + "\n" for line in lines)
