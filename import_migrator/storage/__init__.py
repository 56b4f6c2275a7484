"""
Script storage backends used by the batch driver.

The rewriting core never touches storage; only the driver loads servers
from a store and persists rewritten scripts, backups, and the change log.
"""

from .directory_store import DirectoryScriptStore
from .script_store import ScriptStore

__all__ = ["ScriptStore", "DirectoryScriptStore"]
