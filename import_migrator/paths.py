"""
Path helpers for the root-relative import convention.

Script filenames are stored with a single leading separator or none at all
("helpers.js", "/scripts/util.js", "scripts/util.js" all name files on the
same server). Every comparison here normalizes both sides the same way so
callers never have to care which form a record happens to use.
"""

from __future__ import annotations

import re

SEPARATOR = "/"
SCRIPT_EXTENSION = ".js"
SCRIPT_EXTENSIONS: tuple[str, ...] = (".js", ".ns")
LEGACY_ROOT_PREFIX = "./"
BACKUP_DIRECTORY = "BACKUP"

# Characters that cannot appear in a path segment.
_INVALID_SEGMENT_CHARS = re.compile(r"[\s\\*?<>|\"'`:]")
_URL_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def remove_leading_slash(path: str) -> str:
    return path[1:] if path.startswith(SEPARATOR) else path


def ensure_leading_slash(path: str) -> str:
    return path if path.startswith(SEPARATOR) else SEPARATOR + path


def is_script_filename(filename: str, extensions: tuple[str, ...] = SCRIPT_EXTENSIONS) -> bool:
    """Check whether a filename is a script the migrator should process."""
    return filename.endswith(tuple(extensions))


def is_url_specifier(specifier: str) -> bool:
    """True for specifiers such as ``https://...`` or ``blob:...``."""
    return bool(_URL_SCHEME.match(specifier))


def backup_filename(filename: str, backup_directory: str = BACKUP_DIRECTORY) -> str:
    """
    Name of the backup copy for a script.

    Examples:
        helpers.js        → /BACKUP/helpers.js
        /scripts/util.js  → /BACKUP/scripts/util.js
    """
    return SEPARATOR + backup_directory + ensure_leading_slash(filename)


def is_backup_filename(filename: str, backup_directory: str = BACKUP_DIRECTORY) -> bool:
    return ensure_leading_slash(filename).startswith(SEPARATOR + backup_directory + SEPARATOR)


def parent_directories(filename: str) -> list[str]:
    """
    List every ancestor directory of a script, most specific first.

    Each entry is absolute and ends with a separator, so a relative path can
    be appended directly:

        /scripts/lib/main.js → ["/scripts/lib/", "/scripts/", "/"]
        main.js              → ["/"]
    """
    parts = [part for part in remove_leading_slash(filename.strip()).split(SEPARATOR)[:-1] if part]
    directories = []
    for depth in range(len(parts), 0, -1):
        directories.append(SEPARATOR + SEPARATOR.join(parts[:depth]) + SEPARATOR)
    directories.append(SEPARATOR)
    return directories


def _resolve_segments(path: str) -> str | None:
    """Collapse ``.`` and ``..`` in an absolute path; None if the path is invalid."""
    if path.endswith(SEPARATOR) and path != SEPARATOR:
        path = path[:-1]

    resolved: list[str] = []
    for segment in path[1:].split(SEPARATOR):
        if segment == ".":
            continue
        if segment == "..":
            if not resolved:
                return None  # Can't go above root
            resolved.pop()
            continue
        if not segment or _INVALID_SEGMENT_CHARS.search(segment):
            return None
        resolved.append(segment)

    if not resolved:
        return None
    return SEPARATOR + SEPARATOR.join(resolved)


def normalize(path: str, base_directories: list[str] | None = None) -> str | None:
    """
    Normalize a path into its absolute, root-relative form.

    Absolute paths are resolved on their own. Relative paths are joined onto
    each base directory in order and the first one that produces a valid
    path wins. Without base directories a relative path is taken from root.

    Args:
        path: Path or import specifier to normalize
        base_directories: Candidate base directories, most specific first

    Returns:
        Normalized path with a single leading separator, or None if no
        candidate yields a syntactically valid path
    """
    path = path.strip()
    if not path:
        return None

    if path.startswith(SEPARATOR):
        return _resolve_segments(path)

    for base in base_directories or [SEPARATOR]:
        base = ensure_leading_slash(base)
        if not base.endswith(SEPARATOR):
            base += SEPARATOR
        resolved = _resolve_segments(base + path)
        if resolved is not None:
            return resolved
    return None


def candidate_paths(specifier: str, base_directories: list[str] | None = None) -> list[str]:
    """
    Normalized lookup candidates for an import specifier.

    The literal specifier comes first; an extensionless specifier is retried
    once with ``.js`` appended.
    """
    variants = [specifier]
    if not specifier.endswith(SCRIPT_EXTENSION):
        variants.append(specifier + SCRIPT_EXTENSION)

    candidates: list[str] = []
    for variant in variants:
        resolved = normalize(variant, base_directories)
        if resolved is not None and resolved not in candidates:
            candidates.append(resolved)
    return candidates


def paths_equal_exact(a: str, b: str) -> bool:
    """True if two paths are identical once both carry a single leading separator."""
    return ensure_leading_slash(a) == ensure_leading_slash(b)


def paths_equal_under_import_convention(a: str, b: str) -> bool:
    """
    True if two paths name the same importable module.

    The legacy ``./`` root marker is stripped from the compared side and the
    ``.js`` extension is optional on both sides.
    """
    if b.startswith(LEGACY_ROOT_PREFIX):
        b = b[len(LEGACY_ROOT_PREFIX) :]
    if not a.endswith(SCRIPT_EXTENSION):
        a += SCRIPT_EXTENSION
    if not b.endswith(SCRIPT_EXTENSION):
        b += SCRIPT_EXTENSION
    return paths_equal_exact(a, b)
