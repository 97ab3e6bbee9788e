"""Filesystem probes: file sizes, sidecar discovery and byte formatting."""

from __future__ import annotations

import os
from collections.abc import Iterable

DEFAULT_SIDECAR_EXTENSIONS = (".xmp", ".pp3", ".dop", ".pto")

KB = 1024
MB = 1024 * 1024
GB = 1024 * 1024 * 1024


def file_size(path: str | os.PathLike[str]) -> int:
    """Return the size of ``path`` in bytes, or 0 if it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return handle.seek(0, os.SEEK_END)
    except (OSError, ValueError):
        return 0


def sidecar_files(
    primary_path: str | os.PathLike[str],
    extensions: Iterable[str] = DEFAULT_SIDECAR_EXTENSIONS,
) -> list[str]:
    """Return the existing companion files of ``primary_path``.

    The last extension of the final path component is replaced by each of
    ``extensions`` in turn; only paths that exist right now are returned, in
    the order the extensions are given.
    """
    path = os.fspath(primary_path)
    # Everything from the last dot of the final component, leading dots included.
    name_start = len(path) - len(os.path.basename(path))
    dot = path.rfind(".", name_start)
    base = path[:dot] if dot != -1 else path
    sidecars: list[str] = []
    for ext in extensions:
        candidate = base + ext
        if os.path.isfile(candidate):
            sidecars.append(candidate)
    return sidecars


def format_bytes(size: int) -> str:
    if size > GB:
        return f"{size / GB:.2f} GB"
    if size > MB:
        return f"{size / MB:.2f} MB"
    if size > KB:
        return f"{size / KB:.2f} KB"
    return f"{size} bytes"
