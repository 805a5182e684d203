"""Filesystem walking helpers shared by classification and discovery."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterator, Optional

DEPENDENCY_DIRS: FrozenSet[str] = frozenset({"node_modules", "__pycache__"})
DOTNET_BUILD_DIRS: FrozenSet[str] = frozenset({"bin", "obj"})

SOURCE_SUFFIXES = (".ts", ".js")


def resolve_root(root: str | Path) -> Path:
    """Resolve ``root`` to an absolute directory path."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")
    return root_path


def relative_to(root: Path, path: Path) -> str:
    """Return ``path`` relative to ``root`` as a posix string."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as iterator:
            return sorted(iterator, key=lambda entry: entry.name)
    except OSError:
        return []


def iter_files(
    start: Path,
    *,
    skip_dirs: FrozenSet[str] = DEPENDENCY_DIRS,
    max_depth: Optional[int] = None,
    include: Optional[Callable[[str], bool]] = None,
) -> Iterator[Path]:
    """Yield files below ``start`` depth-first in lexicographic order.

    Hidden directories and ``skip_dirs`` are not entered. ``max_depth`` bounds
    how many directory levels below ``start`` are visited; ``include`` filters
    on the file name.
    """

    def _walk(directory: Path, depth: int) -> Iterator[Path]:
        if max_depth is not None and depth > max_depth:
            return
        for entry in _sorted_entries(directory):
            try:
                is_dir = entry.is_dir()
            except OSError:
                continue
            if is_dir:
                if entry.name.startswith(".") or entry.name in skip_dirs:
                    continue
                yield from _walk(Path(entry.path), depth + 1)
            elif include is None or include(entry.name):
                yield Path(entry.path)

    if start.is_dir():
        yield from _walk(start, 0)


def list_dir(directory: Path) -> list[os.DirEntry]:
    """Return the sorted entries of ``directory`` (empty when unreadable)."""
    return _sorted_entries(directory)


def read_text(path: Path) -> Optional[str]:
    """Return file text or None when the file cannot be read."""
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def load_json_object(path: Path) -> Dict[str, object]:
    """Return the parsed JSON object at ``path`` or an empty dict."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, ValueError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


__all__ = [
    "DEPENDENCY_DIRS",
    "DOTNET_BUILD_DIRS",
    "SOURCE_SUFFIXES",
    "iter_files",
    "list_dir",
    "load_json_object",
    "read_text",
    "relative_to",
    "resolve_root",
]
