"""Per-dialect discovery of candidate route files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .globbing import compile_glob, glob_base, matches_any
from .logging import get_logger
from .models import CandidateFile, Dialect
from .scanner import SOURCE_SUFFIXES, iter_files, list_dir, relative_to
from .signature import ProjectSignature, is_router_file

logger = get_logger("discovery")

GLOB_PATTERNS: Dict[Dialect, str] = {
    Dialect.NEXTJS_APP: "app/api/**/route.{ts,js}",
    Dialect.NEXTJS_PAGES: "pages/api/**/*.{ts,js}",
    Dialect.EXPRESS: "routes/**/*.{ts,js}",
    Dialect.EXPRESS_SRC: "src/routes/**/*.{ts,js}",
}

MODULE_ROOTS: Dict[Dialect, str] = {
    Dialect.EXPRESS_MODULES: "src/modules",
    Dialect.EXPRESS_BACKEND_MODULES: "backend/src/modules",
}

STRAPI_SEARCH_ROOTS = ("packages", "src/api", "api", "server/routes", "src/routes")


def _glob_files(root: Path, pattern: str) -> List[str]:
    predicate = compile_glob(pattern)
    base = root / glob_base(pattern)
    results = []
    for path in iter_files(base):
        relative = relative_to(root, path)
        if predicate(relative):
            results.append(relative)
    return results


def _module_routers(root: Path, dialect: Dialect) -> List[str]:
    base = root / MODULE_ROOTS[dialect]
    return [relative_to(root, path) for path in iter_files(base, include=is_router_file)]


def _django_urls(root: Path, signature: ProjectSignature) -> List[str]:
    start = root / (signature.django_root or ".")
    return [
        relative_to(root, path)
        for path in iter_files(start, include=lambda name: name == "urls.py")
    ]


def _play_routers(root: Path) -> List[str]:
    return [
        relative_to(root, path)
        for path in iter_files(root, include=lambda name: name.endswith("Router.scala"))
    ]


def _strapi_routes(root: Path) -> List[str]:
    results: List[str] = []

    def _search(directory: Path) -> None:
        for entry in list_dir(directory):
            if not entry.is_dir():
                continue
            child = Path(entry.path)
            if entry.name == "routes" and directory.name == "server":
                for item in list_dir(child):
                    if item.is_file() and item.name.endswith(SOURCE_SUFFIXES):
                        results.append(relative_to(root, Path(item.path)))
            elif not entry.name.startswith(".") and entry.name != "node_modules":
                _search(child)

    for name in STRAPI_SEARCH_ROOTS:
        directory = root / name
        if directory.is_dir():
            _search(directory)
    return results


def _dotnet_files(signature: ProjectSignature, dialect: Dialect) -> List[str]:
    if dialect is Dialect.DOTNET_MINIMAL_API:
        return [signature.dotnet_entry] if signature.dotnet_entry else []
    if dialect is Dialect.DOTNET_WEB_API:
        return list(signature.controllers)
    files = [signature.dotnet_entry] if signature.dotnet_entry else []
    files.extend(signature.controllers)
    return files


def _relative_paths(dialect: Dialect, root: Path, signature: ProjectSignature) -> List[str]:
    if dialect in MODULE_ROOTS:
        return _module_routers(root, dialect)
    if dialect is Dialect.DJANGO:
        return _django_urls(root, signature)
    if dialect is Dialect.PLAY_FRAMEWORK:
        return _play_routers(root)
    if dialect is Dialect.STRAPI:
        return _strapi_routes(root)
    if dialect is Dialect.AUTO_DETECTED:
        return list(signature.auto_targets)
    if dialect.is_dotnet:
        return _dotnet_files(signature, dialect)
    pattern = GLOB_PATTERNS.get(dialect)
    if pattern is None:
        logger.info("No discovery rule for dialect %s", dialect.value)
        return []
    return _glob_files(root, pattern)


def _unique(paths: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        ordered.append(path)
    return ordered


def discover(
    dialect: Dialect,
    root: Path,
    signature: ProjectSignature,
    *,
    exclude: Sequence[str] = (),
) -> List[CandidateFile]:
    """Return the candidate files for ``dialect`` in deterministic order."""
    relative_paths = _unique(_relative_paths(dialect, root, signature))
    if exclude:
        kept = [path for path in relative_paths if not matches_any(path, exclude)]
        if len(kept) != len(relative_paths):
            logger.debug("Excluded %d files by configuration", len(relative_paths) - len(kept))
        relative_paths = kept
    return [CandidateFile(path=root / relative, relative=relative) for relative in relative_paths]


__all__ = ["GLOB_PATTERNS", "discover"]
