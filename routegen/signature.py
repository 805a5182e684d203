"""Filesystem facts gathered once per run and used for classification."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional, Tuple

from .logging import get_logger
from .scanner import (
    DEPENDENCY_DIRS,
    DOTNET_BUILD_DIRS,
    SOURCE_SUFFIXES,
    iter_files,
    list_dir,
    load_json_object,
    read_text,
    relative_to,
    resolve_root,
)

FOREIGN_MANIFESTS: Tuple[Tuple[str, str], ...] = (
    ("composer.json", "PHP/Composer"),
    ("Gemfile", "Ruby/Rails"),
    ("pom.xml", "Java/Spring"),
    ("build.gradle", "Java/Spring"),
    ("Cargo.toml", "Rust"),
    ("go.mod", "Go"),
)
FOREIGN_SUFFIX = ".php"
FOREIGN_FILE_THRESHOLD = 5

MARKER_PATHS: Tuple[str, ...] = (
    "lerna.json",
    "packages/core",
    "config/server.js",
    "config/server.ts",
    "build.sbt",
    "manage.py",
    "app/api",
    "pages/api",
    "routes",
    "src/routes",
    "src/modules",
    "backend/src/modules",
    "package.json",
    "Program.cs",
    "appsettings.json",
)

STRAPI_PACKAGES: FrozenSet[str] = frozenset({"@strapi/strapi", "strapi"})
MODULE_DIRS: Tuple[str, ...] = ("src/modules", "backend/src/modules")

AUTO_DETECT_DIRS: Tuple[str, ...] = (
    "src/api",
    "api",
    "lib/api",
    "lib/routes",
    "server/routes",
    "server/routers",
    "src/handlers",
    "handlers",
    "controllers",
    "src/controllers",
    "app/controllers",
    "src/endpoints",
    "endpoints",
)
AUTO_DETECT_FILES: Tuple[str, ...] = ("server.js", "app.js", "index.js", "main.js")

ROUTER_CALL = re.compile(r"\b(?:app|router)\.(?:get|post|put|delete|patch)\s*\(")
MINIMAL_API_CALLS: Tuple[str, ...] = ("MapGet", "MapPost", "MapPut", "MapDelete")

CONTROLLER_SEARCH_DEPTH = 4
DOTNET_SKIP_DIRS: FrozenSet[str] = DEPENDENCY_DIRS | DOTNET_BUILD_DIRS

logger = get_logger("signature")


def is_router_file(name: str) -> bool:
    """Return True for ``<name>.router.ts`` / ``<name>.router.js`` style files."""
    return ".router." in name and name.endswith(SOURCE_SUFFIXES)


def has_router_call(text: str) -> bool:
    """Return True when ``text`` contains an ``app``/``router`` verb call."""
    return ROUTER_CALL.search(text) is not None


@dataclass(frozen=True)
class ProjectSignature:
    """Immutable set of filesystem facts about a project root."""

    root: Path
    markers: FrozenSet[str] = frozenset()
    dependencies: FrozenSet[str] = frozenset()
    foreign_file_count: int = 0
    unsupported_reason: Optional[str] = None
    django_root: Optional[str] = None
    has_play_routers: bool = False
    modules_with_routers: FrozenSet[str] = frozenset()
    auto_targets: Tuple[str, ...] = ()
    dotnet_entry: Optional[str] = None
    dotnet_minimal_api: bool = False
    controllers: Tuple[str, ...] = field(default_factory=tuple)
    project_files: Tuple[str, ...] = field(default_factory=tuple)

    def has(self, marker: str) -> bool:
        return marker in self.markers

    @classmethod
    def scan(cls, root: str | Path) -> "ProjectSignature":
        """Inspect ``root`` and return its signature."""
        root_path = resolve_root(root)
        markers = frozenset(marker for marker in MARKER_PATHS if (root_path / marker).exists())

        foreign_count = 0
        play_routers = False
        for path in iter_files(root_path):
            if path.name.endswith(FOREIGN_SUFFIX):
                foreign_count += 1
            elif path.name.endswith("Router.scala"):
                play_routers = True

        entry = root_path / "Program.cs"
        entry_text = read_text(entry) if entry.is_file() else None

        signature = cls(
            root=root_path,
            markers=markers,
            dependencies=_manifest_dependencies(root_path),
            foreign_file_count=foreign_count,
            unsupported_reason=_unsupported_reason(root_path, foreign_count),
            django_root=_django_root(root_path),
            has_play_routers=play_routers,
            modules_with_routers=frozenset(
                name for name in MODULE_DIRS if _has_router_files(root_path / name)
            ),
            auto_targets=_auto_targets(root_path),
            dotnet_entry="Program.cs" if entry_text is not None else None,
            dotnet_minimal_api=_has_minimal_api(entry_text),
            controllers=find_controllers(root_path),
            project_files=tuple(
                entry.name for entry in list_dir(root_path) if entry.name.endswith(".csproj")
            ),
        )
        logger.debug(
            "Signature for %s: %d markers, %d foreign files, %d auto targets, %d controllers",
            root_path,
            len(signature.markers),
            signature.foreign_file_count,
            len(signature.auto_targets),
            len(signature.controllers),
        )
        return signature


def find_controllers(root: Path) -> Tuple[str, ...]:
    """Return ``*Controller.cs`` files within the bounded search depth."""
    return tuple(
        relative_to(root, path)
        for path in iter_files(
            root,
            skip_dirs=DOTNET_SKIP_DIRS,
            max_depth=CONTROLLER_SEARCH_DEPTH,
            include=lambda name: name.endswith("Controller.cs"),
        )
    )


def _manifest_dependencies(root: Path) -> FrozenSet[str]:
    data = load_json_object(root / "package.json")
    dependencies = data.get("dependencies")
    if isinstance(dependencies, dict):
        return frozenset(str(name) for name in dependencies)
    return frozenset()


def _unsupported_reason(root: Path, foreign_count: int) -> Optional[str]:
    if foreign_count > FOREIGN_FILE_THRESHOLD:
        return "PHP"
    for marker, reason in FOREIGN_MANIFESTS:
        if (root / marker).exists():
            return reason
    return None


def _django_root(root: Path) -> Optional[str]:
    if (root / "manage.py").exists():
        return "."
    for entry in list_dir(root):
        if entry.is_dir() and (Path(entry.path) / "manage.py").exists():
            return entry.name
    return None


def _has_router_files(directory: Path) -> bool:
    for entry in list_dir(directory):
        if not entry.is_dir():
            continue
        if any(is_router_file(child.name) for child in list_dir(Path(entry.path))):
            return True
    return False


def _auto_targets(root: Path) -> Tuple[str, ...]:
    targets: list[str] = []
    for name in AUTO_DETECT_FILES:
        path = root / name
        if not path.is_file():
            continue
        text = read_text(path)
        if text is not None and has_router_call(text):
            targets.append(name)

    for base in AUTO_DETECT_DIRS:
        directory = root / base
        if not directory.is_dir():
            continue
        for path in iter_files(directory, include=lambda name: name.endswith(SOURCE_SUFFIXES)):
            text = read_text(path)
            if text is not None and has_router_call(text):
                targets.append(relative_to(root, path))
    return tuple(targets)


def _has_minimal_api(text: Optional[str]) -> bool:
    if not text:
        return False
    return "app.Map" in text and any(call in text for call in MINIMAL_API_CALLS)


__all__ = [
    "ProjectSignature",
    "find_controllers",
    "has_router_call",
    "is_router_file",
]
