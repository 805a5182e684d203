"""Translate dialect-specific route paths into canonical ``{name}`` templates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern, Tuple

from .extractors.core import BRACE_PARAM, IDENTIFIER
from .models import Anchor, RouteRecord

MOUNT_PREFIXES: Tuple[str, ...] = (
    "backend/src/modules",
    "src/modules",
    "src/routes",
    "app/api",
    "pages/api",
    "routes",
)

_FILE_SUFFIXES: Tuple[Pattern[str], ...] = (
    re.compile(r"/route\.(?:ts|js)$"),
    re.compile(r"\.router\.(?:ts|js)$"),
    re.compile(r"\.(?:ts|js)$"),
)

# Applied in order; each rewrites one placeholder syntax to ``{name}``.
_PLACEHOLDERS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"\[{1,2}(?:\.\.\.)?([^\[\]/]+)\]{1,2}"), r"{\1}"),
    (re.compile(rf"\$({IDENTIFIER})(?:<[^>]*>)?"), r"{\1}"),
    (re.compile(rf"<(?:{IDENTIFIER}:)?({IDENTIFIER})>"), r"{\1}"),
    (BRACE_PARAM, r"{\1}"),
    (re.compile(rf"(?<![\w{{]):({IDENTIFIER})\??"), r"{\1}"),
    (re.compile(r"\(\.[*+]\)"), "{path}"),
)
_TEMPLATE_NAME = re.compile(r"\{([^{}]+)\}")
_REPEATED_SLASH = re.compile(r"/{2,}")


@dataclass(frozen=True)
class FileContext:
    """Location facts about the file a record came from."""

    relative: str

    @property
    def base_path(self) -> str:
        return base_path(self.relative)


def translate_placeholders(path: str) -> str:
    """Rewrite every known placeholder syntax to ``{name}``."""
    for pattern, replacement in _PLACEHOLDERS:
        path = pattern.sub(replacement, path)
    return path


def canonical_path(path: str) -> str:
    """Return ``path`` with canonical placeholders, one leading slash and no trailing slash."""
    result = translate_placeholders((path or "").strip())
    if not result.startswith("/"):
        result = "/" + result
    result = _REPEATED_SLASH.sub("/", result)
    if len(result) > 1 and result.endswith("/"):
        result = result[:-1]
    return result or "/"


def base_path(relative: str) -> str:
    """Derive the route prefix contributed by a file's location.

    Known mount directories are stripped from the front and route file
    suffixes from the end, so ``src/routes/users/users.router.ts`` becomes
    ``/users/users``.
    """
    route = relative.replace("\\", "/")
    while route.startswith("./"):
        route = route[2:]
    for prefix in MOUNT_PREFIXES:
        if route == prefix or route.startswith(prefix + "/"):
            route = route[len(prefix) :]
            break
    for suffix in _FILE_SUFFIXES:
        route = suffix.sub("", route)
    if route and not route.startswith("/"):
        route = "/" + route
    return route or "/"


def combine_router_path(base: str, endpoint: str) -> str:
    """Append a router-declared sub-path to a directory-derived base path.

    A base whose last two segments are identical (``/auth/auth``) comes from a
    folder mounting its own same-named router; the duplicate segment is dropped.
    """
    clean_base = "" if base == "/" else base
    parts: List[str] = clean_base.split("/")
    if len(parts) >= 2 and parts[-1] == parts[-2]:
        parts.pop()
        clean_base = "/".join(parts)

    clean_endpoint = "" if endpoint == "/" else endpoint
    combined = clean_base + ("/" + clean_endpoint if clean_endpoint else "")
    return _REPEATED_SLASH.sub("/", combined) or "/"


def normalize(record: RouteRecord, context: FileContext) -> str:
    """Return the canonical path template for ``record``."""
    if record.anchor is Anchor.FILE:
        return canonical_path(context.base_path)
    if record.anchor is Anchor.ROUTER:
        return canonical_path(combine_router_path(context.base_path, record.raw_path))
    return canonical_path(record.raw_path)


def template_names(template: str) -> List[str]:
    """Return placeholder names in the order they appear in ``template``."""
    return _TEMPLATE_NAME.findall(template)


__all__ = [
    "FileContext",
    "MOUNT_PREFIXES",
    "base_path",
    "canonical_path",
    "combine_router_path",
    "normalize",
    "template_names",
    "translate_placeholders",
]
