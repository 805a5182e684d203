"""Minimal glob-to-predicate compiler used by file discovery."""

from __future__ import annotations

import posixpath
import re
from functools import lru_cache
from typing import Callable, List

Predicate = Callable[[str], bool]

_APP_ROUTE_SUFFIX = "route.{ts,js}"
_APP_ROUTE_NAMES = ("route.ts", "route.js")


def _clean(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def _split_alternatives(body: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in body:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def _translate(pattern: str) -> str:
    out: List[str] = []
    index = 0
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char == "*":
            if pattern.startswith("**", index):
                index += 2
                if index < length and pattern[index] == "/":
                    # zero or more whole directories
                    out.append("(?:.*/)?")
                    index += 1
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "{":
            depth = 1
            end = index + 1
            while end < length and depth:
                if pattern[end] == "{":
                    depth += 1
                elif pattern[end] == "}":
                    depth -= 1
                end += 1
            if depth:
                out.append(re.escape(pattern[index:]))
                break
            body = pattern[index + 1 : end - 1]
            alternatives = [_translate(part) for part in _split_alternatives(body)]
            out.append("(?:" + "|".join(alternatives) + ")")
            index = end
            continue
        else:
            out.append(re.escape(char))
        index += 1
    return "".join(out)


def _app_route_predicate(path: str) -> bool:
    candidate = _clean(path)
    in_app_api = "app/api" in candidate
    return in_app_api and posixpath.basename(candidate) in _APP_ROUTE_NAMES


@lru_cache(maxsize=128)
def compile_glob(pattern: str) -> Predicate:
    """Return a predicate matching relative posix paths against ``pattern``.

    ``**`` spans any number of directories (including none), ``*`` and ``?``
    stay inside a single segment and ``{a,b}`` expands to alternatives. The
    App Router leaf pattern (``.../app/api/**/route.{ts,js}``) is matched on
    the literal file name instead of through the general translation.
    """
    cleaned = _clean(pattern)
    if cleaned.endswith(_APP_ROUTE_SUFFIX) and "app/api" in cleaned:
        return _app_route_predicate

    regex = re.compile(_translate(cleaned) + r"\Z")

    def _matches(path: str) -> bool:
        return regex.match(_clean(path)) is not None

    return _matches


def glob_base(pattern: str) -> str:
    """Return the literal directory prefix of ``pattern`` (before any wildcard)."""
    cleaned = _clean(pattern)
    cut = len(cleaned)
    for token in ("*", "?", "{"):
        position = cleaned.find(token)
        if position != -1:
            cut = min(cut, position)
    prefix = cleaned[:cut]
    if "/" not in prefix:
        return ""
    return prefix.rsplit("/", 1)[0]


def matches_any(path: str, patterns: List[str]) -> bool:
    """Return True when ``path`` matches at least one glob in ``patterns``."""
    return any(compile_glob(pattern)(path) for pattern in patterns)


__all__ = ["compile_glob", "glob_base", "matches_any", "Predicate"]
