"""Extractors for JavaScript/TypeScript route sources (Next.js, Express, Strapi)."""

from __future__ import annotations

import re
from typing import Dict, List, Pattern

from ..models import BODY_PARAMETER, HTTP_METHODS, Anchor, ParameterDescriptor, RouteRecord
from .core import (
    COLON_PARAM,
    DECLARED_RESPONSES,
    HANDLER_RESPONSES,
    IDENTIFIER,
    ROUTER_RESPONSES,
    leading_slash,
    path_parameters,
    query_parameter,
    unique,
)

_BODY_MARKERS = ("request.json()", "req.body")
_BODY_METHODS = frozenset({"post", "put", "patch"})

_HANDLER_PATTERNS: Dict[str, Pattern[str]] = {
    method: re.compile(rf"export\s+async\s+function\s+{method.upper()}\b", re.IGNORECASE)
    for method in HTTP_METHODS
}
_SEARCH_PARAM = re.compile(r"searchParams\.get\(\s*['\"`]([^'\"`]+)['\"`]\s*\)")

# Route arguments start with "/" or "*"; lookups like searchParams.get('q') never match.
_ROUTE_ARGUMENT = r"['\"]((?:/|\*)[^'\"]*|)['\"]"

_ROUTER_PATTERNS: Dict[str, Pattern[str]] = {
    method: re.compile(rf"\.{method}\s*\(\s*{_ROUTE_ARGUMENT}") for method in HTTP_METHODS
}
_APP_PATTERNS: Dict[str, Pattern[str]] = {
    method: re.compile(rf"\bapp\.{method}\s*\(\s*{_ROUTE_ARGUMENT}") for method in HTTP_METHODS
}
_REQUEST_QUERY = re.compile(rf"req\.query\.({IDENTIFIER})")

_STRAPI_ROUTE = re.compile(
    r"\{\s*method:\s*['\"]([^'\"]*)['\"]\s*,\s*path:\s*['\"]([^'\"]*)['\"]\s*,"
    r"\s*handler:\s*['\"]([^'\"]*)['\"][^}]*\}"
)
_CATCH_ALL = re.compile(r"\(\.[*+]\)")
_STRAPI_METHODS = frozenset(HTTP_METHODS) | {"head", "options"}


class FileHandlerExtractor:
    """Next.js style exported verb handlers; one route per exported verb."""

    name = "file-handler"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        exported = [method for method, pattern in _HANDLER_PATTERNS.items() if pattern.search(text)]
        if not exported:
            return []
        parameters = self._parameters(text)
        return [
            RouteRecord(
                method=method,
                raw_path="",
                source_file=path,
                parameters=parameters,
                anchor=Anchor.FILE,
                summary=f"{method.upper()} operation",
                responses=HANDLER_RESPONSES,
            )
            for method in exported
        ]

    @staticmethod
    def _parameters(text: str) -> tuple[ParameterDescriptor, ...]:
        params = [
            query_parameter(name, required=f"!{name}" in text)
            for name in _SEARCH_PARAM.findall(text)
        ]
        params = unique(params)
        if any(marker in text for marker in _BODY_MARKERS):
            params.append(BODY_PARAMETER)
        return tuple(params)


class RouterCallExtractor:
    """``<router>.<verb>('<path>', ...)`` calls, mounted below the file's base path."""

    name = "router-calls"
    anchor = Anchor.ROUTER
    patterns = _ROUTER_PATTERNS

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        records: List[RouteRecord] = []
        query_names = _REQUEST_QUERY.findall(text)
        has_body = "req.body" in text
        for method, pattern in self.patterns.items():
            for match in pattern.finditer(text):
                endpoint = match.group(1)
                records.append(
                    RouteRecord(
                        method=method,
                        raw_path=endpoint,
                        source_file=path,
                        parameters=express_parameters(method, endpoint, query_names, has_body),
                        anchor=self.anchor,
                        summary=f"{method.upper()} {endpoint or '/'}",
                        responses=ROUTER_RESPONSES,
                    )
                )
        return records


class AppCallExtractor(RouterCallExtractor):
    """``app.<verb>('<path>', ...)`` calls; paths are taken verbatim."""

    name = "app-calls"
    anchor = Anchor.ABSOLUTE
    patterns = _APP_PATTERNS


def express_parameters(
    method: str, endpoint: str, query_names: List[str], has_body: bool
) -> tuple[ParameterDescriptor, ...]:
    """Path hints from ``:name`` tokens, then request query names, then body."""
    params = path_parameters(COLON_PARAM.findall(endpoint))
    known = {param.name for param in params}
    for name in query_names:
        if name not in known:
            known.add(name)
            params.append(query_parameter(name))
    if has_body and method in _BODY_METHODS:
        params.append(BODY_PARAMETER)
    return tuple(params)


class StrapiRouteExtractor:
    """``{ method, path, handler }`` route objects from Strapi route files."""

    name = "strapi-routes"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        records: List[RouteRecord] = []
        for match in _STRAPI_ROUTE.finditer(text):
            method = match.group(1).lower()
            if method not in _STRAPI_METHODS:
                continue
            route = leading_slash(match.group(2))
            names = COLON_PARAM.findall(route)
            if _CATCH_ALL.search(route):
                names.append("path")
            records.append(
                RouteRecord(
                    method=method,
                    raw_path=route,
                    source_file=path,
                    parameters=tuple(path_parameters(names)),
                    anchor=Anchor.ABSOLUTE,
                    description=f"Handler: {match.group(3)}",
                    responses=DECLARED_RESPONSES,
                )
            )
        return records


__all__ = [
    "AppCallExtractor",
    "FileHandlerExtractor",
    "RouterCallExtractor",
    "StrapiRouteExtractor",
    "express_parameters",
]
