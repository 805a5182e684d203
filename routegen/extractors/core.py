"""Shared extraction helpers."""

from __future__ import annotations

import re
from typing import Iterable, List, Protocol, Sequence, Tuple

from ..models import ParameterDescriptor, RouteRecord

Responses = Tuple[Tuple[str, str], ...]

_STATUS_TEXT = {
    "200": "Success",
    "400": "Bad Request",
    "401": "Unauthorized",
    "403": "Forbidden",
    "404": "Not Found",
    "500": "Internal Server Error",
}


def responses(*codes: str) -> Responses:
    """Build a response profile from status codes."""
    return tuple((code, _STATUS_TEXT[code]) for code in codes)


HANDLER_RESPONSES = responses("200", "400", "500")
ROUTER_RESPONSES = responses("200", "400", "401", "404", "500")
DECLARED_RESPONSES = responses("200", "400", "401", "403", "404", "500")
MINIMAL_API_RESPONSES = responses("200", "400", "404", "500")

IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
COLON_PARAM = re.compile(rf"(?<![\w{{]):({IDENTIFIER})")
BRACE_PARAM = re.compile(rf"\{{\*{{0,2}}({IDENTIFIER})\??(?::[^}}]*)?\}}")


class RouteExtractor(Protocol):
    """Contract for extractors turning file text into route records."""

    name: str

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        ...


def path_parameters(names: Iterable[str]) -> List[ParameterDescriptor]:
    """Return required string path parameters, one per distinct name."""
    return unique([ParameterDescriptor(name=name, location="path", required=True) for name in names])


def query_parameter(name: str, required: bool = False) -> ParameterDescriptor:
    return ParameterDescriptor(name=name, location="query", required=required)


def unique(parameters: Sequence[ParameterDescriptor]) -> List[ParameterDescriptor]:
    """Drop parameters whose name was already seen, keeping the first."""
    seen = set()
    result: List[ParameterDescriptor] = []
    for parameter in parameters:
        if parameter.name in seen:
            continue
        seen.add(parameter.name)
        result.append(parameter)
    return result


def leading_slash(path: str) -> str:
    return path if path.startswith("/") else "/" + path


__all__ = [
    "BRACE_PARAM",
    "COLON_PARAM",
    "DECLARED_RESPONSES",
    "HANDLER_RESPONSES",
    "IDENTIFIER",
    "MINIMAL_API_RESPONSES",
    "ROUTER_RESPONSES",
    "RouteExtractor",
    "leading_slash",
    "path_parameters",
    "query_parameter",
    "responses",
    "unique",
]
