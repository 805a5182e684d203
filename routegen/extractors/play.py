"""Extractor for Play Framework SIRD routers (``*Router.scala``)."""

from __future__ import annotations

import re
from typing import List

from ..models import Anchor, ParameterDescriptor, RouteRecord
from .core import DECLARED_RESPONSES, IDENTIFIER, leading_slash, path_parameters, query_parameter

_CASE = re.compile(
    r"case\s+(GET|POST|PUT|DELETE|PATCH)\s*\(\s*p\"([^\"]+)\""
    r"((?:\s*[?&]\s*q(?:_o)?\"[^\"]*\")*)"
    r"\s*\)\s*=>\s*([^\n]+)"
)
_QUERY = re.compile(r"(q_o|q)\"([^\"=]+)=\$[^\"]*\"")
_BINDING = re.compile(rf"\$({IDENTIFIER})")


class PlayRouterExtractor:
    """``case VERB(p"/path/$id" ? q_o"page=$page") => controller.action`` lines."""

    name = "play-router"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        records: List[RouteRecord] = []
        for match in _CASE.finditer(text):
            method = match.group(1).lower()
            pattern = leading_slash(match.group(2))
            parameters: List[ParameterDescriptor] = path_parameters(_BINDING.findall(pattern))
            for kind, name in _QUERY.findall(match.group(3)):
                parameters.append(query_parameter(name, required=kind == "q"))
            records.append(
                RouteRecord(
                    method=method,
                    raw_path=pattern,
                    source_file=path,
                    parameters=tuple(parameters),
                    anchor=Anchor.ABSOLUTE,
                    description=f"Controller: {match.group(4).strip()}",
                    responses=DECLARED_RESPONSES,
                )
            )
        return records


__all__ = ["PlayRouterExtractor"]
