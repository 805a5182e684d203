"""Extractor for Django ``urls.py`` pattern lists."""

from __future__ import annotations

import re
from typing import List

from ..models import Anchor, RouteRecord
from .core import DECLARED_RESPONSES, IDENTIFIER, path_parameters

# Django does not bind verbs at the URL layer, so every pattern gets all of them.
DJANGO_METHODS = ("get", "post", "put", "patch", "delete")

_PATH_CALL = re.compile(r"\bpath\s*\(\s*['\"]([^'\"]*)['\"]\s*,\s*([^,)]+)")
_CONVERTER = re.compile(rf"<(?:(?:str|int|slug|uuid|path):)?({IDENTIFIER})>")


class DjangoUrlExtractor:
    """``path("<route>", view)`` entries registered for all five verbs."""

    name = "django-urls"

    def extract(self, text: str, path: str) -> List[RouteRecord]:
        records: List[RouteRecord] = []
        for match in _PATH_CALL.finditer(text):
            route = match.group(1)
            if route.endswith("/"):
                route = route[:-1]
            route = "/" + route
            parameters = tuple(path_parameters(_CONVERTER.findall(route)))
            view = match.group(2).strip()
            for method in DJANGO_METHODS:
                records.append(
                    RouteRecord(
                        method=method,
                        raw_path=route,
                        source_file=path,
                        parameters=parameters,
                        anchor=Anchor.ABSOLUTE,
                        description=f"View: {view}" if view else None,
                        responses=DECLARED_RESPONSES,
                    )
                )
        return records


__all__ = ["DJANGO_METHODS", "DjangoUrlExtractor"]
