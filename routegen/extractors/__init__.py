"""Dialect extractors and the dialect → extractor lookup table."""

from __future__ import annotations

from typing import Dict, Tuple

from ..models import Dialect
from .core import RouteExtractor
from .django import DjangoUrlExtractor
from .dotnet import ControllerExtractor, MinimalApiExtractor
from .node import AppCallExtractor, FileHandlerExtractor, RouterCallExtractor, StrapiRouteExtractor
from .play import PlayRouterExtractor

_JAVASCRIPT: Tuple[RouteExtractor, ...] = (
    FileHandlerExtractor(),
    RouterCallExtractor(),
    AppCallExtractor(),
)
_MINIMAL_API: Tuple[RouteExtractor, ...] = (MinimalApiExtractor(),)
_CONTROLLER: Tuple[RouteExtractor, ...] = (ControllerExtractor(),)

EXTRACTORS: Dict[Dialect, Tuple[RouteExtractor, ...]] = {
    Dialect.NEXTJS_APP: _JAVASCRIPT,
    Dialect.NEXTJS_PAGES: _JAVASCRIPT,
    Dialect.EXPRESS: _JAVASCRIPT,
    Dialect.EXPRESS_SRC: _JAVASCRIPT,
    Dialect.EXPRESS_MODULES: _JAVASCRIPT,
    Dialect.EXPRESS_BACKEND_MODULES: _JAVASCRIPT,
    Dialect.AUTO_DETECTED: _JAVASCRIPT,
    Dialect.STRAPI: _JAVASCRIPT + (StrapiRouteExtractor(),),
    Dialect.DJANGO: (DjangoUrlExtractor(),),
    Dialect.PLAY_FRAMEWORK: (PlayRouterExtractor(),),
    Dialect.DOTNET_MINIMAL_API: _MINIMAL_API,
    Dialect.DOTNET_WEB_API: _CONTROLLER,
}


def extractors_for(dialect: Dialect, path: str) -> Tuple[RouteExtractor, ...]:
    """Return the extractors to run, in order, for a file of ``dialect``."""
    if dialect is Dialect.DOTNET_PROJECT:
        if path.endswith("Controller.cs"):
            return _CONTROLLER
        if path.endswith("Program.cs"):
            return _MINIMAL_API
        return ()
    return EXTRACTORS.get(dialect, ())


__all__ = [
    "AppCallExtractor",
    "ControllerExtractor",
    "DjangoUrlExtractor",
    "EXTRACTORS",
    "FileHandlerExtractor",
    "MinimalApiExtractor",
    "PlayRouterExtractor",
    "RouteExtractor",
    "RouterCallExtractor",
    "StrapiRouteExtractor",
    "extractors_for",
]
