"""Project dialect classification."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from .logging import get_logger
from .models import Dialect
from .signature import STRAPI_PACKAGES, ProjectSignature

logger = get_logger("classifier")

Rule = Callable[[ProjectSignature], Optional[Dialect]]
Source = Union[ProjectSignature, str, Path]


def _unsupported(signature: ProjectSignature) -> Optional[Dialect]:
    if signature.unsupported_reason:
        return Dialect.UNSUPPORTED
    return None


def _strapi(signature: ProjectSignature) -> Optional[Dialect]:
    if signature.has("packages/core") and signature.has("lerna.json"):
        return Dialect.STRAPI
    if signature.has("config/server.js") or signature.has("config/server.ts"):
        return Dialect.STRAPI
    if signature.dependencies & STRAPI_PACKAGES:
        return Dialect.STRAPI
    return None


def _play(signature: ProjectSignature) -> Optional[Dialect]:
    if signature.has("build.sbt") and signature.has_play_routers:
        return Dialect.PLAY_FRAMEWORK
    return None


def _django(signature: ProjectSignature) -> Optional[Dialect]:
    return Dialect.DJANGO if signature.django_root is not None else None


def _nextjs(signature: ProjectSignature) -> Optional[Dialect]:
    if signature.has("app/api"):
        return Dialect.NEXTJS_APP
    if signature.has("pages/api"):
        return Dialect.NEXTJS_PAGES
    return None


def _express(signature: ProjectSignature) -> Optional[Dialect]:
    if signature.has("routes"):
        return Dialect.EXPRESS
    if signature.has("src/routes"):
        return Dialect.EXPRESS_SRC
    if "src/modules" in signature.modules_with_routers:
        return Dialect.EXPRESS_MODULES
    if "backend/src/modules" in signature.modules_with_routers:
        return Dialect.EXPRESS_BACKEND_MODULES
    return None


def _auto_detected(signature: ProjectSignature) -> Optional[Dialect]:
    return Dialect.AUTO_DETECTED if signature.auto_targets else None


RULES: Tuple[Rule, ...] = (
    _unsupported,
    _strapi,
    _play,
    _django,
    _nextjs,
    _express,
    _auto_detected,
)


def _as_signature(source: Source) -> ProjectSignature:
    if isinstance(source, ProjectSignature):
        return source
    return ProjectSignature.scan(source)


def classify(source: Source) -> Dialect:
    """Return the first dialect whose rule matches the project at ``source``."""
    signature = _as_signature(source)
    for rule in RULES:
        dialect = rule(signature)
        if dialect is not None:
            if dialect is Dialect.UNSUPPORTED:
                logger.info("Unsupported project type: %s", signature.unsupported_reason)
            return dialect
    return Dialect.UNKNOWN


def classify_dotnet(source: Source) -> Dialect:
    """Classify the ASP.NET Core surface of a project."""
    signature = _as_signature(source)
    if signature.dotnet_entry and signature.dotnet_minimal_api:
        return Dialect.DOTNET_MINIMAL_API
    if signature.controllers:
        return Dialect.DOTNET_WEB_API
    if signature.project_files:
        return Dialect.DOTNET_PROJECT
    return Dialect.UNKNOWN


__all__ = ["classify", "classify_dotnet"]
