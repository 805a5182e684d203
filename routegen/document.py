"""OpenAPI document assembly and output helpers."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import DocumentSettings
from .models import Dialect, Operation, serialize_paths

OPENAPI_VERSION = "3.0.0"

_FOLDER_TYPES: Dict[Dialect, str] = {
    Dialect.EXPRESS_BACKEND_MODULES: "backend",
    Dialect.NEXTJS_APP: "frontend",
    Dialect.NEXTJS_PAGES: "frontend",
    Dialect.EXPRESS: "api",
    Dialect.EXPRESS_SRC: "api",
    Dialect.DJANGO: "api",
    Dialect.PLAY_FRAMEWORK: "api",
}


def build_document(
    paths: Mapping[str, Mapping[str, Operation]], settings: DocumentSettings
) -> Dict[str, Any]:
    """Wrap an aggregated path map in the OpenAPI envelope."""
    return {
        "openapi": OPENAPI_VERSION,
        "info": settings.info(),
        "servers": [{"url": settings.server_url}],
        "paths": serialize_paths(paths),
        "components": {"schemas": {}},
    }


def render_document(document: Mapping[str, Any]) -> str:
    return json.dumps(document, indent=2)


def write_document(document: Mapping[str, Any], output: Path) -> Path:
    """Write ``document`` as JSON and return the resolved output path."""
    output = output.expanduser()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_document(document), encoding="utf-8")
    return output


def folder_type(dialect: Dialect) -> str:
    if dialect.is_dotnet:
        return "dotnet"
    return _FOLDER_TYPES.get(dialect, "unknown")


def default_output_name(root: Path, dialect: Dialect, today: Optional[date] = None) -> str:
    """Return ``swagger-output-<project>-<folder>-<date>.json`` for a run."""
    stamp = (today or date.today()).isoformat()
    return f"swagger-output-{root.resolve().name}-{folder_type(dialect)}-{stamp}.json"


__all__ = [
    "OPENAPI_VERSION",
    "build_document",
    "default_output_name",
    "folder_type",
    "render_document",
    "write_document",
]
