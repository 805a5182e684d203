"""Core data models shared across routegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

HTTP_METHODS: Tuple[str, ...] = ("get", "post", "put", "delete", "patch")


class Dialect(str, Enum):
    """Source-framework convention selected for a run."""

    NEXTJS_APP = "nextjs-app"
    NEXTJS_PAGES = "nextjs-pages"
    EXPRESS = "express"
    EXPRESS_SRC = "express-src"
    EXPRESS_MODULES = "express-modules"
    EXPRESS_BACKEND_MODULES = "express-backend-modules"
    DJANGO = "django"
    PLAY_FRAMEWORK = "play-framework"
    STRAPI = "strapi"
    AUTO_DETECTED = "auto-detected"
    DOTNET_WEB_API = "dotnet-web-api"
    DOTNET_MINIMAL_API = "dotnet-minimal-api"
    DOTNET_PROJECT = "dotnet-project"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"

    @property
    def is_supported(self) -> bool:
        return self not in (Dialect.UNSUPPORTED, Dialect.UNKNOWN)

    @property
    def is_dotnet(self) -> bool:
        return self.value.startswith("dotnet-")


class Anchor(str, Enum):
    """How a record's raw path combines with its file's base path."""

    FILE = "file"
    ROUTER = "router"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single operation parameter hint."""

    name: str
    location: str
    required: bool = False
    schema_type: str = "string"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "in": self.location,
            "required": self.required,
            "schema": {"type": self.schema_type},
        }


BODY_PARAMETER = ParameterDescriptor(name="body", location="body", required=True, schema_type="object")


@dataclass(frozen=True)
class RouteRecord:
    """One extracted, not-yet-normalized route fragment."""

    method: str
    raw_path: str
    source_file: str
    parameters: Tuple[ParameterDescriptor, ...] = ()
    anchor: Anchor = Anchor.ABSOLUTE
    summary: Optional[str] = None
    description: Optional[str] = None
    responses: Tuple[Tuple[str, str], ...] = ()


@dataclass
class Operation:
    """OpenAPI operation produced for a (path, method) pair."""

    summary: str
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    responses: Dict[str, str] = field(default_factory=dict)
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"summary": self.summary}
        if self.description:
            payload["description"] = self.description
        payload["parameters"] = [param.to_dict() for param in self.parameters]
        payload["responses"] = {
            status: {"description": text} for status, text in self.responses.items()
        }
        return payload


AggregatedMap = Dict[str, Dict[str, Operation]]


@dataclass(frozen=True)
class CandidateFile:
    """A discovered file; its content is read on demand."""

    path: Path
    relative: str

    def read(self) -> str:
        return self.path.read_text(encoding="utf-8", errors="ignore")


def serialize_paths(paths: Mapping[str, Mapping[str, Operation]]) -> Dict[str, Dict[str, Any]]:
    """Convert an aggregated map into plain JSON-ready dictionaries."""
    return {
        template: {method: operation.to_dict() for method, operation in methods.items()}
        for template, methods in paths.items()
    }
