"""Configuration loading for routegen (.routegen.yml) and document settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .scanner import load_json_object

CONFIG_FILENAME = ".routegen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class InfoConfig:
    """Overrides for the document ``info`` block."""

    title: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None


@dataclass
class ServerConfig:
    """Overrides for the server URL."""

    host: Optional[str] = None
    scheme: Optional[str] = None
    base_path: Optional[str] = None


@dataclass
class RouteGenConfig:
    """Represents the settings defined in .routegen.yml."""

    root: Path
    info: InfoConfig = field(default_factory=InfoConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    exclude_paths: List[str] = field(default_factory=list)
    workers: int = 1


@dataclass(frozen=True)
class SurfaceDefaults:
    """Fallback document settings for one analysis surface."""

    title: str
    description: str
    version: str
    host: str
    scheme: str
    base_path: str = "/api"


WEB_DEFAULTS = SurfaceDefaults(
    title="API Documentation",
    description="Auto-generated API documentation",
    version="1.0.0",
    host="localhost:3000",
    scheme="http",
)
DOTNET_DEFAULTS = SurfaceDefaults(
    title="ASP.NET Core API",
    description="Auto-generated API documentation",
    version="1.0.0",
    host="localhost:5000",
    scheme="https",
)


@dataclass(frozen=True)
class DocumentSettings:
    """Resolved ``info`` block and server URL for the generated document."""

    title: str
    description: str
    version: str
    server_url: str

    def info(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description, "version": self.version}


def load_config(config_path: Path) -> RouteGenConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return RouteGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    info_data = _as_dict(data.get("info"))
    info = InfoConfig(
        title=_as_str(info_data.get("title")),
        description=_as_str(info_data.get("description")),
        version=_as_str(info_data.get("version")),
    )

    server_data = _as_dict(data.get("server"))
    server = ServerConfig(
        host=_as_str(server_data.get("host")),
        scheme=_as_str(server_data.get("scheme")),
        base_path=_as_str(server_data.get("base_path")),
    )

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        raise ConfigError("workers must be a positive integer")

    return RouteGenConfig(
        root=root,
        info=info,
        server=server,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        workers=workers or 1,
    )


def resolve_settings(
    root: Path,
    config: RouteGenConfig,
    *,
    dotnet: bool = False,
    environ: Mapping[str, str] | None = None,
    host: Optional[str] = None,
    scheme: Optional[str] = None,
) -> DocumentSettings:
    """Resolve document settings: explicit args, env vars, config, manifest, defaults."""
    env = os.environ if environ is None else environ
    defaults = DOTNET_DEFAULTS if dotnet else WEB_DEFAULTS
    manifest = _dotnet_manifest(root) if dotnet else _node_manifest(root)

    def _pick(env_key: str, configured: Optional[str], key: str, default: str) -> str:
        return env.get(env_key) or configured or manifest.get(key) or default

    title = _pick("API_TITLE", config.info.title, "title", defaults.title)
    description = _pick("API_DESCRIPTION", config.info.description, "description", defaults.description)
    version = _pick("API_VERSION", config.info.version, "version", defaults.version)

    resolved_host = host or env.get("API_HOST") or config.server.host or defaults.host
    resolved_scheme = scheme or config.server.scheme or defaults.scheme
    base_path = config.server.base_path if config.server.base_path is not None else defaults.base_path
    return DocumentSettings(
        title=title,
        description=description,
        version=version,
        server_url=f"{resolved_scheme}://{resolved_host}{base_path}",
    )


def _node_manifest(root: Path) -> Dict[str, str]:
    data = load_json_object(root / "package.json")
    return {
        "title": _as_str(data.get("name")) or "",
        "description": _as_str(data.get("description")) or "",
        "version": _as_str(data.get("version")) or "",
    }


def _dotnet_manifest(root: Path) -> Dict[str, str]:
    swagger = _as_dict(load_json_object(root / "appsettings.json").get("Swagger"))
    return {
        "title": _as_str(swagger.get("Title")) or "",
        "description": _as_str(swagger.get("Description")) or "",
        "version": _as_str(swagger.get("Version")) or "",
    }


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DOTNET_DEFAULTS",
    "DocumentSettings",
    "InfoConfig",
    "RouteGenConfig",
    "ServerConfig",
    "WEB_DEFAULTS",
    "load_config",
    "resolve_settings",
]
