"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from app_config_schema import AppConfig, AppConfigurationError, ServerSettings


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: Optional[str],
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    server = _parse_server_settings(_section(raw, "server"), base_dir=base_dir)
    return AppConfig(server=server, source_file=source_file)


def _parse_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> ServerSettings:
    root_dir = _as_str(section.get("root_dir", "."), "server.root_dir") or "."
    return ServerSettings(
        host=_as_str(section.get("host", "127.0.0.1"), "server.host"),
        port=_as_int(section.get("port", 4173), "server.port"),
        root_dir=_resolve_path(base_dir, root_dir),
        index_file=_as_str(section.get("index_file", "index.html"), "server.index_file")
        or "index.html",
        content_types=_as_str_table(
            section.get("content_types"),
            "server.content_types",
        ),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_str_table(value: Any, field: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise AppConfigurationError(f"[{field}] must be a table.")
    return {
        str(key): _as_str(item, f"{field}.{key}")
        for key, item in value.items()
    }


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
