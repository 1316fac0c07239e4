from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    EnvironmentOverrides,
    ServerSettings,
)

__all__ = [
    "AppConfig",
    "AppConfigurationError",
    "EnvironmentOverrides",
    "ServerSettings",
    "apply_environment_overrides",
    "load_app_config",
    "load_environment_overrides",
    "resolve_config_path",
]

logger = logging.getLogger(__name__)


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv("APP_CONFIG_FILE")
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    return path


def load_app_config(config_path: str | None = None) -> AppConfig:
    """Load `config.toml`, falling back to defaults when no file was requested.

    An explicit path (argument or `APP_CONFIG_FILE`) must exist.
    """
    explicit = bool(config_path or os.getenv("APP_CONFIG_FILE"))
    path = resolve_config_path(config_path)
    if not path.exists():
        if explicit:
            raise AppConfigurationError(f"Config file not found: {path}")
        return parse_app_config({}, base_dir=Path.cwd(), source_file=None)
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))


def load_environment_overrides(
    *,
    environ: Mapping[str, str] | None = None,
) -> EnvironmentOverrides:
    """Read `PORT` and `STATIC_ROOT_DIR` from the process environment.

    A blank `PORT` is ignored. Non-numeric text is ignored too, with a
    warning, so the configured port (4173 by default) stays in effect.
    """
    env = environ if environ is not None else os.environ
    raw_port = env.get("PORT", "").strip()
    port = None
    if raw_port:
        try:
            port = int(raw_port, 10)
        except ValueError:
            logger.warning("Ignoring non-numeric PORT value: %r", raw_port)

    raw_root = env.get("STATIC_ROOT_DIR", "").strip()
    root_dir = None
    if raw_root:
        root_dir = str(Path(raw_root).expanduser().resolve())

    return EnvironmentOverrides(port=port, root_dir=root_dir)


def apply_environment_overrides(
    app_config: AppConfig,
    overrides: EnvironmentOverrides,
) -> AppConfig:
    server = app_config.server
    if overrides.port is not None:
        server = replace(server, port=overrides.port)
    if overrides.root_dir is not None:
        server = replace(server, root_dir=overrides.root_dir)
    return replace(app_config, server=server)
