"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class ServerSettings:
    """Static asset server settings from `[server]`."""
    host: str = "127.0.0.1"
    port: int = 4173
    root_dir: str = ""
    index_file: str = "index.html"
    content_types: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    server: ServerSettings
    source_file: Optional[str]


@dataclass(frozen=True)
class EnvironmentOverrides:
    """Process environment values applied on top of `config.toml`."""
    port: Optional[int]
    root_dir: Optional[str]
