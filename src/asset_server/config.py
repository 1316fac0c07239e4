"""Configuration model for the static asset server runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .errors import ServerConfigurationError

DEFAULT_PORT = 4173
DEFAULT_INDEX_FILE = "index.html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

DEFAULT_CONTENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        ".html": "text/html; charset=utf-8",
        ".css": "text/css; charset=utf-8",
        ".js": "application/javascript; charset=utf-8",
        ".json": "application/json; charset=utf-8",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".svg": "image/svg+xml",
    }
)


def build_content_types(extra: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return the read-only extension table, extended by ``extra`` entries.

    Extra entries may only add extensions; redefining a built-in one is an error.
    """
    table = dict(DEFAULT_CONTENT_TYPES)
    for raw_ext, content_type in (extra or {}).items():
        ext = raw_ext.strip().lower()
        if not ext.startswith(".") or len(ext) < 2:
            raise ServerConfigurationError(
                f"Content type extension must start with '.', got: {raw_ext!r}"
            )
        if ext in DEFAULT_CONTENT_TYPES:
            raise ServerConfigurationError(
                f"Built-in content type for {ext} cannot be overridden"
            )
        if not content_type or not content_type.strip():
            raise ServerConfigurationError(f"Content type for {ext} cannot be empty")
        table[ext] = content_type.strip()
    return MappingProxyType(table)


@dataclass(frozen=True)
class StaticServerConfig:
    """Validated, immutable static server configuration built once at startup."""
    root_dir: Path
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    index_file: str = DEFAULT_INDEX_FILE
    content_types: Mapping[str, str] = field(default_factory=lambda: DEFAULT_CONTENT_TYPES)

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("Server host cannot be empty")

        if not 0 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"Server port must be in [0, 65535], got: {self.port}"
            )

        index_name = self.index_file.strip()
        if not index_name or Path(index_name).name != index_name or index_name in (".", ".."):
            raise ServerConfigurationError(
                f"Index file must be a bare file name, got: {self.index_file!r}"
            )

        root = Path(self.root_dir).expanduser()
        if not root.exists():
            raise ServerConfigurationError(f"Root directory not found: {root}")
        if not root.is_dir():
            raise ServerConfigurationError(f"Root path is not a directory: {root}")

        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "root_dir", root.resolve())
        object.__setattr__(self, "index_file", index_name)
        if not isinstance(self.content_types, MappingProxyType):
            object.__setattr__(
                self, "content_types", MappingProxyType(dict(self.content_types))
            )

    @property
    def index_path(self) -> Path:
        return self.root_dir / self.index_file

    @classmethod
    def from_settings(cls, settings) -> "StaticServerConfig":
        root_dir = settings.root_dir.strip() if settings.root_dir else ""
        if not root_dir:
            raise ServerConfigurationError("Root directory cannot be empty")
        return cls(
            root_dir=Path(root_dir),
            host=settings.host,
            port=settings.port,
            index_file=settings.index_file or DEFAULT_INDEX_FILE,
            content_types=build_content_types(settings.content_types),
        )
