"""Error kinds surfaced by path resolution, asset reads, and startup checks."""

from __future__ import annotations

from enum import Enum


class AssetError(Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    NOT_FOUND = "not_found"
    STARTUP_MISSING_INDEX = "startup_missing_index"


class ServerConfigurationError(Exception):
    """Raised when static server configuration is invalid."""


class MissingIndexError(ServerConfigurationError):
    """Raised at startup when the default document cannot be read."""

    kind = AssetError.STARTUP_MISSING_INDEX
