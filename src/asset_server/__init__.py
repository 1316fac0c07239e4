"""Static asset server: root-confined path resolution and HTTP serving."""

from .config import DEFAULT_CONTENT_TYPES, DEFAULT_PORT, StaticServerConfig
from .errors import AssetError, MissingIndexError, ServerConfigurationError
from .responder import AssetResponse, StaticAssetHandler, build_response
from .service import StaticAssetServer
from .static_files import Rejected, ensure_index_document, resolve_request_path

__all__ = [
    "AssetError",
    "AssetResponse",
    "DEFAULT_CONTENT_TYPES",
    "DEFAULT_PORT",
    "MissingIndexError",
    "Rejected",
    "ServerConfigurationError",
    "StaticAssetHandler",
    "StaticAssetServer",
    "StaticServerConfig",
    "build_response",
    "ensure_index_document",
    "resolve_request_path",
]
