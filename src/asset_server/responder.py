"""Turn path resolutions into response descriptors for the HTTP transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from .config import DEFAULT_CONTENT_TYPES, TEXT_CONTENT_TYPE, StaticServerConfig
from .errors import AssetError
from .static_files import (
    FileReader,
    Rejected,
    Resolution,
    guess_content_type,
    names_directory,
    read_file_bytes,
    resolve_request_path,
)

_ERROR_RESPONSES = {
    AssetError.OUT_OF_BOUNDS: (400, b"Bad request"),
    AssetError.NOT_FOUND: (404, b"Not found"),
}


@dataclass(frozen=True)
class AssetResponse:
    """Status, headers, and body handed back to the transport."""
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


def error_response(kind: AssetError) -> AssetResponse:
    status_code, body = _ERROR_RESPONSES[kind]
    return AssetResponse(
        status_code=status_code,
        headers={"Content-Type": TEXT_CONTENT_TYPE},
        body=body,
    )


def build_response(
    resolution: Resolution,
    *,
    read: FileReader = read_file_bytes,
    content_types: Mapping[str, str] = DEFAULT_CONTENT_TYPES,
) -> AssetResponse:
    """Read the resolved file and describe the response.

    Every read failure collapses to a plain 404 so clients cannot tell a
    missing file from an unreadable one.
    """
    if isinstance(resolution, Rejected):
        return error_response(resolution.reason)

    try:
        body = read(resolution)
    except Exception:
        return error_response(AssetError.NOT_FOUND)

    return AssetResponse(
        status_code=200,
        headers={"Content-Type": guess_content_type(resolution, content_types)},
        body=bytes(body),
    )


class StaticAssetHandler:
    """Request pipeline bound to one immutable server configuration."""

    def __init__(
        self,
        config: StaticServerConfig,
        read: Optional[FileReader] = None,
    ):
        self._config = config
        self._read = read or read_file_bytes

    def resolve(self, raw_path: Optional[str]) -> Resolution:
        return resolve_request_path(
            raw_path,
            self._config.root_dir,
            index_file=self._config.index_file,
        )

    def handle(self, raw_path: Optional[str]) -> AssetResponse:
        resolution = self.resolve(raw_path)
        # "/style.css/" names a directory; files are never served under it.
        if not isinstance(resolution, Rejected) and names_directory(raw_path):
            return error_response(AssetError.NOT_FOUND)
        return build_response(
            resolution,
            read=self._read,
            content_types=self._config.content_types,
        )
