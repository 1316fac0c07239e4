"""Safe static-file resolution and content-type helpers for served assets."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional, Union

from .config import DEFAULT_CONTENT_TYPE, DEFAULT_CONTENT_TYPES, DEFAULT_INDEX_FILE
from .errors import AssetError, MissingIndexError


@dataclass(frozen=True)
class Rejected:
    """A request path that escapes the root directory."""
    reason: AssetError = field(default=AssetError.OUT_OF_BOUNDS, init=False)


Resolution = Union[Path, Rejected]
FileReader = Callable[[Path], bytes]


def read_file_bytes(path: Path) -> bytes:
    """Read a whole file into memory; raises on any failure."""
    with open(path, "rb") as fh:
        return fh.read()


def normalize_request_path(raw_path: Optional[str]) -> str:
    """Drop the query string and fragment; empty input becomes ``/``."""
    clean = (raw_path or "").split("?", 1)[0]
    return clean.split("#", 1)[0] or "/"


def names_directory(raw_path: Optional[str]) -> bool:
    """True when the request path ends in a separator, other than the bare root."""
    request_path = normalize_request_path(raw_path)
    return request_path != "/" and request_path.endswith("/")


def resolve_request_path(
    raw_path: Optional[str],
    root: Path,
    *,
    index_file: str = DEFAULT_INDEX_FILE,
) -> Resolution:
    """Resolve an untrusted request path to an absolute path confined to ``root``.

    Traversal segments are collapsed lexically before the containment check,
    and containment compares path components, so ``/srv/appSECRET`` is never
    accepted for a root of ``/srv/app``. The returned path may not exist.
    """
    root = Path(os.path.normpath(os.path.abspath(root)))
    request_path = normalize_request_path(raw_path)
    if request_path == "/":
        return root / index_file

    candidate = Path(os.path.normpath(os.path.join(root, request_path.lstrip("/"))))
    if candidate != root and root not in candidate.parents:
        return Rejected()

    return candidate


def file_extension(path: Path) -> str:
    # Dotfiles such as ".env" have no extension.
    return os.path.splitext(path.name)[1].lower()


def guess_content_type(
    path: Path,
    content_types: Mapping[str, str] = DEFAULT_CONTENT_TYPES,
) -> str:
    """Look up the content type for ``path`` by its lowercased extension."""
    return content_types.get(file_extension(path), DEFAULT_CONTENT_TYPE)


def ensure_index_document(
    root: Path,
    *,
    index_file: str = DEFAULT_INDEX_FILE,
    read: FileReader = read_file_bytes,
) -> Path:
    """Verify the default document is readable before serving starts."""
    index_path = Path(root) / index_file
    try:
        read(index_path)
    except Exception as error:
        raise MissingIndexError(f"Missing {index_file} at {index_path}") from error
    return index_path
