"""Local CDN emulation: files from the storage root with HTTP cache semantics.

Any filesystem problem is reported as 404 so responses never reveal anything
about the layout outside the served files.
"""

import logging
import mimetypes
from dataclasses import dataclass, field
from email.utils import formatdate, parsedate_to_datetime
from pathlib import PurePosixPath
from typing import Optional

from ..core.images import is_fingerprinted
from .storage import LocalStorage

logger = logging.getLogger("recepti.assets")

mimetypes.add_type("image/webp", ".webp")
mimetypes.add_type("image/svg+xml", ".svg")

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"
DEFAULT_CACHE_CONTROL = "public, max-age=86400"


@dataclass
class AssetResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def make_weak_etag(size: int, mtime_ms: float) -> str:
    return f'W/"{size}-{int(mtime_ms)}"'


def cache_control_for(file_name: str) -> str:
    return IMMUTABLE_CACHE_CONTROL if is_fingerprinted(file_name) else DEFAULT_CACHE_CONTROL


def _parse_http_date(value: Optional[str]) -> Optional[float]:
    """Epoch seconds, or None for anything unparseable."""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def not_found() -> AssetResponse:
    return AssetResponse(status_code=404, headers={"Content-Type": "text/plain"}, body=b"Not found")


class AssetServer:
    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def serve(
        self,
        request_path: str,
        if_none_match: Optional[str] = None,
        if_modified_since: Optional[str] = None,
    ) -> AssetResponse:
        file_path = self.storage.resolve(request_path)
        if file_path is None:
            logger.warning(f"Rejected asset path outside root: {request_path!r}")
            return not_found()

        try:
            st = file_path.stat()
        except OSError:
            return not_found()
        if not file_path.is_file():
            return not_found()

        mtime_ms = st.st_mtime_ns / 1_000_000
        etag = make_weak_etag(st.st_size, mtime_ms)
        cache_headers = {
            "ETag": etag,
            "Last-Modified": formatdate(st.st_mtime, usegmt=True),
            "Cache-Control": cache_control_for(PurePosixPath(request_path).name),
        }

        if if_none_match and if_none_match.strip() == etag:
            return AssetResponse(status_code=304, headers=cache_headers)

        # HTTP dates carry whole seconds
        since = _parse_http_date(if_modified_since)
        if since is not None and int(st.st_mtime) <= since:
            return AssetResponse(status_code=304, headers=cache_headers)

        try:
            data = file_path.read_bytes()
        except OSError:
            return not_found()

        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        return AssetResponse(
            status_code=200,
            headers={
                "Content-Type": content_type,
                "Content-Length": str(len(data)),
                **cache_headers,
            },
            body=data,
        )
