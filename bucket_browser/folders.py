"""
folders.py — Write paths into the bucket: folder sentinels and uploads.
"""

import logging
import mimetypes
from typing import Optional

from bucket_browser import config
from bucket_browser.errors import InvalidName, UploadFailed
from bucket_browser.paths import child_prefix, object_key, sentinel_key
from bucket_browser.storage import DEFAULT_CONTENT_TYPE, StorageBackend

logger = logging.getLogger(__name__)


def create_folder(backend: StorageBackend, prefix: str, folder_name: Optional[str]) -> str:
    """
    Materialize an empty folder under `prefix` and return its path.

    Object stores have no directories, so a zero-byte sentinel object is
    written inside the new prefix; the next listing of `prefix` then reports
    it as a common prefix.
    """
    # whitespace only decides validity; the key keeps the name as given
    if not (folder_name or "").strip():
        raise InvalidName("Folder name is required")

    folder_path = child_prefix(prefix, folder_name)
    backend.put(sentinel_key(folder_path), b"")
    logger.info("Create folder key=%s bucket=%s", folder_path, backend.bucket)
    return folder_path


def upload_file(
    backend: StorageBackend,
    prefix: str,
    filename: Optional[str],
    data: bytes,
    content_type: Optional[str] = None,
    max_bytes: int = config.MAX_UPLOAD_BYTES,
) -> str:
    """Store `data` as `<prefix><filename>` and return the key."""
    if not filename:
        raise InvalidName("No file provided")

    key = object_key(prefix, filename)
    if len(data) > max_bytes:
        raise UploadFailed(key, ValueError(f"{len(data)} bytes exceeds limit of {max_bytes}"))

    if not content_type or content_type == DEFAULT_CONTENT_TYPE:
        content_type = mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE

    try:
        backend.put(key, data, content_type)
    except Exception as e:
        raise UploadFailed(key, e) from e
    logger.info("Upload object key=%s size=%d bucket=%s", key, len(data), backend.bucket)
    return key
