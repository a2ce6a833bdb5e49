# bucket_browser/routes/files.py
import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from bucket_browser import config
from bucket_browser.deps import get_backend
from bucket_browser.errors import InvalidName, ObjectNotFound
from bucket_browser.folders import create_folder, upload_file
from bucket_browser.listing import list_entries
from bucket_browser.media import describe, media_entries, media_index
from bucket_browser.models import CreateFolderReq
from bucket_browser.paths import basename, breadcrumbs, normalize_prefix
from bucket_browser.storage import StorageBackend

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/bucket/check")
def check_bucket(backend: StorageBackend = Depends(get_backend)):
    """Create the bucket if it does not exist yet."""
    try:
        backend.ensure_bucket()
        return {"success": True, "bucket": backend.bucket}
    except Exception:
        logger.exception("Error checking bucket=%s", backend.bucket)
        return _error(500, "Failed to check bucket")


@router.get("/files")
def list_files(prefix: str = Query(""), backend: StorageBackend = Depends(get_backend)):
    """List folders and files directly under a prefix."""
    prefix = normalize_prefix(prefix)
    try:
        items = list_entries(backend, prefix)
    except Exception:
        logger.exception("Error listing files prefix=%r", prefix)
        return _error(500, "Failed to list files")
    return {"items": [e.to_json() for e in items], "prefix": prefix}


@router.get("/files/media")
def list_media(
    prefix: str = Query(""),
    path: Optional[str] = Query(None),
    backend: StorageBackend = Depends(get_backend),
):
    """Images and videos under a prefix, in slideshow order.

    With `path`, `index` is that file's position in the slideshow (-1 if absent).
    """
    prefix = normalize_prefix(prefix)
    try:
        entries = list_entries(backend, prefix)
    except Exception:
        logger.exception("Error listing media prefix=%r", prefix)
        return _error(500, "Failed to list files")
    result = {"items": [describe(e) for e in media_entries(entries)], "prefix": prefix}
    if path:
        result["index"] = media_index(entries, path)
    return result


@router.get("/breadcrumbs")
def get_breadcrumbs(prefix: str = Query("")):
    prefix = normalize_prefix(prefix)
    return {"items": [b.model_dump() for b in breadcrumbs(prefix)], "prefix": prefix}


@router.get("/files/preview")
def preview_file(path: Optional[str] = Query(None), backend: StorageBackend = Depends(get_backend)):
    """Stream an object back with its stored content type."""
    if not path:
        return _error(400, "File path is required")
    try:
        info = backend.stat(path)
        body = backend.get(path, config.STREAM_CHUNK_SIZE)
    except ObjectNotFound:
        logger.warning("Missing object path=%r", path)
        return _error(500, "Failed to preview file")
    except Exception:
        logger.exception("Error previewing file path=%r", path)
        return _error(500, "Failed to preview file")
    return StreamingResponse(
        body,
        media_type=info.content_type,
        headers={"Content-Length": str(info.size)},
    )


@router.get("/files/download")
def download_file(path: Optional[str] = Query(None), backend: StorageBackend = Depends(get_backend)):
    """Stream an object back as an attachment."""
    if not path:
        return _error(400, "File path is required")
    try:
        info = backend.stat(path)
        body = backend.get(path, config.STREAM_CHUNK_SIZE)
    except ObjectNotFound:
        logger.warning("Missing object path=%r", path)
        return _error(500, "Failed to download file")
    except Exception:
        logger.exception("Error downloading file path=%r", path)
        return _error(500, "Failed to download file")
    filename = quote(basename(path), safe="")
    return StreamingResponse(
        body,
        media_type="application/octet-stream",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(info.size),
        },
    )


@router.post("/files/upload")
def upload(
    file: Optional[UploadFile] = File(None),
    prefix: str = Form(""),
    backend: StorageBackend = Depends(get_backend),
):
    """Store a multipart upload under the given prefix."""
    if file is None:
        return _error(400, "No file provided")
    prefix = normalize_prefix(prefix)
    # one byte past the limit is enough to detect an oversized upload
    data = file.file.read(config.MAX_UPLOAD_BYTES + 1)
    try:
        path = upload_file(backend, prefix, file.filename, data, file.content_type)
    except InvalidName as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Error uploading file prefix=%r name=%r", prefix, file.filename)
        return _error(500, "Failed to upload file")
    return {"success": True, "path": path}


@router.post("/folders")
def new_folder(req: CreateFolderReq, backend: StorageBackend = Depends(get_backend)):
    prefix = normalize_prefix(req.prefix)
    try:
        path = create_folder(backend, prefix, req.folderName)
    except InvalidName as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Error creating folder prefix=%r name=%r", prefix, req.folderName)
        return _error(500, "Failed to create folder")
    return {"success": True, "path": path}


@router.get("/files/url")
def presigned_url(path: Optional[str] = Query(None), backend: StorageBackend = Depends(get_backend)):
    """Return a time-limited direct download URL."""
    if not path:
        return _error(400, "File path is required")
    try:
        url = backend.presign(path, config.PRESIGN_TTL_SECONDS)
    except Exception:
        logger.exception("Error generating URL path=%r", path)
        return _error(500, "Failed to generate download URL")
    return {"url": url}
