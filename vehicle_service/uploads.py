"""
Local disk storage for uploaded images.

Stored paths look like ``uploads/<folder>/<file>`` and are served back by the
static mount at ``/uploads``.
"""
import logging
import os
import re
import uuid
from typing import Iterable, List, Optional

from fastapi import HTTPException, UploadFile, status

from vehicle_service.config import get_settings

logger = logging.getLogger(__name__)

URL_PREFIX = "uploads"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
CHUNK_SIZE = 64 * 1024


def _bad_upload(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _safe_name(filename: str) -> str:
    name = os.path.basename(filename or "")
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name)
    return f"{uuid.uuid4().hex}-{name}"


def disk_path(stored_path: str) -> str:
    """Map a stored ``uploads/...`` path onto the configured upload directory."""
    relative = stored_path
    if relative.startswith(URL_PREFIX + "/"):
        relative = relative[len(URL_PREFIX) + 1:]
    return os.path.join(get_settings().upload_dir, *relative.split("/"))


def resolve_upload(relative: str) -> Optional[str]:
    """Disk path of a served upload, or None if it is missing or escapes the upload dir."""
    root = os.path.realpath(get_settings().upload_dir)
    target = os.path.realpath(os.path.join(root, *relative.split("/")))
    if not target.startswith(root + os.sep) or not os.path.isfile(target):
        return None
    return target


def save_upload(file: UploadFile, folder: str) -> str:
    """
    Write one image to ``<upload_dir>/<folder>`` and return its stored path.

    Only jpg, jpeg and png files up to the configured size are accepted.
    """
    settings = get_settings()
    ext = os.path.splitext(file.filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise _bad_upload("Only image files are allowed (jpg, jpeg, png)")

    name = _safe_name(file.filename)
    target_dir = os.path.join(settings.upload_dir, folder)
    os.makedirs(target_dir, exist_ok=True)
    target = os.path.join(target_dir, name)

    written = 0
    with open(target, "wb") as out:
        while True:
            chunk = file.file.read(CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > settings.max_upload_size:
                break
            out.write(chunk)

    if written > settings.max_upload_size:
        os.remove(target)
        raise _bad_upload(
            f"File {file.filename} exceeds the {settings.max_upload_size // (1024 * 1024)}MB limit"
        )

    logger.debug("Saved upload %s (%d bytes)", target, written)
    return f"{URL_PREFIX}/{folder}/{name}"


def save_uploads(files: Optional[List[UploadFile]], folder: str) -> List[str]:
    """Save several images; anything already written is removed if one fails."""
    settings = get_settings()
    files = [f for f in files or [] if f.filename]
    if len(files) > settings.max_photos:
        raise _bad_upload(f"A maximum of {settings.max_photos} photos is allowed")

    saved: List[str] = []
    try:
        for file in files:
            saved.append(save_upload(file, folder))
    except HTTPException:
        delete_files(saved)
        raise
    return saved


def delete_files(paths: Iterable[Optional[str]]) -> None:
    """Best-effort removal of stored uploads."""
    for path in paths:
        if not path or path.startswith("http"):
            continue
        try:
            os.remove(disk_path(path))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete upload %s: %s", path, e)


def public_url(path: Optional[str]) -> Optional[str]:
    """Rewrite a stored path to an absolute URL."""
    if not path or path.startswith("http"):
        return path
    base = get_settings().public_base_url.rstrip("/")
    return f"{base}/{path.lstrip('/')}"
