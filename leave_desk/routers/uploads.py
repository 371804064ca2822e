from pathlib import Path
from tempfile import SpooledTemporaryFile
import logging
import os

import anyio
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse, RedirectResponse

from ..core.config import Settings, get_settings
from ..core.current_user import get_current_user
from ..core.errors import NotFoundError, PayloadTooLargeError, ValidationError
from ..core.storage import get_presigned_get_url, is_object_storage, upload_fileobj
from ..core.storage_keys import attachment_key
from ..models.user import User
from ..schemas.upload import UploadOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5MB
ALLOW_EXT = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".pdf"}


def _is_allowed_type(content_type: str) -> bool:
    return content_type.startswith("image/") or content_type == "application/pdf"


@router.post("/attachments")
async def upload_attachment(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    """Store a leave attachment or profile photo and return the url to reference it by."""
    content_type = file.content_type or "application/octet-stream"
    if not _is_allowed_type(content_type):
        raise ValidationError("Only images and PDF files are allowed")

    filename = file.filename or "attachment.bin"
    _, ext = os.path.splitext(filename.lower())
    if ext not in ALLOW_EXT:
        raise ValidationError("Unsupported file type")

    spooled = SpooledTemporaryFile(max_size=2 * 1024 * 1024)
    size = 0
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        if size > MAX_UPLOAD_BYTES:
            raise PayloadTooLargeError("File too large (max 5MB)")
        spooled.write(chunk)
    spooled.seek(0)

    key = attachment_key(user_id=user.id, filename=filename)

    if is_object_storage(settings):
        await anyio.to_thread.run_sync(
            lambda: upload_fileobj(settings, fileobj=spooled, key=key, content_type=content_type)
        )
    else:
        root = Path(settings.local_upload_root)
        target_path = root / key
        target_path.parent.mkdir(parents=True, exist_ok=True)

        def _write_file():
            spooled.seek(0)
            with open(target_path, "wb") as f:
                f.write(spooled.read())

        await anyio.to_thread.run_sync(_write_file)

    logger.info("Upload stored: key=%s size=%s user=%s", key, size, user.id)
    # served back through this API so private buckets still work
    out = UploadOut(key=key, url=f"/uploads/{key}", content_type=content_type, size=size)
    return {"success": True, **out.model_dump(by_alias=True)}


@router.get("/{key:path}")
def serve_upload(key: str, settings: Settings = Depends(get_settings)):
    if ".." in key:
        raise ValidationError("Invalid path")
    if is_object_storage(settings):
        return RedirectResponse(get_presigned_get_url(settings, key=key, expires_in=600))
    root = Path(settings.local_upload_root).resolve()
    path = (root / key).resolve()
    if not path.is_relative_to(root):
        raise ValidationError("Invalid path")
    if not path.is_file():
        raise NotFoundError("File not found")
    return FileResponse(str(path))
