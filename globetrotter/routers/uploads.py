"""Image upload — validates by magic bytes and stores in the object bucket."""

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from loguru import logger

from ..config import settings
from ..dependencies import require_user
from ..models import User
from ..storage import upload_image
from ..utils.file_validation import ALLOWED_IMAGE_TYPES, validate_image


router = APIRouter(tags=["upload"])

_CONTENT_TYPES = {ext: mime for mime, ext in ALLOWED_IMAGE_TYPES.items()}


@router.post("/api/upload")
def api_upload(file: UploadFile | None = File(None), user: User = Depends(require_user)):
    if file is None:
        raise HTTPException(400, "No file provided")

    max_size = settings.max_upload_size_mb * 1024 * 1024
    # Read at most one byte past the limit
    content = file.file.read(max_size + 1)
    ok, detail = validate_image(content, file.filename or "", max_size)
    if not ok:
        raise HTTPException(400, detail)

    try:
        url = upload_image(content, detail, _CONTENT_TYPES[detail])
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Upload failed for user {user.id}: {e}")
        raise HTTPException(500, "Upload failed")
    return {"url": url}
