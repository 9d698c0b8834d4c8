"""Upload validation — image type checking by magic bytes.

Uses the `filetype` library so the declared extension and content type
are never trusted on their own.
"""
import logging

import filetype

log = logging.getLogger(__name__)

# Allowed image MIME types -> canonical extension
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def validate_image(content: bytes, filename: str, max_size: int) -> tuple[bool, str]:
    """Validate an uploaded image.

    Returns (True, extension) when the file is an accepted image, or
    (False, reason) otherwise.
    """
    if len(content) == 0:
        return False, "Empty file"
    if len(content) > max_size:
        return False, f"File too large (max {max_size} bytes)"

    kind = filetype.guess(content)
    if kind is None or kind.mime not in ALLOWED_IMAGE_TYPES:
        detected = kind.mime if kind else "unknown"
        log.info(f"Rejected upload {filename!r}: detected type {detected}")
        return False, f"Unsupported file type: {detected}"

    # Stored key uses the detected type, not the client's extension
    return True, ALLOWED_IMAGE_TYPES[kind.mime]
