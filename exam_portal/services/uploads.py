"""
Image uploads stored on local disk and served from UPLOAD_URL_PREFIX.
"""
import logging
import os
import uuid
from typing import Tuple

from fastapi import UploadFile

from exam_portal.core.config import settings

logger = logging.getLogger(__name__)

# Stored extension per accepted content type
IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}


def is_allowed_file(filename: str) -> bool:
    """
    Check if file extension is allowed.

    Args:
        filename: Name of file

    Returns:
        True if file extension is allowed, False otherwise
    """
    return get_file_extension(filename) in ALLOWED_EXTENSIONS


def get_file_extension(filename: str) -> str:
    """
    Get file extension.

    Args:
        filename: Name of file

    Returns:
        File extension without dot
    """
    return filename.rsplit(".", 1)[1].lower() if filename and "." in filename else ""


def generate_unique_filename(content_type: str) -> str:
    """Unique name whose extension follows the validated content type."""
    return f"{uuid.uuid4().hex}.{IMAGE_EXTENSIONS[content_type]}"


async def save_image(upload_file: UploadFile) -> Tuple[str, str]:
    """
    Save an uploaded image to disk.

    Args:
        upload_file: Uploaded file

    Returns:
        Tuple of (public url, filename)

    Raises:
        ValueError: If the name or type is not an allowed image, or the file is too large
    """
    content_type = upload_file.content_type
    if content_type not in settings.ALLOWED_IMAGE_TYPES or content_type not in IMAGE_EXTENSIONS:
        raise ValueError("Invalid file type. Only JPEG, PNG, GIF, and WebP are allowed.")

    if not is_allowed_file(upload_file.filename):
        raise ValueError(f"File type not allowed. Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

    content = await upload_file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise ValueError(f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB.")

    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    filename = generate_unique_filename(content_type)
    with open(os.path.join(settings.UPLOAD_DIR, filename), "wb") as f:
        f.write(content)

    url = f"{settings.UPLOAD_URL_PREFIX}/{filename}"
    logger.info(f"File uploaded successfully: {url}")
    return url, filename
