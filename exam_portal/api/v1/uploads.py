"""
File upload endpoint.
"""
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from exam_portal.core.dependencies import get_current_user
from exam_portal.models.user import User
from exam_portal.schemas.dashboard import UploadResult
from exam_portal.services.uploads import save_image

router = APIRouter()


@router.post("", response_model=UploadResult)
async def upload_image(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Store an image (JPEG, PNG, GIF or WebP) and return its public URL."""
    try:
        url, filename = await save_image(file)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "url": url, "filename": filename}
