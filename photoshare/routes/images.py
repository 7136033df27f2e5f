"""
PhotoShare Backend - Image Routes
===================================

Streams stored originals and thumbnails. Visibility is checked on every
request, so a private or deleted photo's bytes are never served to others.
"""

import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user_optional
from photoshare.database import get_db_session
from photoshare.models import User
from photoshare.services.access import get_visible_photo
from photoshare.services.file_service import file_service

router = APIRouter(prefix="/api/images", tags=["Images"])


def _file_response(key: str) -> FileResponse:
    path = file_service.resolve_path(key)
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(
        path,
        media_type=media_type,
        headers={"Cache-Control": "private, max-age=3600"},
    )


@router.get("/thumbnails/{photo_id}", summary="Photo thumbnail")
async def get_thumbnail(
    photo_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> FileResponse:
    photo = await get_visible_photo(db, photo_id, current_user.id if current_user else None)
    return _file_response(photo.thumbnail_key)


@router.get("/{photo_id}", summary="Full-size photo")
async def get_image(
    photo_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> FileResponse:
    photo = await get_visible_photo(db, photo_id, current_user.id if current_user else None)
    return _file_response(photo.image_key)
