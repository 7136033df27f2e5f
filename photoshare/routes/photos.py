"""
PhotoShare Backend - Photo Routes
===================================

Upload is multipart/form-data:
    file         image (JPEG, PNG or WebP, max settings.max_file_size)
    title        optional, defaults to "Untitled"
    description  optional
    is_public    optional, defaults to true
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user, get_current_user_optional
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.schemas.photo import (
    CollectionToggleResponse,
    PhotoListResponse,
    PhotoResponse,
    VisibilityUpdateRequest,
)
from photoshare.services.collection_service import collection_service
from photoshare.services.photo_service import photo_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/photos", tags=["Photos"])


@router.get("", response_model=PhotoListResponse, summary="Public photo feed")
async def list_photos(
    sort: str = Query("latest", pattern="^(latest|popular)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> PhotoListResponse:
    viewer_id = current_user.id if current_user else None
    photos, total = await photo_service.list_photos(db, sort, page, limit, viewer_id)
    return PhotoListResponse(
        photos=photos,
        page=page,
        limit=limit,
        total=total,
        has_more=page * limit < total,
    )


@router.post(
    "",
    status_code=201,
    response_model=PhotoResponse,
    responses={
        400: {"description": "Invalid file type, size or image", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Upload a photo",
)
async def upload_photo(
    file: UploadFile = File(..., description="JPEG, PNG or WebP image"),
    title: Optional[str] = Form(None, max_length=255),
    description: Optional[str] = Form(None, max_length=2000),
    is_public: bool = Form(True),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PhotoResponse:
    content = await file.read()
    logger.info(
        "Upload received from user %s: %s (%d bytes)",
        current_user.id,
        file.filename,
        len(content),
    )
    return await photo_service.create_photo(
        db,
        user_id=current_user.id,
        filename=file.filename or "",
        content=content,
        content_length=file.size,
        title=title,
        description=description,
        is_public=is_public,
    )


@router.get(
    "/{photo_id}",
    response_model=PhotoResponse,
    responses={
        403: {"description": "Private photo", "model": ErrorResponse},
        404: {"description": "Photo not found", "model": ErrorResponse},
    },
    summary="Photo detail",
)
async def get_photo(
    photo_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> PhotoResponse:
    return await photo_service.get_photo(db, photo_id, current_user.id if current_user else None)


@router.patch("/{photo_id}/visibility", response_model=PhotoResponse, summary="Make public or private")
async def update_visibility(
    photo_id: int,
    payload: VisibilityUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> PhotoResponse:
    return await photo_service.update_visibility(db, photo_id, current_user.id, payload.is_public)


@router.delete("/{photo_id}", response_model=MessageResponse, summary="Delete a photo")
async def delete_photo(
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await photo_service.delete_photo(db, photo_id, current_user.id)
    return MessageResponse(message=translate("PHOTO.DELETED"))


@router.post(
    "/{photo_id}/collection",
    response_model=CollectionToggleResponse,
    summary="Save to or remove from my default collection",
)
async def toggle_collection(
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionToggleResponse:
    added = await collection_service.toggle_default(db, current_user.id, photo_id)
    key = "PHOTO.ADDED_TO_COLLECTION" if added else "PHOTO.REMOVED_FROM_COLLECTION"
    return CollectionToggleResponse(added=added, message=translate(key))
