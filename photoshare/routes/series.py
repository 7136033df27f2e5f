"""
PhotoShare Backend - Series Routes
====================================

A series is an ordered set of the owner's own photos. Positions are dense
(0..n-1) after every add, remove or reorder.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user, get_current_user_optional
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.schemas.series import (
    SeriesCreateRequest,
    SeriesDetailResponse,
    SeriesReorderRequest,
    SeriesResponse,
    SeriesUpdateRequest,
)
from photoshare.services.series_service import series_service

router = APIRouter(prefix="/api/series", tags=["Series"])

_OWNER_RESPONSES = {
    403: {"description": "Not the owner", "model": ErrorResponse},
    404: {"description": "Series not found", "model": ErrorResponse},
}


@router.post("", status_code=201, response_model=SeriesDetailResponse, summary="Create a series")
async def create_series(
    payload: SeriesCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.create_series(db, current_user.id, payload)


@router.get("/me", response_model=List[SeriesResponse], summary="My series")
async def list_my_series(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[SeriesResponse]:
    return await series_service.list_user_series(db, current_user.id)


@router.get(
    "/{series_id}",
    response_model=SeriesDetailResponse,
    responses={
        403: {"description": "Private series", "model": ErrorResponse},
        404: {"description": "Series not found", "model": ErrorResponse},
    },
    summary="Series detail",
)
async def get_series(
    series_id: int,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.get_series(db, series_id, current_user.id if current_user else None)


@router.put("/{series_id}", response_model=SeriesDetailResponse, responses=_OWNER_RESPONSES)
async def update_series(
    series_id: int,
    payload: SeriesUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.update_series(db, series_id, current_user.id, payload)


@router.delete("/{series_id}", response_model=MessageResponse, responses=_OWNER_RESPONSES)
async def delete_series(
    series_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await series_service.delete_series(db, series_id, current_user.id)
    return MessageResponse(message=translate("SERIES.DELETED"))


@router.put(
    "/{series_id}/photos/order",
    response_model=SeriesDetailResponse,
    responses={**_OWNER_RESPONSES, 400: {"description": "Invalid order", "model": ErrorResponse}},
    summary="Reorder photos",
)
async def reorder_photos(
    series_id: int,
    payload: SeriesReorderRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.reorder_photos(db, series_id, current_user.id, payload.orders)


@router.post(
    "/{series_id}/photos/{photo_id}",
    response_model=SeriesDetailResponse,
    responses={**_OWNER_RESPONSES, 409: {"description": "Already in series", "model": ErrorResponse}},
    summary="Append a photo",
)
async def add_photo(
    series_id: int,
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.add_photo(db, series_id, photo_id, current_user.id)


@router.delete(
    "/{series_id}/photos/{photo_id}",
    response_model=SeriesDetailResponse,
    responses=_OWNER_RESPONSES,
    summary="Remove a photo",
)
async def remove_photo(
    series_id: int,
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> SeriesDetailResponse:
    return await series_service.remove_photo(db, series_id, photo_id, current_user.id)
