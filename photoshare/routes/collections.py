"""
PhotoShare Backend - Collection Routes
========================================

Collections are private to their owner. Every user has one default
collection ("Saved photos") created on first use; it cannot be deleted.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.collection import (
    CollectionCreateRequest,
    CollectionDetailResponse,
    CollectionResponse,
    CollectionUpdateRequest,
)
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.services.collection_service import collection_service

router = APIRouter(prefix="/api/collections", tags=["Collections"])

_OWNER_RESPONSES = {
    403: {"description": "Not the owner", "model": ErrorResponse},
    404: {"description": "Collection not found", "model": ErrorResponse},
}


@router.post("", status_code=201, response_model=CollectionDetailResponse)
async def create_collection(
    payload: CollectionCreateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionDetailResponse:
    return await collection_service.create_collection(db, current_user.id, payload)


@router.get("", response_model=List[CollectionResponse], summary="My collections, default first")
async def list_collections(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[CollectionResponse]:
    return await collection_service.list_collections(db, current_user.id)


@router.get("/{collection_id}", response_model=CollectionDetailResponse, responses=_OWNER_RESPONSES)
async def get_collection(
    collection_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionDetailResponse:
    return await collection_service.get_collection(db, collection_id, current_user.id)


@router.put("/{collection_id}", response_model=CollectionDetailResponse, responses=_OWNER_RESPONSES)
async def update_collection(
    collection_id: int,
    payload: CollectionUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionDetailResponse:
    return await collection_service.update_collection(db, collection_id, current_user.id, payload)


@router.delete(
    "/{collection_id}",
    response_model=MessageResponse,
    responses={**_OWNER_RESPONSES, 400: {"description": "Default collection", "model": ErrorResponse}},
)
async def delete_collection(
    collection_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await collection_service.delete_collection(db, collection_id, current_user.id)
    return MessageResponse(message=translate("COLLECTION.DELETED"))


@router.post(
    "/{collection_id}/photos/{photo_id}",
    response_model=CollectionDetailResponse,
    responses={**_OWNER_RESPONSES, 409: {"description": "Already in collection", "model": ErrorResponse}},
)
async def add_photo(
    collection_id: int,
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionDetailResponse:
    return await collection_service.add_photo(db, collection_id, photo_id, current_user.id)


@router.delete(
    "/{collection_id}/photos/{photo_id}",
    response_model=CollectionDetailResponse,
    responses=_OWNER_RESPONSES,
)
async def remove_photo(
    collection_id: int,
    photo_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CollectionDetailResponse:
    return await collection_service.remove_photo(db, collection_id, photo_id, current_user.id)
