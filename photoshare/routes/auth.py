"""
PhotoShare Backend - Auth Routes
==================================

Tokens are stateless JWTs: logout only acknowledges, the client drops the
token.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from photoshare.auth import get_current_user
from photoshare.database import get_db_session
from photoshare.i18n import translate
from photoshare.models import User
from photoshare.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from photoshare.schemas.common import ErrorResponse, MessageResponse
from photoshare.schemas.user import UserResponse
from photoshare.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        400: {"description": "Password too short", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    user = await auth_service.register(db, payload.username, payload.email, payload.password)
    return RegisterResponse(message=translate("AUTH.REGISTER"), user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Exchange credentials for an access token",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    user, token = await auth_service.login(db, payload.email, payload.password)
    return LoginResponse(
        message=translate("AUTH.LOGIN"),
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(current_user: User = Depends(get_current_user)) -> MessageResponse:
    return MessageResponse(message=translate("AUTH.LOGOUT"))


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
