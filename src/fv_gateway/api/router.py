"""Auth and user API routers.

POST /auth/register   — create account, returns user + tokens (201)
POST /auth/login      — returns user + tokens
POST /auth/refresh    — new access token from a refresh token
GET  /users/me        — the authenticated user
GET  /users/{user_id} — any user's public profile

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.fv_common.database import get_db_session
from src.fv_common.response import ApiResponse, success_response
from src.fv_gateway.auth.dependencies import get_current_user, get_user_repository
from src.fv_gateway.user.db_models import UserModel
from src.fv_gateway.user.schemas import (
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    UserResponse,
)
from src.fv_gateway.user.repository import UserRepositoryProtocol
from src.fv_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(
    repo: Annotated[UserRepositoryProtocol, Depends(get_user_repository)],
) -> UserService:
    return UserService(repo=repo)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]

_EXPIRES_IN = settings.JWT_EXPIRE_MINUTES * 60


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    service: UserServiceDep,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        user, access_token, refresh_token = await service.register(
            body.email, body.password, body.name, db
        )

    data = AuthResponse(
        user=UserResponse.from_model(user),
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=_EXPIRES_IN,
    )
    resp = success_response(data.to_payload(), request)
    resp.message = "User registered successfully"
    return resp


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User login",
)
async def login(
    request: Request,
    body: LoginRequest,
    service: UserServiceDep,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    user, access_token, refresh_token = await service.login(body.email, body.password, db)

    data = AuthResponse(
        user=UserResponse.from_model(user),
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=_EXPIRES_IN,
    )
    resp = success_response(data.to_payload(), request)
    resp.message = "Login successful"
    return resp


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
    service: UserServiceDep,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    new_access_token = await service.refresh(body.refresh_token, db)

    data = RefreshResponse(access_token=new_access_token, expires_in=_EXPIRES_IN)
    resp = success_response(data.to_payload(), request)
    resp.message = "Token refreshed"
    return resp


@users_router.get("/me", response_model=ApiResponse, summary="Current user")
async def get_me(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    return success_response(UserResponse.from_model(current_user).to_payload(), request)


@users_router.get("/{user_id}", response_model=ApiResponse, summary="User by id")
async def get_user(
    user_id: str,
    request: Request,
    service: UserServiceDep,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    user = await service.get_user(user_id, db)
    return success_response(UserResponse.from_model(user).to_payload(), request)
