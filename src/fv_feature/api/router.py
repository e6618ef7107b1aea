"""fv_feature REST endpoints.

GET    /features                      — paginated list (public, cached 60 s)
POST   /features                      — create (auth)
GET    /features/{feature_id}         — single feature with author (public, cached 30 s)
PATCH  /features/{feature_id}/status  — change status (author only)
DELETE /features/{feature_id}         — delete with its votes (author only)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_cache.domain.cache import CacheProtocol, CacheTTL
from src.fv_cache.provider import get_cache
from src.fv_common.database import get_db_session
from src.fv_common.enums import FeatureSort, FeatureStatus
from src.fv_common.response import ApiResponse, success_response
from src.fv_feature.application.schemas import (
    CreateFeatureRequest,
    DeleteFeatureResponse,
    UpdateStatusRequest,
)
from src.fv_feature.application.service import FeatureApplicationService
from src.fv_feature.domain.repository import FeatureRepositoryProtocol
from src.fv_feature.infrastructure.persistence import FeatureRepository
from src.fv_gateway.auth.dependencies import get_current_user, get_user_repository
from src.fv_gateway.user.db_models import UserModel
from src.fv_gateway.user.repository import UserRepositoryProtocol

router = APIRouter(prefix="/features", tags=["features"])


def get_feature_repository() -> FeatureRepositoryProtocol:
    return FeatureRepository()


def get_feature_service(
    repo: Annotated[FeatureRepositoryProtocol, Depends(get_feature_repository)],
    user_repo: Annotated[UserRepositoryProtocol, Depends(get_user_repository)],
    cache: Annotated[CacheProtocol, Depends(get_cache)],
) -> FeatureApplicationService:
    return FeatureApplicationService(repo=repo, user_repo=user_repo, cache=cache)


FeatureService = Annotated[FeatureApplicationService, Depends(get_feature_service)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentUser = Annotated[UserModel, Depends(get_current_user)]


@router.get("")
async def list_features(
    request: Request,
    response: Response,
    service: FeatureService,
    db: DbSession,
    status_filter: FeatureStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    sort: FeatureSort = Query(FeatureSort.NEWEST),
) -> ApiResponse:
    result = await service.list_features(db, status_filter, page, limit, sort)
    response.headers["Cache-Control"] = f"public, max-age={CacheTTL.FEATURES_LIST}"
    return success_response(result.to_payload(), request)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_feature(
    request: Request,
    body: CreateFeatureRequest,
    service: FeatureService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    result = await service.create(db, body.title, body.description, str(current_user.id))
    resp = success_response(result.to_payload(), request)
    resp.message = "Feature created"
    return resp


@router.get("/{feature_id}")
async def get_feature(
    feature_id: str,
    request: Request,
    response: Response,
    service: FeatureService,
    db: DbSession,
) -> ApiResponse:
    result = await service.get_feature(db, feature_id)
    response.headers["Cache-Control"] = f"public, max-age={CacheTTL.FEATURE_BY_ID}"
    return success_response(result.to_payload(), request)


@router.patch("/{feature_id}/status")
async def update_feature_status(
    feature_id: str,
    request: Request,
    body: UpdateStatusRequest,
    service: FeatureService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    result = await service.update_status(db, feature_id, body.status, str(current_user.id))
    return success_response(result.to_payload(), request)


@router.delete("/{feature_id}")
async def delete_feature(
    feature_id: str,
    request: Request,
    service: FeatureService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    success = await service.delete(db, feature_id, str(current_user.id))
    return success_response(DeleteFeatureResponse(success=success).to_payload(), request)
