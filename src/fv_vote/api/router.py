"""fv_vote REST endpoints.

POST   /features/{feature_id}/vote   — cast or change the caller's vote (auth)
DELETE /features/{feature_id}/vote   — remove the caller's vote (auth)
GET    /features/{feature_id}/vote   — the caller's vote, or null (auth)
GET    /features/{feature_id}/votes  — up/down/net counts (public, cached 10 s)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.fv_cache.domain.cache import CacheProtocol, CacheTTL
from src.fv_cache.provider import get_cache
from src.fv_common.database import get_db_session
from src.fv_common.response import ApiResponse, success_response
from src.fv_feature.api.router import get_feature_repository
from src.fv_feature.domain.repository import FeatureRepositoryProtocol
from src.fv_gateway.auth.dependencies import get_current_user
from src.fv_gateway.user.db_models import UserModel
from src.fv_vote.application.schemas import CastVoteRequest, DeleteVoteResponse
from src.fv_vote.application.service import VoteApplicationService
from src.fv_vote.domain.repository import VoteRepositoryProtocol
from src.fv_vote.infrastructure.persistence import VoteRepository

router = APIRouter(prefix="/features", tags=["votes"])


def get_vote_repository() -> VoteRepositoryProtocol:
    return VoteRepository()


def get_vote_service(
    vote_repo: Annotated[VoteRepositoryProtocol, Depends(get_vote_repository)],
    feature_repo: Annotated[FeatureRepositoryProtocol, Depends(get_feature_repository)],
    cache: Annotated[CacheProtocol, Depends(get_cache)],
) -> VoteApplicationService:
    return VoteApplicationService(vote_repo=vote_repo, feature_repo=feature_repo, cache=cache)


VoteService = Annotated[VoteApplicationService, Depends(get_vote_service)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
CurrentUser = Annotated[UserModel, Depends(get_current_user)]


@router.post("/{feature_id}/vote")
async def cast_vote(
    feature_id: str,
    request: Request,
    body: CastVoteRequest,
    service: VoteService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    result = await service.cast_vote(db, feature_id, str(current_user.id), body.type)
    return success_response(result.to_payload(), request)


@router.delete("/{feature_id}/vote")
async def remove_vote(
    feature_id: str,
    request: Request,
    service: VoteService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    success = await service.remove_vote(db, feature_id, str(current_user.id))
    return success_response(DeleteVoteResponse(success=success).to_payload(), request)


@router.get("/{feature_id}/vote")
async def get_my_vote(
    feature_id: str,
    request: Request,
    service: VoteService,
    current_user: CurrentUser,
    db: DbSession,
) -> ApiResponse:
    result = await service.get_user_vote(db, feature_id, str(current_user.id))
    return success_response(result.to_payload() if result else None, request)


@router.get("/{feature_id}/votes")
async def get_vote_stats(
    feature_id: str,
    request: Request,
    response: Response,
    service: VoteService,
    db: DbSession,
) -> ApiResponse:
    result = await service.get_vote_stats(db, feature_id)
    response.headers["Cache-Control"] = f"public, max-age={CacheTTL.VOTE_STATS}"
    return success_response(result.to_payload(), request)
