"""Admin REST API: cache maintenance."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.fv_common.response import ApiResponse, success_response
from src.fv_feature.api.router import FeatureService
from src.fv_gateway.auth.dependencies import get_current_user
from src.fv_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/cache/invalidate")
async def invalidate_feature_cache(
    request: Request,
    service: FeatureService,
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> ApiResponse:
    removed = await service.invalidate_cache()
    return success_response({"removed": removed}, request)
