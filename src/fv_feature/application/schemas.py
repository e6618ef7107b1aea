"""Pydantic schemas for fv_feature API requests and responses.

Responses are camelCase on the wire (CamelModel). The same models are what the
service caches: model_dump(mode="json") on the way in, model_validate on a hit.
"""

from pydantic import BaseModel, Field

from src.fv_common.datetime_utils import to_iso
from src.fv_common.enums import FeatureStatus
from src.fv_common.schemas import CamelModel
from src.fv_feature.domain.models import Feature, FeatureAuthor, FeaturePage


class CreateFeatureRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)


class UpdateStatusRequest(BaseModel):
    status: FeatureStatus


class AuthorResponse(CamelModel):
    id: str
    name: str
    email: str

    @classmethod
    def from_domain(cls, author: FeatureAuthor) -> "AuthorResponse":
        return cls(id=author.id, name=author.name, email=author.email)


class FeatureResponse(CamelModel):
    id: str
    title: str
    description: str
    status: FeatureStatus
    author_id: str
    vote_count: int
    created_at: str
    updated_at: str
    author: AuthorResponse | None = None

    @classmethod
    def from_domain(cls, feature: Feature) -> "FeatureResponse":
        return cls(
            id=feature.id,
            title=feature.title,
            description=feature.description,
            status=FeatureStatus(feature.status),
            author_id=feature.author_id,
            vote_count=feature.vote_count,
            created_at=to_iso(feature.created_at) or "",
            updated_at=to_iso(feature.updated_at) or "",
            author=AuthorResponse.from_domain(feature.author) if feature.author else None,
        )


class FeatureListResponse(CamelModel):
    data: list[FeatureResponse]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_domain(cls, page: FeaturePage) -> "FeatureListResponse":
        return cls(
            data=[FeatureResponse.from_domain(f) for f in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_prev_page=page.has_prev_page,
        )


class DeleteFeatureResponse(CamelModel):
    success: bool
