"""Pydantic schemas for fv_vote requests and responses."""

from pydantic import BaseModel

from src.fv_common.datetime_utils import to_iso
from src.fv_common.enums import VoteType
from src.fv_common.schemas import CamelModel
from src.fv_vote.domain.models import Vote, VoteStats


class CastVoteRequest(BaseModel):
    type: VoteType


class VoteResponse(CamelModel):
    id: str
    feature_id: str
    user_id: str
    type: VoteType
    created_at: str

    @classmethod
    def from_domain(cls, vote: Vote) -> "VoteResponse":
        return cls(
            id=vote.id,
            feature_id=vote.feature_id,
            user_id=vote.user_id,
            type=VoteType(vote.type),
            created_at=to_iso(vote.created_at) or "",
        )


class VoteStatsResponse(CamelModel):
    feature_id: str
    upvotes: int
    downvotes: int
    total: int  # net score: upvotes - downvotes

    @classmethod
    def from_domain(cls, stats: VoteStats) -> "VoteStatsResponse":
        return cls(
            feature_id=stats.feature_id,
            upvotes=stats.upvotes,
            downvotes=stats.downvotes,
            total=stats.total,
        )


class DeleteVoteResponse(CamelModel):
    success: bool
