"""Domain models for fv_vote — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Vote:
    id: str
    feature_id: str
    user_id: str
    type: str                # VoteType value: "up" | "down"
    created_at: datetime
    updated_at: datetime


@dataclass
class VoteStats:
    feature_id: str
    upvotes: int = 0
    downvotes: int = 0

    @property
    def total(self) -> int:
        """Net score (upvotes - downvotes), same formula as Feature.vote_count."""
        return self.upvotes - self.downvotes
