"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class FeatureStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


class VoteType(str, Enum):
    UP = "up"
    DOWN = "down"

    @property
    def weight(self) -> int:
        """Contribution of one vote of this type to a feature's vote_count."""
        return 1 if self is VoteType.UP else -1


class FeatureSort(str, Enum):
    """List ordering accepted by GET /features."""
    VOTES = "votes"
    NEWEST = "newest"
    OLDEST = "oldest"
