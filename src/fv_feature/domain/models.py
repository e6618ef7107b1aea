"""Domain models for fv_feature — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class FeatureAuthor:
    id: str
    name: str
    email: str


@dataclass
class Feature:
    id: str
    title: str
    description: str
    status: str                      # FeatureStatus value
    author_id: str
    vote_count: int                  # denormalized: up votes minus down votes
    created_at: datetime
    updated_at: datetime
    author: FeatureAuthor | None = None   # populated by *_with_author reads only


@dataclass
class FeaturePage:
    """One offset-paginated slice of the feature list."""

    items: list[Feature]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.limit - 1) // self.limit if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1
