"""Tests for fv_common enums and helpers."""

from datetime import UTC, datetime

from src.fv_common.datetime_utils import to_iso
from src.fv_common.enums import FeatureSort, FeatureStatus, VoteType
from src.fv_common.ids import is_uuid
from src.fv_common.schemas import CamelModel


class TestEnums:
    def test_vote_weights(self) -> None:
        assert VoteType.UP.weight == 1
        assert VoteType.DOWN.weight == -1

    def test_values_match_db_constraints(self) -> None:
        assert [s.value for s in FeatureStatus] == ["pending", "in_progress", "completed", "rejected"]
        assert [v.value for v in VoteType] == ["up", "down"]
        assert [s.value for s in FeatureSort] == ["votes", "newest", "oldest"]


class TestHelpers:
    def test_to_iso_assumes_utc_for_naive(self) -> None:
        assert to_iso(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05+00:00"
        assert to_iso(datetime(2026, 1, 2, tzinfo=UTC)) == "2026-01-02T00:00:00+00:00"
        assert to_iso(None) is None

    def test_is_uuid(self) -> None:
        assert is_uuid("1b4e28ba-2fa1-11d2-883f-0016d3cca427")
        assert not is_uuid("not-a-uuid")
        assert not is_uuid("")


class _Sample(CamelModel):
    feature_id: str
    vote_count: int


class TestCamelModel:
    def test_payload_is_camel_case(self) -> None:
        assert _Sample(feature_id="f", vote_count=1).to_payload() == {"featureId": "f", "voteCount": 1}

    def test_accepts_both_spellings(self) -> None:
        assert _Sample.model_validate({"feature_id": "f", "vote_count": 1}).feature_id == "f"
        assert _Sample.model_validate({"featureId": "f", "voteCount": 1}).vote_count == 1
