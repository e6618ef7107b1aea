# tests/api/test_votes_api.py
"""API tests for /api/v1/features/{id}/vote(s)."""
import uuid

import pytest

from tests.fakes import auth_headers


@pytest.fixture
def voter(store):
    return store.add_user(email="voter@example.com", name="Voter")


@pytest.fixture
def feature(store):
    author = store.add_user(email="author@example.com", name="Author")
    return store.add_feature(str(author.id))


class TestCastVote:
    async def test_requires_auth(self, client, feature):
        resp = await client.post(f"/api/v1/features/{feature.id}/vote", json={"type": "up"})
        assert resp.status_code == 401

    async def test_invalid_type(self, client, feature, voter):
        resp = await client.post(
            f"/api/v1/features/{feature.id}/vote", json={"type": "sideways"},
            headers=auth_headers(voter),
        )
        assert resp.status_code == 422

    async def test_upvote(self, client, store, feature, voter):
        resp = await client.post(
            f"/api/v1/features/{feature.id}/vote", json={"type": "up"},
            headers=auth_headers(voter),
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["type"] == "up"
        assert data["featureId"] == feature.id
        assert data["userId"] == str(voter.id)
        assert store.features[feature.id].vote_count == 1

    async def test_double_upvote_is_inert(self, client, store, feature, voter):
        url = f"/api/v1/features/{feature.id}/vote"
        first = await client.post(url, json={"type": "up"}, headers=auth_headers(voter))
        second = await client.post(url, json={"type": "up"}, headers=auth_headers(voter))

        assert second.status_code == 200
        assert second.json()["data"] == first.json()["data"]
        assert store.features[feature.id].vote_count == 1

    async def test_missing_feature(self, client, voter):
        resp = await client.post(
            f"/api/v1/features/{uuid.uuid4()}/vote", json={"type": "up"},
            headers=auth_headers(voter),
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == 2001


class TestRemoveVote:
    async def test_remove(self, client, store, feature, voter):
        url = f"/api/v1/features/{feature.id}/vote"
        await client.post(url, json={"type": "down"}, headers=auth_headers(voter))

        resp = await client.delete(url, headers=auth_headers(voter))

        assert resp.status_code == 200
        assert resp.json()["data"] == {"success": True}
        assert store.features[feature.id].vote_count == 0

    async def test_never_voted(self, client, feature, voter):
        resp = await client.delete(
            f"/api/v1/features/{feature.id}/vote", headers=auth_headers(voter)
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == 3001


class TestMyVote:
    async def test_null_when_not_voted(self, client, feature, voter):
        resp = await client.get(f"/api/v1/features/{feature.id}/vote", headers=auth_headers(voter))
        assert resp.status_code == 200
        assert resp.json()["data"] is None

    async def test_current_vote(self, client, feature, voter):
        url = f"/api/v1/features/{feature.id}/vote"
        await client.post(url, json={"type": "down"}, headers=auth_headers(voter))

        resp = await client.get(url, headers=auth_headers(voter))

        assert resp.json()["data"]["type"] == "down"


class TestVoteStats:
    async def test_public_and_cached_header(self, client, feature):
        resp = await client.get(f"/api/v1/features/{feature.id}/votes")

        assert resp.status_code == 200
        assert resp.json()["data"] == {
            "featureId": feature.id, "upvotes": 0, "downvotes": 0, "total": 0,
        }
        assert resp.headers["cache-control"] == "public, max-age=10"

    async def test_reflects_vote_after_cached_read(self, client, store, feature, voter):
        stats_url = f"/api/v1/features/{feature.id}/votes"
        await client.get(stats_url)  # populate cache

        await client.post(
            f"/api/v1/features/{feature.id}/vote", json={"type": "up"},
            headers=auth_headers(voter),
        )

        data = (await client.get(stats_url)).json()["data"]
        assert (data["upvotes"], data["total"]) == (1, 1)
        feature_data = (await client.get(f"/api/v1/features/{feature.id}")).json()["data"]
        assert feature_data["voteCount"] == data["total"]

    async def test_missing_feature(self, client):
        resp = await client.get(f"/api/v1/features/{uuid.uuid4()}/votes")
        assert resp.status_code == 404
