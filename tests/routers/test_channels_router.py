"""
Tests for channel router endpoints.

Tests creating, reading, updating and deleting channels, and subscriptions.
"""

import pytest
from sqlalchemy import func, select

from tests.fixtures.payloads import API, media_file
from vidshare.auth.deps import current_active_user
from vidshare.db.models.video import Video
from vidshare.main import app


def _create(client, name="My Channel", description="All about testing"):
    response = client.post(
        f"{API}/channel/create", json={"name": name, "description": description}
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestChannelsRouter:
    async def test_create_channel(self, test_client, test_user):
        body = _create(test_client)

        assert body["message"] == "Channel created successfully!"
        channel = body["data"]
        assert channel["name"] == "My Channel"
        assert channel["owner_id"] == str(test_user.id)
        assert channel["subscribers"] == []
        assert channel["subscriber_count"] == 0

    async def test_second_channel_conflicts(self, test_client):
        _create(test_client)

        response = test_client.post(f"{API}/channel/create", json={"name": "Another"})

        assert response.status_code == 409
        assert response.json()["error"] == "User already has a channel"

    async def test_blank_name_is_rejected(self, test_client):
        response = test_client.post(f"{API}/channel/create", json={"name": "   "})

        assert response.status_code == 422

    async def test_channel_data_includes_videos(self, test_client, publish):
        channel = _create(test_client)["data"]
        video = publish(title="On my channel")

        response = test_client.get(f"{API}/channel/data/{channel['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == channel["id"]
        assert [v["id"] for v in data["videos"]] == [video["id"]]
        assert data["videos"][0]["channel_id"] == channel["id"]

    async def test_channel_data_not_found(self, test_client):
        response = test_client.get(f"{API}/channel/data/missing")

        assert response.status_code == 404
        assert response.json()["message"] == "Channel not found"

    async def test_update_channel_name_and_banner(self, test_client, media_store):
        channel = _create(test_client)["data"]

        response = test_client.put(
            f"{API}/channel/update/{channel['id']}",
            data={"name": "Renamed"},
            files={"banner": media_file("banner.jpg", "image/jpeg")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Channel updated successfully!"
        assert body["data"]["name"] == "Renamed"
        assert body["data"]["description"] == "All about testing"
        assert media_store.path_for(body["data"]["banner_url"]).exists()

    async def test_update_by_non_owner_is_forbidden(self, test_client, other_user):
        channel = _create(test_client)["data"]
        app.dependency_overrides[current_active_user] = lambda: other_user

        response = test_client.put(
            f"{API}/channel/update/{channel['id']}", data={"name": "Mine now"}
        )

        assert response.status_code == 403

    async def test_delete_channel_deletes_its_videos(self, test_client, publish, db_session):
        channel = _create(test_client)["data"]
        publish()

        response = test_client.delete(f"{API}/channel/delete/{channel['id']}")

        assert response.status_code == 200
        assert test_client.get(f"{API}/channel/data/{channel['id']}").status_code == 404
        count = await db_session.scalar(select(func.count()).select_from(Video))
        assert count == 0


@pytest.mark.asyncio
class TestSubscriptions:
    async def test_subscribe_is_idempotent(self, test_client, test_user, other_user):
        channel = _create(test_client)["data"]
        app.dependency_overrides[current_active_user] = lambda: other_user

        test_client.post(f"{API}/channel/subscribe/{channel['id']}")
        response = test_client.post(f"{API}/channel/subscribe/{channel['id']}")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["subscribers"] == [str(other_user.id)]
        assert data["subscriber_count"] == 1

    async def test_unsubscribe(self, test_client, other_user):
        channel = _create(test_client)["data"]
        app.dependency_overrides[current_active_user] = lambda: other_user
        test_client.post(f"{API}/channel/subscribe/{channel['id']}")

        response = test_client.post(f"{API}/channel/unsubscribe/{channel['id']}")
        again = test_client.post(f"{API}/channel/unsubscribe/{channel['id']}")

        assert response.json()["data"]["subscribers"] == []
        assert again.status_code == 200
        assert again.json()["data"]["subscriber_count"] == 0

    async def test_cannot_subscribe_to_own_channel(self, test_client):
        channel = _create(test_client)["data"]

        response = test_client.post(f"{API}/channel/subscribe/{channel['id']}")

        assert response.status_code == 400
