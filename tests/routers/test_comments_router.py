import pytest

from tests.fixtures.payloads import API
from vidshare.auth.deps import current_active_user
from vidshare.main import app


@pytest.mark.asyncio
class TestCommentsRouter:
    async def test_add_and_list_comments_oldest_first(self, test_client, publish, test_user):
        video = publish()

        first = test_client.post(
            f"{API}/comments/add", json={"videoId": video["id"], "text": "First!"}
        )
        test_client.post(f"{API}/comments/add", json={"videoId": video["id"], "text": "Second"})

        assert first.status_code == 201
        assert first.json()["data"]["owner_id"] == str(test_user.id)
        response = test_client.get(f"{API}/comments/video/{video['id']}")
        assert [c["text"] for c in response.json()["data"]] == ["First!", "Second"]

    async def test_comment_on_unknown_video(self, test_client):
        response = test_client.post(
            f"{API}/comments/add", json={"videoId": "missing", "text": "hello"}
        )

        assert response.status_code == 404

    async def test_blank_comment_is_rejected(self, test_client, publish):
        video = publish()

        response = test_client.post(
            f"{API}/comments/add", json={"videoId": video["id"], "text": "  "}
        )

        assert response.status_code == 422

    async def test_update_own_comment(self, test_client, publish):
        video = publish()
        comment = test_client.post(
            f"{API}/comments/add", json={"videoId": video["id"], "text": "typo"}
        ).json()["data"]

        response = test_client.put(
            f"{API}/comments/update/{comment['id']}", json={"text": "fixed"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["text"] == "fixed"

    async def test_only_author_can_delete(self, test_client, publish, other_user):
        video = publish()
        comment = test_client.post(
            f"{API}/comments/add", json={"videoId": video["id"], "text": "mine"}
        ).json()["data"]
        app.dependency_overrides[current_active_user] = lambda: other_user

        response = test_client.delete(f"{API}/comments/delete/{comment['id']}")

        assert response.status_code == 403
        assert response.json()["error"] == "You can only modify your own comments"

    async def test_delete_comment(self, test_client, publish):
        video = publish()
        comment = test_client.post(
            f"{API}/comments/add", json={"videoId": video["id"], "text": "bye"}
        ).json()["data"]

        response = test_client.delete(f"{API}/comments/delete/{comment['id']}")

        assert response.status_code == 200
        listing = test_client.get(f"{API}/comments/video/{video['id']}")
        assert listing.json()["data"] == []
