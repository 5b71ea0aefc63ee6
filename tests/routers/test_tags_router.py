import pytest

from tests.fixtures.payloads import API


@pytest.mark.asyncio
class TestTagsRouter:
    async def test_create_tag_normalizes_name(self, test_client):
        response = test_client.post(f"{API}/tags/", json={"name": "  Gaming "})

        assert response.status_code == 201
        assert response.json()["data"]["name"] == "gaming"

    async def test_duplicate_tag_conflicts(self, test_client):
        test_client.post(f"{API}/tags/", json={"name": "music"})

        response = test_client.post(f"{API}/tags/", json={"name": "MUSIC"})

        assert response.status_code == 409

    async def test_list_tags_by_name(self, test_client):
        for name in ("zebra", "apple", "mango"):
            test_client.post(f"{API}/tags/", json={"name": name})

        response = test_client.get(f"{API}/tags/")

        assert [tag["name"] for tag in response.json()["data"]] == ["apple", "mango", "zebra"]

    async def test_get_unknown_tag(self, test_client):
        assert test_client.get(f"{API}/tags/missing").status_code == 404

    async def test_videos_for_tag(self, test_client, publish):
        tagged = publish(title="Tagged", tags="howto")
        publish(title="Other")
        tag_id = tagged["tags"][0]["id"]

        response = test_client.get(f"{API}/tags/{tag_id}/videos")

        assert [v["id"] for v in response.json()["data"]] == [tagged["id"]]

    async def test_delete_tag_detaches_it_from_videos(self, test_client, publish):
        video = publish(tags="temporary,keep")
        tag_id = next(t["id"] for t in video["tags"] if t["name"] == "temporary")

        response = test_client.delete(f"{API}/tags/{tag_id}")

        assert response.status_code == 200
        refreshed = test_client.get(f"{API}/videos/videoData/{video['id']}").json()["data"]
        assert [t["name"] for t in refreshed["tags"]] == ["keep"]

    async def test_create_tag_requires_authentication(self, auth_client):
        response = auth_client.post(f"{API}/tags/", json={"name": "anon"})

        assert response.status_code == 401
