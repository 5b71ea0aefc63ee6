"""
Tests for tag CRUD: lookups, get-or-create and delete.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from vidshare.db.crud.crud_tag import create_tag, delete_tag, get_or_create_tags, get_tags
from vidshare.db.models.tag import Tag
from vidshare.db.models.video import Video


@pytest.mark.asyncio
class TestTagCrud:
    async def test_create_tag_normalizes_to_lowercase(self, db_session):
        result = await create_tag(db_session, Tag(name="  JavaScript "))

        assert result.name == "javascript"

    async def test_duplicate_name_raises_integrity_error(self, db_session):
        await create_tag(db_session, Tag(name="database"))

        with pytest.raises(IntegrityError):
            await create_tag(db_session, Tag(name="DATABASE"))

    async def test_get_tags_by_name_is_case_insensitive(self, db_session):
        await create_tag(db_session, Tag(name="python"))

        result = await get_tags(db_session, name="PYTHON", first=True)

        assert result is not None
        assert result.name == "python"

    async def test_get_tags_ordered_by_name(self, db_session):
        for name in ("zeta", "alpha", "mid"):
            await create_tag(db_session, Tag(name=name))

        result = await get_tags(db_session)

        assert [t.name for t in result] == ["alpha", "mid", "zeta"]

    async def test_get_or_create_reuses_existing(self, db_session):
        existing = await create_tag(db_session, Tag(name="music"))

        tags = await get_or_create_tags(db_session, ["Music", "live", "LIVE", "  "])

        assert [t.name for t in tags] == ["music", "live"]
        assert tags[0].id == existing.id
        assert len(await get_tags(db_session)) == 2

    async def test_get_or_create_with_nothing_usable(self, db_session):
        assert await get_or_create_tags(db_session, [" ", ""]) == []

    async def test_delete_tag_detaches_from_videos(self, db_session):
        video = Video(owner_id="o", title="t", video_url="/media/t.mp4", likes=[])
        video.tags = await get_or_create_tags(db_session, ["gone", "stays"])
        db_session.add(video)
        await db_session.commit()
        gone = await get_tags(db_session, name="gone", first=True)

        await delete_tag(db_session, gone)

        assert await get_tags(db_session, name="gone", first=True) is None
        assert [t.name for t in video.tags] == ["stays"]
