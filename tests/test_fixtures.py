"""Tests for the in-memory announcement source."""

import pytest

from backoffice.shared.infrastructure.api.client import ApiError
from backoffice.shared.infrastructure.api.fixtures import SEED_ANNOUNCEMENTS, FixtureAnnouncementApi
from backoffice.shared.infrastructure.api.resources import unwrap_records


@pytest.mark.asyncio
async def test__list__seeded_and_enveloped() -> None:
    api = FixtureAnnouncementApi()

    payload = await api.list_announcements()

    assert payload["success"] is True
    assert [a["id"] for a in unwrap_records(payload)] == [a["id"] for a in SEED_ANNOUNCEMENTS]


@pytest.mark.asyncio
async def test__create__fills_defaults_and_appends() -> None:
    api = FixtureAnnouncementApi(seed=[], created_by="ops")

    created = (await api.create({"title": "Hello", "content": "World", "type": "info"}))["data"]
    listed = unwrap_records(await api.list_announcements())

    assert listed == [created]
    assert created["status"] == "draft"
    assert created["is_pinned"] is False
    assert created["read_count"] == 0
    assert created["created_by"] == "ops"
    assert created["id"]


@pytest.mark.asyncio
async def test__update__merges_and_keeps_id() -> None:
    api = FixtureAnnouncementApi()

    updated = (await api.update("2", {"title": "Changed", "id": "hijack"}))["data"]

    assert updated["id"] == "2"
    assert updated["title"] == "Changed"
    assert updated["type"] == "feature"


@pytest.mark.asyncio
async def test__delete__removes_item() -> None:
    api = FixtureAnnouncementApi()

    await api.delete("1")

    assert "1" not in [a["id"] for a in unwrap_records(await api.list_announcements())]


@pytest.mark.asyncio
async def test__unknown_id__404() -> None:
    api = FixtureAnnouncementApi()

    with pytest.raises(ApiError) as exc_info:
        await api.delete("missing")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test__instances_do_not_share_state() -> None:
    first = FixtureAnnouncementApi()
    await first.delete("1")

    second = FixtureAnnouncementApi()

    assert len(unwrap_records(await second.list_announcements())) == len(SEED_ANNOUNCEMENTS)
