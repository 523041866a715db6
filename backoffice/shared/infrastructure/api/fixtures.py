"""In-memory announcement source for local development.

Serves the same interface as ``AnnouncementApi`` over a process-local copy of
seed data, so the Announcements page works before a backend exposes
``/admin/announcements``. Enabled with ``announcements.use_fixtures``.
"""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .client import ApiError

logger = logging.getLogger(__name__)

SEED_ANNOUNCEMENTS: List[Dict[str, Any]] = [
    {
        "id": "1",
        "title": "System Maintenance Scheduled",
        "content": (
            "We will be performing scheduled maintenance on Sunday, December 15th from 2:00 AM "
            "to 6:00 AM EST. During this time, the platform will be temporarily unavailable."
        ),
        "type": "maintenance",
        "priority": "high",
        "status": "published",
        "target_audience": "all",
        "start_date": "2024-12-15T02:00:00Z",
        "end_date": "2024-12-15T06:00:00Z",
        "created_at": "2024-12-10T10:00:00Z",
        "updated_at": "2024-12-10T10:00:00Z",
        "created_by": "admin",
        "is_pinned": True,
        "read_count": 1250,
    },
    {
        "id": "2",
        "title": "New Feature: Enhanced Messaging",
        "content": (
            "We're excited to announce our new enhanced messaging feature! Now you can send "
            "voice messages, create group chats, and use emoji reactions."
        ),
        "type": "feature",
        "priority": "medium",
        "status": "published",
        "target_audience": "all",
        "start_date": "2024-12-12T00:00:00Z",
        "created_at": "2024-12-12T09:00:00Z",
        "updated_at": "2024-12-12T09:00:00Z",
        "created_by": "admin",
        "is_pinned": False,
        "read_count": 890,
    },
    {
        "id": "3",
        "title": "Security Update Required",
        "content": (
            "Important: Please update your password to ensure account security. We recommend "
            "using a strong password with at least 8 characters."
        ),
        "type": "security",
        "priority": "critical",
        "status": "published",
        "target_audience": "all",
        "start_date": "2024-12-11T00:00:00Z",
        "created_at": "2024-12-11T14:30:00Z",
        "updated_at": "2024-12-11T14:30:00Z",
        "created_by": "admin",
        "is_pinned": True,
        "read_count": 2100,
    },
    {
        "id": "4",
        "title": "Creator Guidelines Updated",
        "content": (
            "We've updated our creator guidelines to ensure a better experience for everyone. "
            "Please review the new guidelines in your creator dashboard."
        ),
        "type": "info",
        "priority": "medium",
        "status": "published",
        "target_audience": "creators",
        "start_date": "2024-12-10T00:00:00Z",
        "created_at": "2024-12-10T11:15:00Z",
        "updated_at": "2024-12-10T11:15:00Z",
        "created_by": "admin",
        "is_pinned": False,
        "read_count": 450,
    },
    {
        "id": "5",
        "title": "Holiday Schedule Notice",
        "content": (
            "Our support team will have reduced hours during the holiday season. Response "
            "times may be longer than usual."
        ),
        "type": "warning",
        "priority": "low",
        "status": "published",
        "target_audience": "all",
        "start_date": "2024-12-20T00:00:00Z",
        "end_date": "2025-01-05T00:00:00Z",
        "created_at": "2024-12-09T16:45:00Z",
        "updated_at": "2024-12-09T16:45:00Z",
        "created_by": "admin",
        "is_pinned": False,
        "read_count": 320,
    },
]


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class FixtureAnnouncementApi:
    """Announcement CRUD over an in-memory list."""

    def __init__(self, seed: Optional[List[Dict[str, Any]]] = None, created_by: str = "admin") -> None:
        self._items: List[Dict[str, Any]] = copy.deepcopy(SEED_ANNOUNCEMENTS if seed is None else seed)
        self.created_by = created_by
        logger.info(f"Announcements served from fixtures ({len(self._items)} seeded)")

    def _index_of(self, announcement_id: str) -> int:
        for i, item in enumerate(self._items):
            if str(item.get("id")) == str(announcement_id):
                return i
        raise ApiError("Announcement not found", status_code=404)

    async def list_announcements(self) -> Dict[str, Any]:
        return {"success": True, "data": copy.deepcopy(self._items)}

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        timestamp = _now()
        item = {
            "status": "draft",
            "is_pinned": False,
            "read_count": 0,
            "target_audience": "all",
            "start_date": timestamp,
            **data,
            "id": uuid.uuid4().hex[:12],
            "created_at": timestamp,
            "updated_at": timestamp,
            "created_by": self.created_by,
        }
        self._items.append(item)
        return {"success": True, "data": copy.deepcopy(item)}

    async def update(self, announcement_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        index = self._index_of(announcement_id)
        updated = {**self._items[index], **data, "id": self._items[index]["id"], "updated_at": _now()}
        self._items[index] = updated
        return {"success": True, "data": copy.deepcopy(updated)}

    async def delete(self, announcement_id: str) -> Dict[str, Any]:
        del self._items[self._index_of(announcement_id)]
        return {"success": True}
