"""Resource families of the admin API.

Each family maps domain operations onto exactly one HTTP call and returns the
decoded response untouched. Payloads are plain dicts; the backend owns their
shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Protocol

from .client import ApiClient


class ReportStatus(str, Enum):
    """Report triage states accepted by the backend."""
    PENDING = "pending"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class UserApi:
    """User account management."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_users(self) -> Any:
        return await self.client.get("/admin/users")

    async def get_user(self, user_id: str) -> Any:
        return await self.client.get(f"/user/{user_id}")

    async def update_user(self, user_id: str, data: Dict[str, Any]) -> Any:
        return await self.client.put(f"/user/{user_id}", json=data)

    async def delete_user(self, user_id: str) -> Any:
        return await self.client.delete(f"/admin/users/{user_id}")

    async def ban_user(self, user_id: str) -> Any:
        return await self.client.post(f"/admin/users/{user_id}/ban")

    async def unban_user(self, user_id: str) -> Any:
        return await self.client.post(f"/admin/users/{user_id}/unban")

    async def get_blocked_users(self, user_id: str) -> Any:
        """Users blocked by ``user_id``."""
        return await self.client.get(f"/user/{user_id}/blocked")

    async def get_user_reports(self, user_id: str) -> Any:
        """Reports filed by or against ``user_id``."""
        return await self.client.get(f"/user/{user_id}/reports")


class CreatorApi:
    """Creator application review."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_pending(self) -> Any:
        return await self.client.get("/admin/creators/pending")

    async def review(self, creator_id: str, approved: bool, notes: Optional[str] = None) -> Any:
        """Approve or reject a creator application.

        Args:
            creator_id: Applicant user id
            approved: True to approve, False to reject
            notes: Optional reviewer notes stored with the decision
        """
        return await self.client.post(
            f"/admin/creators/{creator_id}/approve",
            json={"approved": approved, "notes": notes},
        )


class ReportApi:
    """Abuse report triage."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_reports(self) -> Any:
        return await self.client.get("/reports")

    async def get_report(self, report_id: str) -> Any:
        return await self.client.get(f"/report/{report_id}")

    async def update_status(self, report_id: str, status: ReportStatus | str) -> Any:
        """Move a report to pending, resolved or dismissed.

        Raises:
            ValueError: If ``status`` is not a known report status
        """
        try:
            status = ReportStatus(status)
        except ValueError:
            raise ValueError(
                f"Unsupported report status: {status}. "
                f"Supported: {[s.value for s in ReportStatus]}"
            ) from None
        return await self.client.put(f"/report/{report_id}", json={"status": status.value})

    async def delete_report(self, report_id: str) -> Any:
        return await self.client.delete(f"/report/{report_id}")


class AnnouncementBackend(Protocol):
    """Interface shared by the live and fixture announcement sources."""

    async def list_announcements(self) -> Any: ...

    async def create(self, data: Dict[str, Any]) -> Any: ...

    async def update(self, announcement_id: str, data: Dict[str, Any]) -> Any: ...

    async def delete(self, announcement_id: str) -> Any: ...


class AnnouncementApi:
    """Announcement CRUD against the backend."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_announcements(self) -> Any:
        return await self.client.get("/admin/announcements")

    async def create(self, data: Dict[str, Any]) -> Any:
        return await self.client.post("/admin/announcements", json=data)

    async def update(self, announcement_id: str, data: Dict[str, Any]) -> Any:
        return await self.client.put(f"/admin/announcements/{announcement_id}", json=data)

    async def delete(self, announcement_id: str) -> Any:
        return await self.client.delete(f"/admin/announcements/{announcement_id}")


class AnalyticsApi:
    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def dashboard(self) -> Any:
        """Aggregate counts, user growth series and report type breakdown."""
        return await self.client.get("/analytics/dashboard")

    async def user_stats(self) -> Any:
        return await self.client.get("/analytics/users")

    async def report_stats(self) -> Any:
        return await self.client.get("/analytics/reports")


class SubscriptionApi:
    """Subscription / membership plans and active user subscriptions."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_plans(self) -> Any:
        return await self.client.get("/admin/subscription-plans")

    async def create_plan(self, data: Dict[str, Any]) -> Any:
        return await self.client.post("/admin/subscription-plans", json=data)

    async def update_plan(self, plan_id: str, data: Dict[str, Any]) -> Any:
        return await self.client.put(f"/admin/subscription-plans/{plan_id}", json=data)

    async def delete_plan(self, plan_id: str) -> Any:
        return await self.client.delete(f"/admin/subscription-plans/{plan_id}")

    async def list_subscriptions(self) -> Any:
        return await self.client.get("/admin/subscriptions")

    async def cancel_subscription(self, subscription_id: str) -> Any:
        return await self.client.put(f"/admin/subscriptions/{subscription_id}/cancel", json={})


class BlockApi:
    """Block relationships between two users."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def block(self, blocker_id: str, blocked_id: str) -> Any:
        return await self.client.post("/block", json={"blocker_id": blocker_id, "blocked_id": blocked_id})

    async def unblock(self, blocker_id: str, blocked_id: str) -> Any:
        return await self.client.post("/unblock", json={"blocker_id": blocker_id, "blocked_id": blocked_id})

    async def block_status(self, user_id: str, target_user_id: str) -> Any:
        return await self.client.get(
            "/block-status",
            params={"user_id": user_id, "target_user_id": target_user_id},
        )


class ResourceClient:
    """All resource families over one shared transport."""

    def __init__(self, client: ApiClient, announcements: Optional[AnnouncementBackend] = None) -> None:
        self.client = client
        self.users = UserApi(client)
        self.creators = CreatorApi(client)
        self.reports = ReportApi(client)
        self.announcements: AnnouncementBackend = announcements or AnnouncementApi(client)
        self.analytics = AnalyticsApi(client)
        self.subscriptions = SubscriptionApi(client)
        self.blocks = BlockApi(client)

    async def aclose(self) -> None:
        await self.client.aclose()


def unwrap_records(payload: Any) -> list:
    """Return the list of records in a response.

    Accepts a bare list or the ``{"success": true, "data": [...]}`` envelope;
    anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        if payload.get("success", True):
            return payload["data"]
    return []


def unwrap_object(payload: Any) -> Dict[str, Any]:
    """Return the object in a response, unwrapping a ``data`` envelope."""
    if isinstance(payload, dict):
        inner = payload.get("data")
        if isinstance(inner, dict):
            return inner
        return payload
    return {}
