"""Shape the dashboard analytics payload for metric cards and charts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from backoffice.shared.infrastructure.api.resources import unwrap_object, unwrap_records

logger = logging.getLogger(__name__)

DEFAULT_REPORT_COLOR = "#6b7280"

REPORT_COLORS: Dict[str, str] = {
    "harassment or bullying": "#ef4444",
    "inappropriate content": "#f59e0b",
    "spam or unwanted messages": "#8b5cf6",
    "fake account or impersonation": "#dc2626",
    "violence or threats": "#991b1b",
    "other": DEFAULT_REPORT_COLOR,
    "harassment": "#ef4444",
    "bullying": "#ef4444",
    "inappropriate": "#f59e0b",
    "spam": "#8b5cf6",
    "fake": "#dc2626",
    "impersonation": "#dc2626",
    "violence": "#991b1b",
    "threats": "#991b1b",
}

REPORT_REASON_LABELS: Dict[str, str] = {
    "harassment or bullying": "Harassment/Bullying",
    "inappropriate content": "Inappropriate Content",
    "spam or unwanted messages": "Spam/Messages",
    "fake account or impersonation": "Fake Account",
    "violence or threats": "Violence/Threats",
    "other": "Other",
}


@dataclass
class DashboardSummary:
    total_users: int = 0
    banned_users: int = 0
    total_reports: int = 0
    pending_reports: int = 0
    pending_creators: int = 0
    user_growth: List[Dict[str, Any]] = field(default_factory=list)
    report_types: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def active_users(self) -> int:
        return max(self.total_users - self.banned_users, 0)


def to_int(value: Any) -> int:
    """Lenient integer conversion; anything unparseable counts as 0."""
    if isinstance(value, bool):
        return int(value)
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def report_color(reason: str) -> str:
    return REPORT_COLORS.get(reason.lower(), DEFAULT_REPORT_COLOR)


def format_report_reason(reason: str) -> str:
    return REPORT_REASON_LABELS.get(reason.lower(), reason)


def format_month(value: Any) -> str:
    """Render an ISO month/date as ``Jan 24``; unparseable values pass through."""
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        # Reduced precision such as "2024-01"
        try:
            parsed = datetime.strptime(text, "%Y-%m")
        except ValueError:
            return text
    return parsed.strftime("%b %y")


def summarize_dashboard(analytics_payload: Any, pending_creators_payload: Any = None) -> DashboardSummary:
    """Build the dashboard summary from ``/analytics/dashboard`` and the pending creators list.

    Missing or malformed fields default to zero or empty series, so a partial
    backend response still renders.
    """
    stats = unwrap_object(analytics_payload)

    user_growth = [
        {"month": format_month(item.get("month")), "users": to_int(item.get("new_users"))}
        for item in stats.get("userGrowth") or []
        if isinstance(item, dict)
    ]

    report_types = []
    for item in stats.get("reportTypes") or []:
        if not isinstance(item, dict):
            continue
        reason = str(item.get("reason") or "other")
        report_types.append({
            "name": format_report_reason(reason),
            "value": to_int(item.get("count")),
            "color": report_color(reason),
        })

    summary = DashboardSummary(
        total_users=to_int(stats.get("totalUsers")),
        banned_users=to_int(stats.get("bannedUsers")),
        total_reports=to_int(stats.get("totalReports")),
        pending_reports=to_int(stats.get("pendingReports")),
        pending_creators=len(unwrap_records(pending_creators_payload)),
        user_growth=user_growth,
        report_types=report_types,
    )
    logger.debug(f"Dashboard summary: {summary.total_users} users, {summary.total_reports} reports")
    return summary


def user_overview(users: List[Dict[str, Any]]) -> Dict[str, int]:
    """Counts for the Users page summary cards."""
    return {
        "total": len(users),
        "active": sum(1 for u in users if not u.get("banned")),
        "verified": sum(1 for u in users if u.get("email_verified")),
        "pending_creators": sum(1 for u in users if u.get("role") == "creator" and not u.get("creator_approved")),
    }
