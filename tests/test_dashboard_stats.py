"""Tests for dashboard analytics shaping."""

from backoffice.shared.domain.analytics.dashboard_stats import (
    DEFAULT_REPORT_COLOR,
    format_month,
    format_report_reason,
    report_color,
    summarize_dashboard,
    to_int,
    user_overview,
)

ANALYTICS = {
    "success": True,
    "data": {
        "totalUsers": "120",
        "bannedUsers": 4,
        "totalReports": 9,
        "pendingReports": 3,
        "userGrowth": [
            {"month": "2024-01-01T00:00:00Z", "new_users": "12"},
            {"month": "2024-02-01", "new_users": 30},
        ],
        "reportTypes": [
            {"reason": "Harassment or Bullying", "count": "5"},
            {"reason": "spam", "count": 2},
            {"reason": "Something new", "count": 2},
        ],
    },
}


def test__summarize__envelope_payload() -> None:
    summary = summarize_dashboard(ANALYTICS, {"success": True, "data": [{"id": 1}, {"id": 2}]})

    assert summary.total_users == 120
    assert summary.banned_users == 4
    assert summary.active_users == 116
    assert summary.total_reports == 9
    assert summary.pending_reports == 3
    assert summary.pending_creators == 2


def test__summarize__growth_series() -> None:
    summary = summarize_dashboard(ANALYTICS)

    assert summary.user_growth == [{"month": "Jan 24", "users": 12}, {"month": "Feb 24", "users": 30}]


def test__summarize__report_types_with_labels_and_colors() -> None:
    summary = summarize_dashboard(ANALYTICS)

    assert summary.report_types == [
        {"name": "Harassment/Bullying", "value": 5, "color": "#ef4444"},
        {"name": "spam", "value": 2, "color": "#8b5cf6"},
        {"name": "Something new", "value": 2, "color": DEFAULT_REPORT_COLOR},
    ]


def test__summarize__missing_fields_default_to_zero() -> None:
    summary = summarize_dashboard({"totalUsers": None, "userGrowth": None, "reportTypes": ["bad"]})

    assert summary.total_users == 0
    assert summary.pending_creators == 0
    assert summary.user_growth == []
    assert summary.report_types == []


def test__summarize__non_dict_payload() -> None:
    summary = summarize_dashboard(None, None)
    assert summary.total_users == 0
    assert summary.active_users == 0


def test__to_int__lenient() -> None:
    assert to_int("7") == 7
    assert to_int(3.9) == 3
    assert to_int("n/a") == 0
    assert to_int(None) == 0
    assert to_int(True) == 1


def test__report_labels_and_colors() -> None:
    assert format_report_reason("Fake account or impersonation") == "Fake Account"
    assert format_report_reason("custom") == "custom"
    assert report_color("VIOLENCE") == "#991b1b"
    assert report_color("unknown") == DEFAULT_REPORT_COLOR


def test__format_month__unparseable_passes_through() -> None:
    assert format_month("last month") == "last month"
    assert format_month(None) == "None"


def test__user_overview__counts() -> None:
    users = [
        {"banned": True, "email_verified": True, "role": "user"},
        {"role": "creator", "creator_approved": False},
        {"role": "creator", "creator_approved": True, "email_verified": True},
    ]

    assert user_overview(users) == {"total": 3, "active": 2, "verified": 2, "pending_creators": 1}


def test__format_month__year_month_only() -> None:
    assert format_month("2024-01") == "Jan 24"
    assert format_month("2023-12") == "Dec 23"
