"""Analytics shaping for the dashboard and summary cards."""

from backoffice.shared.domain.analytics.dashboard_stats import (
    DashboardSummary,
    format_month,
    format_report_reason,
    report_color,
    summarize_dashboard,
    user_overview,
)

__all__ = [
    "DashboardSummary",
    "format_month",
    "format_report_reason",
    "report_color",
    "summarize_dashboard",
    "user_overview",
]
