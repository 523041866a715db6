"""Reports page - triage abuse reports."""

from typing import Any, Dict

import streamlit as st

from backoffice.console.components.feedback import status_badge
from backoffice.console.components.resource_list import (
    ListPage,
    confirm_prompt,
    render_resource_list,
    run_mutation,
)
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.analytics.dashboard_stats import format_report_reason
from backoffice.shared.domain.listing.filters import REPORT_FILTER
from backoffice.shared.domain.query.cache import Mutation
from backoffice.shared.infrastructure.api.resources import ReportStatus

REPORTS_KEY = "reports"


def _party(report: Dict[str, Any], role: str) -> str:
    party = report.get(role)
    if isinstance(party, dict):
        return party.get("username") or str(party.get("id", "unknown"))
    return str(party or report.get(f"{role}_id", "unknown"))


class ReportsPage:
    """Reports page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api
        cache = runtime.services.cache

        self.update_status = Mutation(
            self.api.reports.update_status,
            cache=cache,
            invalidates=(REPORTS_KEY, "analytics"),
            name="update_report_status",
        )
        self.delete = Mutation(
            self.api.reports.delete_report,
            cache=cache,
            invalidates=(REPORTS_KEY, "analytics"),
        )

    def render(self):
        st.header("🚩 Reports")
        st.markdown("Review reports filed by users.")

        page = ListPage(
            key=REPORTS_KEY,
            fetcher=self.api.reports.list_reports,
            resource_filter=REPORT_FILTER,
            noun="reports",
            render_row=self._render_row,
            search_placeholder="Search by reason, description or username...",
            empty_message="No reports match your filters.",
        )
        records = render_resource_list(self.runtime, self.session, page)
        if records:
            counts = REPORT_FILTER.counts(records, "status")
            st.caption(" · ".join(f"{status}: {count}" for status, count in counts.items()))

    def _render_row(self, report: Dict[str, Any]):
        report_id = report.get("id")
        status = report.get("status", ReportStatus.PENDING.value)
        col1, col2 = st.columns([4, 2])

        with col1:
            st.markdown(f"**{format_report_reason(report.get('reason', 'other'))}** {status_badge(status)}")
            st.caption(f"{_party(report, 'reporter')} → {_party(report, 'reported')}")
            if self.session.selected("report") == report_id:
                if report.get("description"):
                    st.markdown(f"> {report['description']}")
                if report.get("created_at"):
                    st.caption(f"Filed {report['created_at']}")

        with col2:
            b1, b2, b3, b4 = st.columns(4)
            with b1:
                expanded = self.session.selected("report") == report_id
                if st.button("🔼" if expanded else "👁️", key=f"view_report_{report_id}", help="Details"):
                    self.session.select("report", None if expanded else report_id)
                    st.rerun()
            if status == ReportStatus.PENDING.value:
                with b2:
                    if st.button("✅", key=f"resolve_report_{report_id}", help="Resolve"):
                        self._set_status(report_id, ReportStatus.RESOLVED)
                with b3:
                    if st.button("⚪", key=f"dismiss_report_{report_id}", help="Dismiss"):
                        self._set_status(report_id, ReportStatus.DISMISSED)
            with b4:
                if st.button("🗑️", key=f"delete_report_{report_id}", help="Delete"):
                    self.session.request_confirm("delete_report", report_id)

        if confirm_prompt(self.session, "delete_report", report_id, "Delete this report? This cannot be undone."):
            if run_mutation(self.runtime, self.delete, "delete report", report_id, success_message="Report deleted"):
                st.rerun()

    def _set_status(self, report_id, status: ReportStatus):
        if run_mutation(
            self.runtime,
            self.update_status,
            f"mark report {status.value}",
            report_id,
            status,
            success_message=f"Report {status.value}",
        ):
            st.rerun()


def render_reports(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Reports page."""
    page = ReportsPage(runtime, session)
    page.render()
