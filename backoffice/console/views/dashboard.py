"""Dashboard page - platform overview.

Metric cards, user growth and report type charts from the analytics
endpoint, the pending creator queue and recent console activity.
"""

from datetime import datetime

import pandas as pd
import plotly.express as px
import streamlit as st

from backoffice.console.components.feedback import render_query_error
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.analytics.dashboard_stats import DashboardSummary, summarize_dashboard
from backoffice.shared.infrastructure.api.resources import unwrap_records


class DashboardPage:
    """Dashboard page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api

    def render(self):
        """Render the Dashboard page."""
        st.header("📊 Dashboard")
        st.markdown("Platform health at a glance.")

        with st.spinner("Loading analytics..."):
            analytics = self.runtime.query("analytics", self.api.analytics.dashboard)
            pending = self.runtime.query("pendingCreators", self.api.creators.list_pending)

        if analytics.is_error:
            render_query_error(analytics, "analytics", self.runtime)
            return

        summary = summarize_dashboard(analytics.data, pending.data if pending.is_success else None)

        self._render_metrics(summary)
        self._render_charts(summary)

        col1, col2 = st.columns(2)
        with col1:
            self._render_pending_creators(pending)
        with col2:
            self._render_activity()

    def _render_metrics(self, summary: DashboardSummary):
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("👥 Total Users", summary.total_users, help="All registered accounts")
        with col2:
            st.metric("🚩 Pending Reports", summary.pending_reports, help=f"{summary.total_reports} reports in total")
        with col3:
            st.metric("⛔ Banned Users", summary.banned_users)
        with col4:
            st.metric("🎨 Pending Creators", summary.pending_creators, help="Applications awaiting review")

    def _render_charts(self, summary: DashboardSummary):
        col1, col2 = st.columns([3, 2])

        with col1:
            st.subheader("📈 User Growth")
            if summary.user_growth:
                growth_df = pd.DataFrame(summary.user_growth)
                fig = px.area(growth_df, x="month", y="users", labels={"month": "Month", "users": "New users"})
                fig.update_layout(height=350)
                st.plotly_chart(fig, use_container_width=True)
            else:
                st.info("No growth data yet.")

        with col2:
            st.subheader("🚩 Report Types")
            if summary.report_types:
                types_df = pd.DataFrame(summary.report_types)
                fig = px.pie(
                    types_df,
                    values="value",
                    names="name",
                    color="name",
                    color_discrete_map={row["name"]: row["color"] for row in summary.report_types},
                )
                fig.update_layout(height=350)
                st.plotly_chart(fig, use_container_width=True)
            else:
                st.info("No reports filed.")

    def _render_pending_creators(self, pending):
        st.subheader("🎨 Creator Queue")
        if pending.is_error:
            render_query_error(pending, "pending creators", self.runtime)
            return

        creators = unwrap_records(pending.data)
        if not creators:
            st.success("✅ No applications waiting.")
            return

        for creator in creators[:5]:
            st.markdown(f"• **{creator.get('username', 'unknown')}** {creator.get('email') or ''}")
        if len(creators) > 5:
            st.markdown(f"*...and {len(creators) - 5} more*")
        if st.button("Review applications", key="dashboard_review_creators"):
            self.session.page = "creator_approvals"
            st.rerun()

    def _render_activity(self):
        st.subheader("🕒 Recent Activity")
        entries = self.runtime.activity.entries()
        if not entries:
            st.caption("Nothing yet this session.")
            return

        icons = {"success": "✅", "error": "❌", "info": "ℹ️"}
        for entry in entries[:10]:
            when = datetime.fromtimestamp(entry["ts"]).strftime("%H:%M:%S")
            st.markdown(f"{icons.get(entry['level'], '•')} {entry['message']}  \n*{when}*")


def render_dashboard(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Dashboard page."""
    page = DashboardPage(runtime, session)
    page.render()
