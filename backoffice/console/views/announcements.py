"""Announcements page - publish platform-wide notices.

Filterable list with pinned announcements first, plus a shared create / edit
form and delete with confirmation.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

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
from backoffice.shared.domain.listing.filters import ANNOUNCEMENT_FILTER, pinned_first
from backoffice.shared.domain.query.cache import Mutation

logger = logging.getLogger(__name__)

ANNOUNCEMENTS_KEY = "announcements"
NEW = "__new__"

AUDIENCES = {"all": "All Users", "creators": "Creators Only", "fans": "Fans Only", "admins": "Admins Only"}
PRIORITY_ICONS = {"low": "⚪", "medium": "🔵", "high": "🟠", "critical": "🔴"}


def _parse_date(value: Any) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


class AnnouncementsPage:
    """Announcements page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api
        cache = runtime.services.cache

        self.create = Mutation(
            self.api.announcements.create, cache=cache, invalidates=(ANNOUNCEMENTS_KEY,),
            name="create_announcement",
        )
        self.update = Mutation(
            self.api.announcements.update, cache=cache, invalidates=(ANNOUNCEMENTS_KEY,),
            name="update_announcement",
        )
        self.delete = Mutation(
            self.api.announcements.delete, cache=cache, invalidates=(ANNOUNCEMENTS_KEY,),
            name="delete_announcement",
        )

    def render(self):
        st.header("📢 Announcements")
        st.markdown("Create and manage notices shown to users.")

        editing = self.session.selected("announcement")
        if editing == NEW:
            self._render_form(None)
            return

        if st.button("➕ New announcement", type="primary"):
            self.session.select("announcement", NEW)
            st.rerun()

        page = ListPage(
            key=ANNOUNCEMENTS_KEY,
            fetcher=self.api.announcements.list_announcements,
            resource_filter=ANNOUNCEMENT_FILTER,
            noun="announcements",
            render_row=self._render_row,
            search_placeholder="Search announcements...",
            empty_message="No announcements match your filters.",
            order=pinned_first,
        )
        render_resource_list(self.runtime, self.session, page)

    def _render_row(self, announcement: Dict[str, Any]):
        announcement_id = announcement.get("id")
        if self.session.selected("announcement") == announcement_id:
            self._render_form(announcement)
            return

        col1, col2 = st.columns([5, 1])
        with col1:
            pin = "📌 " if announcement.get("is_pinned") else ""
            priority = announcement.get("priority", "medium")
            st.markdown(f"{pin}**{announcement.get('title', 'Untitled')}** {PRIORITY_ICONS.get(priority, '')}")
            st.caption(
                f"{announcement.get('type', 'info')} · {status_badge(announcement.get('status', 'draft'))} · "
                f"{AUDIENCES.get(announcement.get('target_audience', 'all'), 'All Users')} · "
                f"{announcement.get('read_count', 0)} reads"
            )
            st.markdown(announcement.get("content", ""))
        with col2:
            if st.button("✏️", key=f"edit_announcement_{announcement_id}", help="Edit"):
                self.session.select("announcement", announcement_id)
                st.rerun()
            if st.button("🗑️", key=f"delete_announcement_{announcement_id}", help="Delete"):
                self.session.request_confirm("delete_announcement", announcement_id)

        if confirm_prompt(
            self.session,
            "delete_announcement",
            announcement_id,
            f"Delete **{announcement.get('title')}**? This cannot be undone.",
        ):
            if run_mutation(
                self.runtime, self.delete, "delete announcement", announcement_id,
                success_message="Announcement deleted",
            ):
                st.rerun()

    def _render_form(self, announcement: Optional[Dict[str, Any]]):
        """Create form when ``announcement`` is None, edit form otherwise."""
        current = announcement or {}
        form_id = current.get("id", NEW)
        type_facet = ANNOUNCEMENT_FILTER.facet("type")
        status_facet = ANNOUNCEMENT_FILTER.facet("status")
        priority_facet = ANNOUNCEMENT_FILTER.facet("priority")

        def index_of(options, value, default):
            keys = list(options)
            return keys.index(value) if value in keys else keys.index(default)

        st.subheader("✏️ Edit announcement" if announcement else "➕ New announcement")
        with st.form(f"announcement_form_{form_id}"):
            title = st.text_input("Title", value=current.get("title", ""))
            content = st.text_area("Content", value=current.get("content", ""), height=120)

            col1, col2, col3, col4 = st.columns(4)
            with col1:
                kind = st.selectbox(
                    "Type", list(type_facet.options), format_func=type_facet.option_label,
                    index=index_of(type_facet.options, current.get("type"), "info"),
                )
            with col2:
                priority = st.selectbox(
                    "Priority", list(priority_facet.options), format_func=priority_facet.option_label,
                    index=index_of(priority_facet.options, current.get("priority"), "medium"),
                )
            with col3:
                status = st.selectbox(
                    "Status", list(status_facet.options), format_func=status_facet.option_label,
                    index=index_of(status_facet.options, current.get("status"), "draft"),
                )
            with col4:
                audience = st.selectbox(
                    "Audience", list(AUDIENCES), format_func=AUDIENCES.get,
                    index=index_of(AUDIENCES, current.get("target_audience"), "all"),
                )

            col1, col2, col3 = st.columns(3)
            with col1:
                start_date = st.date_input("Start date", value=_parse_date(current.get("start_date")) or date.today())
            with col2:
                end_date = st.date_input("End date (optional)", value=_parse_date(current.get("end_date")))
            with col3:
                is_pinned = st.checkbox("Pin to top", value=bool(current.get("is_pinned")))

            submit_col, cancel_col = st.columns(2)
            with submit_col:
                submitted = st.form_submit_button("Save" if announcement else "Create", type="primary")
            with cancel_col:
                cancelled = st.form_submit_button("Cancel")

        if cancelled:
            self.session.select("announcement", None)
            st.rerun()
        if not submitted:
            return
        if not title.strip() or not content.strip():
            st.warning("Title and content are required.")
            return

        data = {
            "title": title.strip(),
            "content": content.strip(),
            "type": kind,
            "priority": priority,
            "status": status,
            "target_audience": audience,
            "start_date": start_date.isoformat() if start_date else None,
            "end_date": end_date.isoformat() if end_date else None,
            "is_pinned": is_pinned,
        }

        if announcement:
            ok = run_mutation(
                self.runtime, self.update, "update announcement", announcement["id"], data,
                success_message="Announcement updated",
            )
        else:
            ok = run_mutation(
                self.runtime, self.create, "create announcement", data,
                success_message="Announcement created",
            )
        if ok:
            self.session.select("announcement", None)
            logger.info(f"Saved announcement '{data['title']}'")
            st.rerun()


def render_announcements(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Announcements page."""
    page = AnnouncementsPage(runtime, session)
    page.render()
