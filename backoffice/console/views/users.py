"""Users page - search, inspect and moderate accounts.

Summary cards, the filterable user list, a detail panel (profile, blocked
users, reports) and ban / unban / delete actions.
"""

from typing import Any, Dict

import pandas as pd
import streamlit as st

from backoffice.console.components.resource_list import (
    ListPage,
    confirm_prompt,
    load_records,
    render_resource_list,
    run_mutation,
)
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.analytics.dashboard_stats import user_overview
from backoffice.shared.domain.listing.filters import USER_FILTER
from backoffice.shared.domain.query.cache import Mutation

USERS_KEY = "users"


class UsersPage:
    """Users page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api
        cache = runtime.services.cache

        self.ban = Mutation(self.api.users.ban_user, cache=cache, invalidates=(USERS_KEY,))
        self.unban = Mutation(self.api.users.unban_user, cache=cache, invalidates=(USERS_KEY,))
        self.delete = Mutation(self.api.users.delete_user, cache=cache, invalidates=(USERS_KEY, "analytics"))

    def render(self):
        st.header("👥 Users")
        st.markdown("Manage platform accounts.")

        selected_id = self.session.selected("user")
        if selected_id is not None:
            self._render_detail(selected_id)
            return

        page = ListPage(
            key=USERS_KEY,
            fetcher=self.api.users.list_users,
            resource_filter=USER_FILTER,
            noun="users",
            render_row=self._render_row,
            search_placeholder="Search by username, phone, alias or email...",
            empty_message="No users match your filters.",
        )
        # Summary cards sit above the list; the list call hits the cache
        users = load_records(self.runtime, USERS_KEY, self.api.users.list_users, "users")
        if users is not None:
            self._render_summary(users)
        render_resource_list(self.runtime, self.session, page)

    def _render_summary(self, users):
        overview = user_overview(users)
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Total Users", overview["total"])
        with col2:
            st.metric("Active Users", overview["active"])
        with col3:
            st.metric("Verified Emails", overview["verified"])
        with col4:
            st.metric("Pending Creators", overview["pending_creators"])

    def _render_row(self, user: Dict[str, Any]):
        user_id = user.get("id")
        col1, col2, col3 = st.columns([3, 2, 2])

        with col1:
            banned = " ⛔ **banned**" if user.get("banned") else ""
            st.markdown(f"**{user.get('username', 'unknown')}**{banned}")
            details = [d for d in (user.get("alias"), user.get("email"), user.get("phone")) if d]
            if details:
                st.caption(" · ".join(str(d) for d in details))

        with col2:
            role = user.get("role", "user")
            if role == "creator":
                role += " ✅" if user.get("creator_approved") else " 🕒"
            st.markdown(f"Role: `{role}`")
            st.caption(f"{user.get('reports_count', 0)} reports · {user.get('blocks_count', 0)} blocks")

        with col3:
            b1, b2, b3 = st.columns(3)
            with b1:
                if st.button("👁️", key=f"view_user_{user_id}", help="View details"):
                    self.session.select("user", user_id)
                    st.rerun()
            with b2:
                if user.get("banned"):
                    if st.button("♻️", key=f"unban_user_{user_id}", help="Unban"):
                        if run_mutation(self.runtime, self.unban, "unban user", user_id, success_message="User unbanned"):
                            st.rerun()
                elif st.button("⛔", key=f"ban_user_{user_id}", help="Ban"):
                    self.session.request_confirm("ban", user_id)
            with b3:
                if st.button("🗑️", key=f"delete_user_{user_id}", help="Delete"):
                    self.session.request_confirm("delete", user_id)

        if confirm_prompt(self.session, "ban", user_id, f"Ban **{user.get('username')}**? They will lose access immediately."):
            if run_mutation(self.runtime, self.ban, "ban user", user_id, success_message="User banned"):
                st.rerun()
        if confirm_prompt(self.session, "delete", user_id, f"Permanently delete **{user.get('username')}**? This cannot be undone."):
            if run_mutation(self.runtime, self.delete, "delete user", user_id, success_message="User deleted"):
                self.session.select("user", None)
                st.rerun()

    def _render_detail(self, user_id):
        if st.button("← Back to users"):
            self.session.select("user", None)
            st.rerun()

        users = load_records(self.runtime, USERS_KEY, self.api.users.list_users, "users") or []
        user = next((u for u in users if u.get("id") == user_id), None)
        if user is None:
            st.warning("This user no longer exists.")
            return

        st.subheader(f"👤 {user.get('username')}")
        profile = {k: v for k, v in user.items() if not isinstance(v, (dict, list))}
        st.dataframe(pd.DataFrame(profile.items(), columns=["Field", "Value"]).astype(str), hide_index=True)
        if user.get("bio"):
            st.markdown(f"> {user['bio']}")

        tab_blocked, tab_reports = st.tabs(["🚫 Blocked users", "🚩 Reports"])
        with tab_blocked:
            blocked = load_records(
                self.runtime,
                (USERS_KEY, user_id, "blocked"),
                lambda: self.api.users.get_blocked_users(user_id),
                "blocked users",
            )
            if blocked is not None:
                self._render_table(blocked, "This user has not blocked anyone.")
        with tab_reports:
            reports = load_records(
                self.runtime,
                (USERS_KEY, user_id, "reports"),
                lambda: self.api.users.get_user_reports(user_id),
                "reports",
            )
            if reports is not None:
                self._render_table(reports, "No reports involve this user.")

    def _render_table(self, rows, empty: str):
        if not rows:
            st.info(empty)
            return
        flat = [{k: v for k, v in row.items() if not isinstance(v, (dict, list))} for row in rows]
        st.dataframe(pd.DataFrame(flat), hide_index=True, use_container_width=True)


def render_users(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Users page."""
    page = UsersPage(runtime, session)
    page.render()
