"""Creator Approvals page - review pending creator applications."""

import logging
from typing import Any, Dict

import streamlit as st

from backoffice.console.components.resource_list import ListPage, render_resource_list, run_mutation
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.listing.filters import CREATOR_FILTER
from backoffice.shared.domain.query.cache import Mutation

logger = logging.getLogger(__name__)

PENDING_KEY = "pendingCreators"


class CreatorApprovalsPage:
    """Creator Approvals page implementation."""

    def __init__(self, runtime: ConsoleRuntime, session: ConsoleSession):
        self.runtime = runtime
        self.session = session
        self.api = runtime.services.api
        self.review = Mutation(
            self.api.creators.review,
            cache=runtime.services.cache,
            invalidates=(PENDING_KEY, "users", "analytics"),
            name="review_creator",
        )

    def render(self):
        st.header("🎨 Creator Approvals")
        st.markdown("Approve or reject users who applied to become creators.")

        page = ListPage(
            key=PENDING_KEY,
            fetcher=self.api.creators.list_pending,
            resource_filter=CREATOR_FILTER,
            noun="pending applications",
            render_row=self._render_row,
            search_placeholder="Search applicants...",
            empty_message="No pending creator applications.",
        )
        render_resource_list(self.runtime, self.session, page)

    def _render_row(self, creator: Dict[str, Any]):
        creator_id = creator.get("id")
        col1, col2 = st.columns([3, 2])

        with col1:
            st.markdown(f"**{creator.get('username', 'unknown')}**")
            details = [d for d in (creator.get("alias"), creator.get("email")) if d]
            if details:
                st.caption(" · ".join(str(d) for d in details))
            if creator.get("bio"):
                st.markdown(f"> {creator['bio']}")
            if creator.get("created_at"):
                st.caption(f"Applied {creator['created_at']}")

        with col2:
            notes = st.text_area(
                "Review notes",
                key=f"creator_notes_{creator_id}",
                placeholder="Optional notes stored with the decision",
                height=80,
            )
            b1, b2 = st.columns(2)
            with b1:
                if st.button("✅ Approve", key=f"approve_creator_{creator_id}", type="primary"):
                    self._decide(creator, True, notes)
            with b2:
                if st.button("❌ Reject", key=f"reject_creator_{creator_id}"):
                    self._decide(creator, False, notes)

    def _decide(self, creator: Dict[str, Any], approved: bool, notes: str):
        verb = "approve" if approved else "reject"
        ok = run_mutation(
            self.runtime,
            self.review,
            f"{verb} creator",
            creator.get("id"),
            approved,
            notes or None,
            success_message=f"{creator.get('username')} {'approved' if approved else 'rejected'}",
        )
        if ok:
            logger.info(f"Creator {creator.get('id')} {verb}d")
            st.rerun()


def render_creator_approvals(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render function for the Creator Approvals page."""
    page = CreatorApprovalsPage(runtime, session)
    page.render()
