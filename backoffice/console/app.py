"""Main Streamlit application entry point for the Backoffice admin console.

Run with: streamlit run backoffice/console/app.py

This application provides a web-based interface for:
- Platform analytics at a glance
- Managing user accounts (ban, unban, delete)
- Reviewing creator applications and abuse reports
- Publishing announcements and managing subscription plans
"""

import logging

import streamlit as st

from backoffice.console.components.login_form import render_login_form
from backoffice.console.runtime import ConsoleRuntime, get_runtime
from backoffice.console.session import ConsoleSession
from backoffice.console.views import (
    render_announcements,
    render_creator_approvals,
    render_dashboard,
    render_reports,
    render_subscriptions,
    render_users,
)

logger = logging.getLogger(__name__)

PAGES = {
    "📊 Dashboard": "dashboard",
    "👥 Users": "users",
    "🎨 Creator Approvals": "creator_approvals",
    "🚩 Reports": "reports",
    "📢 Announcements": "announcements",
    "💳 Subscriptions": "subscriptions",
}

RENDERERS = {
    "dashboard": render_dashboard,
    "users": render_users,
    "creator_approvals": render_creator_approvals,
    "reports": render_reports,
    "announcements": render_announcements,
    "subscriptions": render_subscriptions,
}


def main():
    """Main Streamlit application entry point."""
    runtime = get_runtime()

    st.set_page_config(
        page_title=runtime.config.ui.page_title,
        page_icon="🛡️",
        layout=runtime.config.ui.layout,
        initial_sidebar_state="expanded"
    )

    # Initialize session
    session = ConsoleSession()
    session.initialize()

    auth = runtime.services.session
    if auth.is_loading:
        with st.spinner("Loading..."):
            runtime.initialize_session()

    if not auth.is_authenticated:
        if render_login_form(runtime):
            st.rerun()
        return

    render_main_app(runtime, session)


def render_main_app(runtime: ConsoleRuntime, session: ConsoleSession):
    """Render the main application interface with navigation."""
    auth = runtime.services.session

    with st.sidebar:
        st.title("🛡️ Admin Dashboard")
        st.markdown("---")

        st.markdown("### Signed in")
        st.info(f"**{auth.state.username}**")

        if st.button("🚪 Logout"):
            runtime.logout()
            session.clear_all()
            st.rerun()

        st.markdown("---")
        st.markdown("### 📋 Navigation")

        for page_label, page_id in PAGES.items():
            button_type = "primary" if session.page == page_id else "secondary"
            if st.button(page_label, key=f"nav_{page_id}", type=button_type, use_container_width=True):
                session.page = page_id
                session.clear_confirm()
                st.rerun()

    render_page = RENDERERS.get(session.page, render_dashboard)
    try:
        render_page(runtime, session)
    except Exception as e:
        logger.exception(f"Error rendering page '{session.page}'")
        st.error(f"Error rendering page: {e}")
        st.markdown("**Debug Info:**")
        st.code(str(e))


if __name__ == "__main__":
    main()
