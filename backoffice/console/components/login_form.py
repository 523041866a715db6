"""Login form shown while no operator is authenticated."""

import logging

import streamlit as st

from backoffice.console.components.feedback import describe_error
from backoffice.console.runtime import ConsoleRuntime
from backoffice.shared.infrastructure.api.client import ApiError

logger = logging.getLogger(__name__)


def render_login_form(runtime: ConsoleRuntime) -> bool:
    """Render the sign-in form.

    Returns:
        True when the operator just signed in
    """
    st.title("🔐 Admin Dashboard")
    st.markdown("Sign in to manage users, creators, reports and announcements.")

    with st.form("login_form", clear_on_submit=False):
        username = st.text_input("Username", placeholder="Enter your username")
        password = st.text_input("Password", type="password", placeholder="Enter your password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if not submitted:
        return False

    if not username or not password:
        st.warning("Please enter both username and password.")
        return False

    try:
        with st.spinner("Signing in..."):
            ok = runtime.run(runtime.services.session.login(username, password))
    except ApiError as e:
        st.error(f"❌ Sign-in failed: {describe_error(e)}")
        return False

    if not ok:
        st.error("Invalid username or password")
        return False

    logger.info(f"Login form accepted '{username}'")
    return True
