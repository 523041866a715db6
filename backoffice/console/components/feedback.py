"""Inline error and status rendering shared by all pages."""

from __future__ import annotations

import streamlit as st

from backoffice.shared.domain.query.cache import QueryResult
from backoffice.shared.infrastructure.api.client import ApiError

UNKNOWN_ERROR = "Unknown error"


def describe_error(error: BaseException | None) -> str:
    """Message shown to the operator for a failed call."""
    if error is None:
        return UNKNOWN_ERROR
    if isinstance(error, ApiError):
        return error.message
    return str(error) or UNKNOWN_ERROR


def render_query_error(result: QueryResult, what: str, runtime=None) -> None:
    """Inline banner for a failed query, with a Retry button that invalidates the key."""
    st.error(f"❌ Failed to load {what}: {describe_error(result.error)}")
    if runtime is not None and st.button("🔄 Retry", key=f"retry_{result.key!r}"):
        runtime.invalidate(result.key)
        st.rerun()


def report_mutation_error(action: str, error: BaseException) -> None:
    """Immediate feedback after an explicit action failed."""
    message = f"Failed to {action}: {describe_error(error)}"
    st.error(message)
    st.toast(message, icon="⚠️")


def status_badge(status: str) -> str:
    """Emoji-prefixed status label for list rows."""
    icons = {
        "pending": "🕒",
        "resolved": "✅",
        "dismissed": "⚪",
        "published": "🟢",
        "draft": "📝",
        "archived": "📦",
        "active": "🟢",
        "inactive": "⏸️",
        "cancelled": "🔴",
        "expired": "⚪",
    }
    return f"{icons.get(str(status).lower(), '•')} {status}"
