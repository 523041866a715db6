"""Views package - Streamlit page implementations for the admin console.

Each page follows the same pattern: a page class plus a render function that
takes the ConsoleRuntime and ConsoleSession and renders the UI.
"""

from .dashboard import render_dashboard
from .users import render_users
from .creator_approvals import render_creator_approvals
from .reports import render_reports
from .announcements import render_announcements
from .subscriptions import render_subscriptions

__all__ = [
    'render_dashboard',
    'render_users',
    'render_creator_approvals',
    'render_reports',
    'render_announcements',
    'render_subscriptions'
]
