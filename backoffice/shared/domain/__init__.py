"""
Shared Domain Module
====================

Client-side logic: session lifecycle, query/mutation cache, list filtering
and analytics shaping.
"""

from backoffice.shared.domain.analytics import DashboardSummary, summarize_dashboard
from backoffice.shared.domain.listing import Facet, ResourceFilter
from backoffice.shared.domain.query import Mutation, QueryCache, QueryResult
from backoffice.shared.domain.session import SessionState, SessionStore

__all__ = [
    # Session
    "SessionState",
    "SessionStore",
    # Query
    "Mutation",
    "QueryCache",
    "QueryResult",
    # Listing
    "Facet",
    "ResourceFilter",
    # Analytics
    "DashboardSummary",
    "summarize_dashboard",
]
