"""Session state management wrapper for the Streamlit console.

Holds per-browser UI state (current page, filter selections, selected
records, pending confirmations) in ``st.session_state``. Authentication lives
in the process-wide ``SessionStore``, not here.
"""

from typing import Any, Dict, Optional

import streamlit as st

from backoffice.shared.domain.listing.filters import ALL, ResourceFilter

DEFAULT_PAGE = "dashboard"


class ConsoleSession:
    """Wrapper around st.session_state for type safety and centralized management."""

    @property
    def page(self) -> str:
        return st.session_state.get('page', DEFAULT_PAGE)

    @page.setter
    def page(self, value: str):
        st.session_state['page'] = value

    def initialize(self):
        """Initialize session with default values."""
        if 'initialized' not in st.session_state:
            st.session_state['initialized'] = True
            st.session_state['page'] = DEFAULT_PAGE
            st.session_state['selected'] = {}
            st.session_state['confirm'] = None

    # --- Filters ---

    def search_key(self, resource_filter: ResourceFilter) -> str:
        return f"{resource_filter.name}_search"

    def facet_key(self, resource_filter: ResourceFilter, facet_name: str) -> str:
        return f"{resource_filter.name}_facet_{facet_name}"

    def filter_state(self, resource_filter: ResourceFilter) -> tuple[str, Dict[str, str]]:
        """Current search term and facet selections for a list page."""
        search = st.session_state.get(self.search_key(resource_filter), "")
        selections = {
            facet.name: st.session_state.get(self.facet_key(resource_filter, facet.name), ALL)
            for facet in resource_filter.facets
        }
        return search, selections

    # --- Selection / confirmation ---

    def selected(self, scope: str) -> Optional[Any]:
        return st.session_state.get('selected', {}).get(scope)

    def select(self, scope: str, record_id: Optional[Any]):
        selected = dict(st.session_state.get('selected', {}))
        if record_id is None:
            selected.pop(scope, None)
        else:
            selected[scope] = record_id
        st.session_state['selected'] = selected

    @property
    def confirm(self) -> Optional[Dict[str, Any]]:
        """Pending destructive action awaiting confirmation: {action, id, label}."""
        return st.session_state.get('confirm')

    def request_confirm(self, action: str, record_id: Any, label: str = ""):
        st.session_state['confirm'] = {'action': action, 'id': record_id, 'label': label}

    def clear_confirm(self):
        st.session_state['confirm'] = None

    def clear_all(self):
        """Reset all UI state (on logout)."""
        for key in list(st.session_state.keys()):
            del st.session_state[key]
