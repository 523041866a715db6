"""Filterable resource list - the template every list page is built on.

observe query → unwrap records → filter bar → filtered rows → row actions run
mutations that invalidate the page's query key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import streamlit as st

from backoffice.console.components.feedback import render_query_error, report_mutation_error
from backoffice.console.runtime import ConsoleRuntime
from backoffice.console.session import ConsoleSession
from backoffice.shared.domain.listing.filters import ResourceFilter
from backoffice.shared.domain.query.cache import Fetcher, Mutation, QueryKey
from backoffice.shared.infrastructure.api.client import ApiError
from backoffice.shared.infrastructure.api.resources import unwrap_records

Record = Dict[str, Any]


@dataclass
class ListPage:
    """Declarative description of one list page."""
    key: QueryKey
    fetcher: Fetcher
    resource_filter: ResourceFilter
    noun: str
    render_row: Callable[[Record], None]
    empty_message: str = "No results match your filters."
    search_placeholder: str = "Search..."
    order: Optional[Callable[[List[Record]], List[Record]]] = None


def load_records(runtime: ConsoleRuntime, key: QueryKey, fetcher: Fetcher, noun: str) -> Optional[List[Record]]:
    """Observe a query and unwrap its records; renders the error banner and returns None on failure."""
    with st.spinner(f"Loading {noun}..."):
        result = runtime.query(key, fetcher)
    if result.is_error:
        render_query_error(result, noun, runtime)
        return None
    return unwrap_records(result.data)


def render_filter_bar(session: ConsoleSession, resource_filter: ResourceFilter, placeholder: str) -> None:
    """Search box plus one selectbox per facet, bound to session state keys."""
    columns = st.columns([2] + [1] * len(resource_filter.facets))
    with columns[0]:
        st.text_input(
            "Search",
            key=session.search_key(resource_filter),
            placeholder=placeholder,
            label_visibility="collapsed",
        )
    for column, facet in zip(columns[1:], resource_filter.facets):
        with column:
            st.selectbox(
                facet.label,
                facet.choices(),
                format_func=facet.option_label,
                key=session.facet_key(resource_filter, facet.name),
                label_visibility="collapsed",
            )


def render_resource_list(runtime: ConsoleRuntime, session: ConsoleSession, page: ListPage) -> Optional[List[Record]]:
    """Render a filterable list page.

    Returns:
        All fetched records (unfiltered), or None if the query failed
    """
    records = load_records(runtime, page.key, page.fetcher, page.noun)
    if records is None:
        return None

    render_filter_bar(session, page.resource_filter, page.search_placeholder)
    search, selections = session.filter_state(page.resource_filter)
    filtered = page.resource_filter.apply(records, search, selections)
    if page.order is not None:
        filtered = page.order(filtered)

    st.markdown(f"**Showing {len(filtered)} of {len(records)} {page.noun}**")

    if not filtered:
        st.info(page.empty_message)
        return records

    for record in filtered:
        with st.container(border=True):
            page.render_row(record)
    return records


def run_mutation(
    runtime: ConsoleRuntime,
    mutation: Mutation,
    action: str,
    *args: Any,
    success_message: Optional[str] = None,
    **kwargs: Any,
) -> bool:
    """Run a mutation from a button handler, reporting failure inline.

    Args:
        runtime: Console runtime
        mutation: Mutation to run
        action: Verb phrase for the error message, e.g. "ban user"
        success_message: Toast shown on success

    Returns:
        True on success
    """
    try:
        with st.spinner(f"{action.capitalize()}..."):
            runtime.mutate(mutation, *args, **kwargs)
    except (ApiError, ValueError) as e:
        report_mutation_error(action, e)
        return False

    if success_message:
        st.toast(success_message, icon="✅")
    return True


def confirm_prompt(session: ConsoleSession, action: str, record_id: Any, prompt: str) -> bool:
    """Inline confirmation for destructive actions requested via ``session.request_confirm``.

    Returns:
        True on the run where the operator clicked Confirm
    """
    pending = session.confirm
    if not pending or pending.get("action") != action or pending.get("id") != record_id:
        return False

    st.warning(prompt)
    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("Confirm", key=f"confirm_{action}_{record_id}", type="primary"):
            session.clear_confirm()
            return True
    with col_no:
        if st.button("Cancel", key=f"cancel_{action}_{record_id}"):
            session.clear_confirm()
            st.rerun()
    return False
