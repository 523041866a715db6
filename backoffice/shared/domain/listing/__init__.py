"""Client-side search and facet filtering for resource lists."""

from backoffice.shared.domain.listing.filters import (
    ALL,
    ANNOUNCEMENT_FILTER,
    CREATOR_FILTER,
    PLAN_FILTER,
    REPORT_FILTER,
    SUBSCRIPTION_FILTER,
    USER_FILTER,
    Facet,
    ResourceFilter,
    get_field,
    pinned_first,
)

__all__ = [
    "ALL",
    "ANNOUNCEMENT_FILTER",
    "CREATOR_FILTER",
    "PLAN_FILTER",
    "REPORT_FILTER",
    "SUBSCRIPTION_FILTER",
    "USER_FILTER",
    "Facet",
    "ResourceFilter",
    "get_field",
    "pinned_first",
]
