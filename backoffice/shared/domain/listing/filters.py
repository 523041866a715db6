"""Filterable resource lists.

Every list page (users, reports, announcements, creator applications,
subscriptions) narrows a fetched list the same way: free-text search over a
few fields AND-ed with categorical facets. ``ResourceFilter`` describes one
page's filters declaratively and ``apply`` is a pure function of its inputs,
so applying the same selection twice always yields the same subset in the
original order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

ALL = "all"

Record = Mapping[str, Any]
FacetPredicate = Callable[[Record, str], bool]


def get_field(record: Record, path: str) -> Any:
    """Resolve a dotted path (``reporter.username``) against nested dicts."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class Facet:
    """One categorical filter, e.g. report status.

    Either ``field`` (compared as text against the selected value) or
    ``predicate`` decides whether a record matches. Selecting ``"all"``
    disables the facet.
    """
    name: str
    label: str
    options: Mapping[str, str]
    field: Optional[str] = None
    predicate: Optional[FacetPredicate] = None

    def matches(self, record: Record, selected: Optional[str]) -> bool:
        if selected is None or selected == ALL:
            return True
        if self.predicate is not None:
            return bool(self.predicate(record, selected))
        value = get_field(record, self.field or self.name)
        return value is not None and _as_text(value) == selected

    def choices(self) -> List[str]:
        """Selectable values, ``"all"`` first."""
        return [ALL, *self.options]

    def option_label(self, value: str) -> str:
        if value == ALL:
            return f"All {self.label.lower()}"
        return self.options.get(value, value)


@dataclass(frozen=True)
class ResourceFilter:
    """Search fields plus facets for one resource family."""
    name: str
    search_fields: Sequence[str]
    facets: Sequence[Facet] = field(default_factory=tuple)

    def facet(self, name: str) -> Facet:
        for facet in self.facets:
            if facet.name == name:
                return facet
        raise KeyError(f"No facet named '{name}' on filter '{self.name}'")

    def matches_search(self, record: Record, search: str) -> bool:
        term = (search or "").strip().lower()
        if not term:
            return True
        for path in self.search_fields:
            value = get_field(record, path)
            if value is not None and term in str(value).lower():
                return True
        return False

    def matches(self, record: Record, search: str = "", selections: Optional[Mapping[str, str]] = None) -> bool:
        selections = selections or {}
        if not self.matches_search(record, search):
            return False
        return all(facet.matches(record, selections.get(facet.name)) for facet in self.facets)

    def apply(
        self,
        records: Iterable[Record],
        search: str = "",
        selections: Optional[Mapping[str, str]] = None,
    ) -> List[Record]:
        """Records matching the search term and every active facet, order preserved."""
        return [record for record in records if self.matches(record, search, selections)]

    def counts(self, records: Iterable[Record], facet_name: str) -> Dict[str, int]:
        """How many records fall under each option of a facet."""
        facet = self.facet(facet_name)
        records = list(records)
        return {value: sum(1 for r in records if facet.matches(r, value)) for value in facet.options}


def pinned_first(records: Iterable[Record], flag: str = "is_pinned") -> List[Record]:
    """Stable reorder putting pinned records ahead of the rest."""
    return sorted(records, key=lambda r: not bool(r.get(flag)))


# --- Facet predicates ---

def _email_status(record: Record, selected: str) -> bool:
    verified = bool(record.get("email_verified"))
    return verified if selected == "verified" else not verified


def _creator_status(record: Record, selected: str) -> bool:
    if record.get("role") != "creator":
        return False
    approved = bool(record.get("creator_approved"))
    return approved if selected == "approved" else not approved


def _plan_active(record: Record, selected: str) -> bool:
    active = bool(record.get("is_active"))
    return active if selected == "active" else not active


# --- Page filters ---

USER_FILTER = ResourceFilter(
    name="users",
    search_fields=("username", "phone", "alias", "email"),
    facets=(
        Facet("role", "Roles", {"user": "User", "creator": "Creator", "admin": "Admin"}),
        Facet("email", "Email status", {"verified": "Verified", "unverified": "Unverified"}, predicate=_email_status),
        Facet("creator", "Creator status", {"approved": "Approved", "pending": "Pending"}, predicate=_creator_status),
    ),
)

REPORT_FILTER = ResourceFilter(
    name="reports",
    search_fields=("reason", "description", "reporter.username", "reported.username"),
    facets=(
        Facet("status", "Statuses", {"pending": "Pending", "resolved": "Resolved", "dismissed": "Dismissed"}),
    ),
)

ANNOUNCEMENT_FILTER = ResourceFilter(
    name="announcements",
    search_fields=("title", "content"),
    facets=(
        Facet("type", "Types", {
            "info": "Info",
            "warning": "Warning",
            "success": "Success",
            "error": "Error",
            "update": "Update",
            "maintenance": "Maintenance",
            "feature": "Feature",
            "security": "Security",
        }),
        Facet("status", "Statuses", {"draft": "Draft", "published": "Published", "archived": "Archived"}),
        Facet("priority", "Priorities", {"low": "Low", "medium": "Medium", "high": "High", "critical": "Critical"}),
    ),
)

CREATOR_FILTER = ResourceFilter(
    name="creators",
    search_fields=("username", "email", "alias"),
)

PLAN_FILTER = ResourceFilter(
    name="subscription_plans",
    search_fields=("name", "description"),
    facets=(
        Facet("active", "Plan states", {"active": "Active", "inactive": "Inactive"}, predicate=_plan_active),
    ),
)

SUBSCRIPTION_FILTER = ResourceFilter(
    name="subscriptions",
    search_fields=(
        "plan_name",
        "creator_username",
        "creator_alias",
        "subscriber_username",
        "subscriber_alias",
    ),
    facets=(
        Facet("status", "Statuses", {"active": "Active", "cancelled": "Cancelled", "expired": "Expired"}),
    ),
)
