"""Query/mutation cache shared by every console page."""

from backoffice.shared.domain.query.cache import (
    CacheEntry,
    Mutation,
    QueryCache,
    QueryKey,
    QueryResult,
    key_family,
)

__all__ = ["CacheEntry", "Mutation", "QueryCache", "QueryKey", "QueryResult", "key_family"]
