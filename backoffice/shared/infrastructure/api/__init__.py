"""Admin REST API client (transport, resource families, dev fixtures)."""

from backoffice.shared.infrastructure.api.client import ApiClient, ApiError, TRANSPORT_ERROR_MESSAGE
from backoffice.shared.infrastructure.api.fixtures import FixtureAnnouncementApi
from backoffice.shared.infrastructure.api.resources import (
    AnalyticsApi,
    AnnouncementApi,
    BlockApi,
    CreatorApi,
    ReportApi,
    ReportStatus,
    ResourceClient,
    SubscriptionApi,
    UserApi,
    unwrap_object,
    unwrap_records,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "TRANSPORT_ERROR_MESSAGE",
    "FixtureAnnouncementApi",
    "AnalyticsApi",
    "AnnouncementApi",
    "BlockApi",
    "CreatorApi",
    "ReportApi",
    "ReportStatus",
    "ResourceClient",
    "SubscriptionApi",
    "UserApi",
    "unwrap_object",
    "unwrap_records",
]
