"""
Shared Infrastructure Module
=============================

Technical adapters for external systems (admin REST API, durable storage).
"""

from backoffice.shared.infrastructure.api import ApiClient, ApiError, ResourceClient
from backoffice.shared.infrastructure.storage import FileStorage, MemoryStorage

__all__ = [
    # API
    "ApiClient",
    "ApiError",
    "ResourceClient",
    # Storage
    "FileStorage",
    "MemoryStorage",
]
