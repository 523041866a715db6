"""Durable client-side storage adapters."""

from backoffice.shared.infrastructure.storage.local_storage import FileStorage, KeyValueStorage, MemoryStorage

__all__ = ["FileStorage", "KeyValueStorage", "MemoryStorage"]
