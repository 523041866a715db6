"""
Backoffice Shared Kernel (SDK)
==============================

UI-independent logic behind the admin console.

Architecture:
- core: EventBus, configuration, logging, service wiring
- infrastructure: Technical adapters (admin REST API, durable storage)
- domain: Client logic (session, query cache, filtering, analytics)
"""

__version__ = "1.0.0"

__all__ = []
