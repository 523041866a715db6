"""Backoffice admin console package."""

from .shared import __version__

__all__ = ["__version__"]
