"""
Error taxonomy for the catalog.

Fetch clients raise NotFoundError / TransportError; the view-models turn them
into a failed state with a human readable message. ConfigurationError comes
from the variant catalog and is absorbed by the transformation resolver.
"""

from django.core.exceptions import ImproperlyConfigured


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError):
    """The requested product does not exist (or is not published)."""


class TransportError(CatalogError):
    """Network or HTTP failure while talking to the catalog store."""

    def __init__(self, message='', status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(CatalogError, ImproperlyConfigured):
    """An image variant kind or definition outside the closed set."""


class InvalidTransition(CatalogError):
    """A view-model operation was called in a state that does not allow it."""
