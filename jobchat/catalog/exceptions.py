"""Catalog exceptions and warnings.

A catalog that cannot be loaded never stops the service: load_catalog()
converts CatalogLoadError into a CatalogLoadWarning plus an empty catalog.
"""

from typing import Optional


class CatalogError(Exception):
    """Base exception for catalog errors."""

    pass


class CatalogLoadError(CatalogError):
    """Raised when a catalog source cannot be read or contains malformed records.

    Examples:
    - File missing or unreadable
    - Invalid JSON
    - Top-level value is not a list of postings
    - A posting fails validation, or two postings share a job_id
    """

    def __init__(self, reason: str, source: Optional[str] = None):
        self.reason = reason
        self.source = source
        message = f"{reason} ({source})" if source else reason
        super().__init__(message)


class CatalogLoadWarning(UserWarning):
    """Emitted when the service falls back to an empty catalog."""

    pass
