"""Catalog store: the read-only set of job postings served by the API."""

from .exceptions import CatalogError, CatalogLoadError, CatalogLoadWarning
from .store import Catalog, build_fallback_url, load_catalog, parse_catalog, postings_to_dicts

__all__ = [
    "Catalog",
    "load_catalog",
    "parse_catalog",
    "build_fallback_url",
    "postings_to_dicts",
    "CatalogError",
    "CatalogLoadError",
    "CatalogLoadWarning",
]
