"""Filter extraction from free-text chat messages."""

from .extractor import (
    FilterExtractor,
    extract_filters,
    extract_profession,
    extract_rate,
    extract_state,
    merge_filters,
)
from .rules import PROFESSION_RULES, KeywordRule

__all__ = [
    "FilterExtractor",
    "extract_filters",
    "extract_profession",
    "extract_rate",
    "extract_state",
    "merge_filters",
    "KeywordRule",
    "PROFESSION_RULES",
]
