"""Tiered matching of job postings against search filters.

This module provides:
- MatchEngine: the relaxation ladder over the catalog
- MatchResult / MatchTier: ranked results and the tier that produced them
- matches_filters / rank_postings: the exact predicate and ranking order
- NEIGHBOR_STATES: bordering-state table used by the neighbor tier
"""

from .engine import MatchEngine, format_rate, matches_filters, rank_postings, round_half_up
from .models import MatchResult, MatchTier
from .neighbors import NEIGHBOR_STATES, neighbors_of
from .utils import build_jobs_block, build_matches_json

__all__ = [
    "MatchEngine",
    "MatchResult",
    "MatchTier",
    "NEIGHBOR_STATES",
    "build_jobs_block",
    "build_matches_json",
    "format_rate",
    "matches_filters",
    "neighbors_of",
    "rank_postings",
    "round_half_up",
]
