"""Helpers for handing match results to downstream consumers."""

from typing import Any, Dict, List

from jobchat.catalog import postings_to_dicts

from .models import MatchResult


def build_jobs_block(match_result: MatchResult) -> Dict[str, Any]:
    """Structured block carrying the match list, as sent after streamed text.

    Returns:
        Dict with keys:
        - type: always "jobs"
        - items: public posting dicts in rank order
    """
    return {"type": "jobs", "items": postings_to_dicts(match_result.jobs)}


def build_matches_json(match_result: MatchResult) -> List[Dict[str, Any]]:
    """Exactly the postings the generative model may mention, nothing more."""
    return postings_to_dicts(match_result.jobs)
