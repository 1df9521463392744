"""Bordering-state table used to broaden searches that find nothing locally.

Only a curated set of states is listed; a state absent from the table has no
neighbors and the neighbor tier is skipped for it. Each list is ordered by
how often candidates relocate between the two states, closest first.
"""

from typing import Dict, Tuple

NEIGHBOR_STATES: Dict[str, Tuple[str, ...]] = {
    "AL": ("GA", "FL", "TN", "MS"),
    "AZ": ("NM", "NV", "CA", "UT"),
    "CA": ("NV", "AZ", "OR"),
    "CO": ("NM", "UT", "WY", "KS", "NE"),
    "FL": ("GA", "AL"),
    "GA": ("FL", "SC", "AL", "TN", "NC"),
    "IL": ("IN", "WI", "MO", "IA", "KY"),
    "LA": ("TX", "MS", "AR"),
    "MA": ("RI", "CT", "NH", "NY", "VT"),
    "MD": ("VA", "DC", "PA", "DE", "WV"),
    "MI": ("OH", "IN", "WI"),
    "NC": ("SC", "VA", "TN", "GA"),
    "NJ": ("NY", "PA", "DE"),
    "NM": ("AZ", "TX", "CO", "OK", "UT"),
    "NV": ("CA", "AZ", "UT", "OR", "ID"),
    "NY": ("NJ", "PA", "CT", "MA", "VT"),
    "OH": ("PA", "MI", "IN", "KY", "WV"),
    "OR": ("WA", "CA", "ID", "NV"),
    "PA": ("NJ", "NY", "OH", "MD", "DE", "WV"),
    "SC": ("NC", "GA"),
    "TN": ("GA", "AL", "KY", "NC", "VA", "MS", "AR", "MO"),
    "TX": ("OK", "LA", "NM", "AR"),
    "VA": ("MD", "NC", "DC", "WV", "TN", "KY"),
    "WA": ("OR", "ID"),
}


def neighbors_of(state: str) -> Tuple[str, ...]:
    """Bordering states for a code, or an empty tuple when none are listed."""
    return NEIGHBOR_STATES.get(state.upper(), ())
