"""Data models for the matching engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from jobchat.domain.models import JobPosting


class MatchTier(str, Enum):
    """Relaxation level that produced a result, in the order they are tried."""

    EXACT = "exact"
    RATE_RELAXED = "rate_relaxed"
    STATE_RELAXED = "state_relaxed"
    NEIGHBOR_STATES = "neighbor_states"
    BEST_OVERALL = "best_overall"


@dataclass(frozen=True)
class MatchResult:
    """Ranked postings for one search.

    Attributes:
        jobs: Postings in rank order; the same objects the catalog holds
        tier: Which rung of the relaxation ladder produced them
        fallback_note: Why the results differ from an exact match (None for exact)
        relaxed_min_rate: Rate threshold actually applied by the rate-relaxed tier
        tried_states: Bordering states probed by the neighbor tier
    """

    jobs: Tuple[JobPosting, ...]
    tier: MatchTier = MatchTier.EXACT
    fallback_note: Optional[str] = None
    relaxed_min_rate: Optional[float] = None
    tried_states: Tuple[str, ...] = ()

    @property
    def is_exact(self) -> bool:
        return self.tier == MatchTier.EXACT

    @property
    def job_ids(self) -> Tuple[str, ...]:
        return tuple(job.job_id for job in self.jobs)

    def __len__(self) -> int:
        return len(self.jobs)

    def summary(self) -> Dict[str, Any]:
        """Lightweight description for logs and API responses."""
        return {
            "tier": self.tier.value,
            "result_count": len(self.jobs),
            "fallback_note": self.fallback_note,
            "relaxed_min_rate": self.relaxed_min_rate,
            "tried_states": list(self.tried_states),
        }
