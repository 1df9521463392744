"""Tiered job matching engine.

Searches the catalog for postings that satisfy a FilterSet, relaxing the
constraints step by step when nothing matches:

0. exact: every present filter must hold
1. rate_relaxed: minimum rate lowered by the configured slack (only with a rate)
2. state_relaxed: state dropped, original rate kept (only with a rate and a state)
3. neighbor_states: the same filters applied to bordering states (only with a state)
4. best_overall: the highest-paying postings in the catalog

The first non-empty tier wins. Results are always catalog objects, ranked
High priority first, then by rate descending, then by catalog order.
"""

import logging
import math
from typing import Iterable, List, Mapping, Optional, Tuple

from jobchat.catalog import Catalog
from jobchat.config.models import MatchingConfig
from jobchat.domain.models import FilterSet, JobPosting, normalize_unit

from .models import MatchResult, MatchTier
from .neighbors import NEIGHBOR_STATES

logger = logging.getLogger(__name__)

BEST_OVERALL_NOTE = "No close matches for those filters, so here are the top-paying roles available right now."


def _same(a: str, b: str) -> bool:
    return a.strip().casefold() == b.strip().casefold()


def matches_filters(posting: JobPosting, filters: FilterSet) -> bool:
    """Check a posting against every present filter field."""
    if filters.state and not _same(posting.state, filters.state):
        return False
    if filters.profession and not _same(posting.profession, filters.profession):
        return False
    if filters.specialty and not _same(posting.specialty, filters.specialty):
        return False
    if filters.unit and posting.rate_unit.value != normalize_unit(filters.unit):
        return False
    if filters.min_rate is not None and posting.rate_numeric < filters.min_rate:
        return False
    return True


def rank_postings(postings: Iterable[JobPosting]) -> List[JobPosting]:
    """High priority first, then rate descending; sorted() keeps catalog order for ties."""
    return sorted(postings, key=lambda p: (not p.is_high_priority, -p.rate_numeric))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (0.5 -> 1, not 0)."""
    return int(math.floor(value + 0.5))


def format_rate(amount: float, unit: Optional[str]) -> str:
    amount_text = f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"
    unit_text = {"hour": "hr", "day": "day"}.get(unit or "hour", unit)
    return f"${amount_text}/{unit_text}"


class MatchEngine:
    """Runs the relaxation ladder over a read-only catalog.

    The engine holds no per-request state, so one instance serves every
    request and identical filters always produce identical results.
    """

    def __init__(
        self,
        catalog: Catalog,
        settings: Optional[MatchingConfig] = None,
        neighbor_table: Optional[Mapping[str, Tuple[str, ...]]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize MatchEngine.

        Args:
            catalog: Catalog to search
            settings: Ladder parameters (defaults to MatchingConfig())
            neighbor_table: State adjacency table (defaults to NEIGHBOR_STATES)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.catalog = catalog
        self.settings = settings or MatchingConfig()
        self.neighbor_table = NEIGHBOR_STATES if neighbor_table is None else neighbor_table
        self.logger = logger_instance or logger

    def filter(self, filters: FilterSet) -> List[JobPosting]:
        """Exact search: ranked postings satisfying every present filter."""
        return rank_postings(p for p in self.catalog.all() if matches_filters(p, filters))

    def search(self, filters: FilterSet) -> MatchResult:
        """Run the tiers in order and return the first non-empty result."""
        result = self._run_ladder(filters)

        self.logger.info(
            f"Match completed: {len(result)} jobs ({result.tier.value})",
            extra={
                "event": "match.completed",
                "filters": filters.to_dict(),
                **result.summary(),
            },
        )
        return result

    def _run_ladder(self, filters: FilterSet) -> MatchResult:
        exact = self.filter(filters)
        if exact:
            return MatchResult(jobs=tuple(exact), tier=MatchTier.EXACT)

        if filters.min_rate is not None:
            relaxed = self._rate_relaxed(filters)
            if relaxed is not None:
                return relaxed

            if filters.state:
                any_state = self.filter(filters.without("state"))
                if any_state:
                    return MatchResult(
                        jobs=tuple(any_state),
                        tier=MatchTier.STATE_RELAXED,
                        fallback_note=(
                            f"Nothing in {filters.state} meets {format_rate(filters.min_rate, filters.unit)}, "
                            f"so here are matching roles in other states."
                        ),
                    )

        tried: Tuple[str, ...] = ()
        if filters.state and self.settings.neighbor_expansion:
            nearby = self._neighbor_states(filters)
            if nearby.jobs:
                return nearby
            tried = nearby.tried_states

        return self._best_overall(tried)

    def _rate_relaxed(self, filters: FilterSet) -> Optional[MatchResult]:
        threshold = round_half_up(filters.min_rate * (1 - self.settings.rate_slack))
        if threshold >= filters.min_rate:
            return None

        jobs = self.filter(filters.model_copy(update={"min_rate": float(threshold)}))
        if not jobs:
            return None

        return MatchResult(
            jobs=tuple(jobs),
            tier=MatchTier.RATE_RELAXED,
            relaxed_min_rate=float(threshold),
            fallback_note=(
                f"No exact matches at {format_rate(filters.min_rate, filters.unit)}, "
                f"so this includes roles from {format_rate(threshold, filters.unit)}."
            ),
        )

    def _neighbor_states(self, filters: FilterSet) -> MatchResult:
        neighbors = self.neighbor_table.get(filters.state.upper(), ())

        cap = self.settings.neighbor_result_cap
        collected: List[JobPosting] = []
        tried: List[str] = []

        for state in neighbors[: self.settings.neighbor_probe_limit]:
            if len(collected) >= cap:
                break
            tried.append(state)
            found = self.filter(filters.model_copy(update={"state": state}))
            collected.extend(found[: cap - len(collected)])

        return MatchResult(
            jobs=tuple(collected),
            tier=MatchTier.NEIGHBOR_STATES,
            tried_states=tuple(tried),
            fallback_note=(
                f"No matches in {filters.state}, so here are matches in nearby states "
                f"({', '.join(tried)})."
            ),
        )

    def _best_overall(self, tried_states: Tuple[str, ...] = ()) -> MatchResult:
        top = sorted(self.catalog.all(), key=lambda p: -p.rate_numeric)
        return MatchResult(
            jobs=tuple(top[: self.settings.fallback_size]),
            tier=MatchTier.BEST_OVERALL,
            fallback_note=BEST_OVERALL_NOTE,
            tried_states=tried_states,
        )
