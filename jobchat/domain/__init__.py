"""Domain models for the jobchat service."""

from .models import FilterSet, JobPosting, Priority, RateUnit, normalize_unit
from .states import STATE_CODES, STATE_NAMES, state_code_for

__all__ = [
    "JobPosting",
    "FilterSet",
    "Priority",
    "RateUnit",
    "normalize_unit",
    "STATE_CODES",
    "STATE_NAMES",
    "state_code_for",
]
