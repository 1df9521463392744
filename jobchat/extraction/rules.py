"""Deterministic pattern rules used by the filter extractor.

Rules are data, evaluated in declaration order. The first profession rule
that matches decides profession and specialty for the whole message.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from jobchat.domain.states import STATE_NAMES


@dataclass(frozen=True)
class KeywordRule:
    """Maps a keyword pattern to a profession and/or specialty."""

    name: str
    pattern: Pattern[str]
    profession: Optional[str] = None
    specialty: Optional[str] = None


def _rule(name: str, regex: str, profession: Optional[str] = None, specialty: Optional[str] = None) -> KeywordRule:
    return KeywordRule(name, re.compile(regex, re.IGNORECASE), profession, specialty)


# Highest priority first. Short abbreviations are case-sensitive so that
# words like "pas" or "md" in ordinary text do not count.
PROFESSION_RULES: Tuple[KeywordRule, ...] = (
    _rule("crna", r"\bCRNAs?\b", profession="CRNA", specialty="Anesthesia"),
    _rule("urgent_care", r"\burgent[\s-]+care\b", profession="Physician", specialty="Urgent Care"),
    _rule("anesthesiology", r"\banesthesi(?:a|ology|ologists?)\b", specialty="Anesthesiology"),
    _rule("radiology", r"\bradiolog\w*", specialty="Diagnostic Radiology"),
    _rule("nurse_practitioner", r"\b(?:(?-i:NPs?)|nurse\s+practitioners?)\b", profession="NP"),
    _rule("physician_assistant", r"\b(?:(?-i:PAs?)|physician\s+assistants?)\b", profession="PA"),
    _rule("md", r"\b(?-i:MDs?)\b", profession="MD"),
)

# Longest names first so "West Virginia" wins over "Virginia" at the same position
STATE_NAME_PATTERN = re.compile(
    r"\b("
    + "|".join(
        re.escape(name).replace(r"\ ", r"\s+")
        for name in sorted(STATE_NAMES.values(), key=len, reverse=True)
    )
    + r")\b",
    re.IGNORECASE,
)

STATE_TOKEN_PATTERN = re.compile(r"\b([A-Za-z]{2})\b")

# Codes that double as everyday English words only count when written in capitals
AMBIGUOUS_STATE_CODES = frozenset(
    {"AL", "CO", "DE", "HI", "ID", "IN", "LA", "MA", "ME", "MS", "MT", "OH", "OK", "OR", "PA", "WI"}
)

# A 2-4 digit amount with a "$" prefix and/or a rate unit after it
RATE_PATTERN = re.compile(
    r"(?<![\w.,$])"
    r"(?P<currency>\$\s?)?"
    r"(?P<amount>(?:\d{1,2},\d{3}|\d{2,4})(?:\.\d{1,2})?)"
    r"(?![\d,])"
    r"(?:\s*(?P<connector>/|per\b|an?\b|each\b)?\s*(?P<unit>hrs?|hours?|hourly|days?|daily)\b)?",
    re.IGNORECASE,
)

# Unit words that identify a rate on their own, without "$" or a connector.
# Plurals are left out: "12 hours" and "30 days" read as durations.
SELF_EVIDENT_UNITS = frozenset({"hr", "hrs", "hour", "hourly", "day", "daily"})

# Words after a bare "hour"/"day" that make it describe a shift, not a rate
SHIFT_WORDS_PATTERN = re.compile(r"\s*(?:shifts?|calls?|rotations?|schedules?|weeks?)\b", re.IGNORECASE)
