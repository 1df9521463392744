"""Free-text filter extraction.

Turns a chat message into a FilterSet with deterministic pattern rules, then
lets explicit structured filters from the caller override it field by field.

State precedence when a message mentions several states:
1. A full state name beats a 2-letter code
2. Among matches of the same kind, the first one in the text wins
Tokens already claimed by a profession rule ("PA", "MD") are never read as a
state code.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from jobchat.domain.models import FilterSet, normalize_unit
from jobchat.domain.states import STATE_CODES, NAME_TO_CODE

from .rules import (
    AMBIGUOUS_STATE_CODES,
    PROFESSION_RULES,
    RATE_PATTERN,
    SELF_EVIDENT_UNITS,
    SHIFT_WORDS_PATTERN,
    STATE_NAME_PATTERN,
    STATE_TOKEN_PATTERN,
)

logger = logging.getLogger(__name__)

Span = Tuple[int, int]


def extract_profession(text: str) -> Tuple[Dict[str, str], List[Span]]:
    """Apply profession rules in priority order; the first match wins.

    Returns:
        Tuple of (fields set by the rule, spans the rule's matches consumed)
    """
    for rule in PROFESSION_RULES:
        matches = list(rule.pattern.finditer(text))
        if not matches:
            continue

        fields = {}
        if rule.profession:
            fields["profession"] = rule.profession
        if rule.specialty:
            fields["specialty"] = rule.specialty
        return fields, [m.span() for m in matches]

    return {}, []


def extract_state(text: str, reserved: Optional[List[Span]] = None) -> Optional[str]:
    """Find the state a message refers to.

    Args:
        text: Message text
        reserved: Spans already consumed by other rules

    Returns:
        2-letter state code, or None
    """
    name_match = STATE_NAME_PATTERN.search(text)
    if name_match:
        return NAME_TO_CODE[" ".join(name_match.group(1).lower().split())]

    reserved = reserved or []
    for match in STATE_TOKEN_PATTERN.finditer(text):
        token = match.group(1)
        code = token.upper()
        if code not in STATE_CODES:
            continue
        if token != code and (code in AMBIGUOUS_STATE_CODES or text.startswith("-", match.end())):
            continue
        if any(start < match.end() and match.start() < end for start, end in reserved):
            continue
        return code

    return None


def extract_rate(text: str) -> Tuple[Optional[float], Optional[str]]:
    """Find the first currency-like rate in the text.

    An amount counts when it has a "$" prefix, a connector before a unit
    ("/hr", "per day", "an hour"), or a self-evident unit ("hourly", "200 hour").
    A bare unit followed by a shift word ("12 hour shifts") is a duration.

    Returns:
        Tuple of (minimum rate, canonical unit); unit defaults to "hour"
    """
    for match in RATE_PATTERN.finditer(text):
        unit = match.group("unit")
        has_currency = match.group("currency") is not None
        has_connector = match.group("connector") is not None
        self_evident = (
            unit is not None
            and unit.lower() in SELF_EVIDENT_UNITS
            and not SHIFT_WORDS_PATTERN.match(text, match.end())
        )

        if not (has_currency or has_connector or self_evident):
            continue

        amount = float(match.group("amount").replace(",", ""))
        return amount, normalize_unit(unit) if unit else "hour"

    return None, None


def extract_filters(text: str) -> FilterSet:
    """Extract a FilterSet from free text.

    A message without any recognizable signal yields an empty FilterSet.

    Example:
        >>> extract_filters("CRNA job in Texas around $200/hr").to_dict()
        {'state': 'TX', 'profession': 'CRNA', 'specialty': 'Anesthesia', 'minRate': 200.0, 'unit': 'hour'}
    """
    if not text or not text.strip():
        return FilterSet()

    fields: Dict[str, Any] = {}

    profession_fields, reserved = extract_profession(text)
    fields.update(profession_fields)

    state = extract_state(text, reserved)
    if state:
        fields["state"] = state

    min_rate, unit = extract_rate(text)
    if min_rate is not None:
        fields["min_rate"] = min_rate
        fields["unit"] = unit

    return FilterSet.model_validate(fields)


def merge_filters(
    extracted: FilterSet,
    explicit: Union[FilterSet, Dict[str, Any], None] = None,
) -> FilterSet:
    """Overlay explicit filters onto text-derived ones, field by field.

    Explicit fields win whenever they are present and valid; malformed
    explicit values are treated as absent and leave the extracted value.
    """
    if explicit is None:
        return extracted
    if not isinstance(explicit, FilterSet):
        explicit = FilterSet.from_raw(explicit)

    overrides = {name: value for name, value in explicit.model_dump().items() if value is not None}
    if not overrides:
        return extracted
    return extracted.model_copy(update=overrides)


class FilterExtractor:
    """Message-to-FilterSet service used by the chat endpoint."""

    def __init__(self, logger_instance: Optional[logging.Logger] = None):
        self.logger = logger_instance or logger

    def extract(
        self,
        message: str,
        explicit: Union[FilterSet, Dict[str, Any], None] = None,
    ) -> FilterSet:
        """Extract filters from a message and merge caller-supplied filters over them."""
        extracted = extract_filters(message)
        merged = merge_filters(extracted, explicit)

        self.logger.debug(
            "Filters extracted",
            extra={
                "event": "filters.extracted",
                "extracted": extracted.to_dict(),
                "filters": merged.to_dict(),
            },
        )
        return merged
