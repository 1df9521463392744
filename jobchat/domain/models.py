"""Core domain models for job postings and search filters.

This module defines the data structures used throughout the application:
- JobPosting: one immutable job opening from the catalog
- FilterSet: structured search constraints derived from a message or query
- RateUnit / Priority: enumerations used by postings
"""

import math
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .states import state_code_for

UNIT_SYNONYMS: Dict[str, str] = {
    "hr": "hour",
    "hrs": "hour",
    "hour": "hour",
    "hours": "hour",
    "hourly": "hour",
    "day": "day",
    "days": "day",
    "daily": "day",
}


def normalize_unit(value: Optional[str]) -> Optional[str]:
    """Canonicalize a rate unit spelling.

    Known spellings map to "hour" or "day"; anything else passes through
    lower-cased so it can still be compared explicitly.

    >>> normalize_unit(" Hrs ")
    'hour'
    >>> normalize_unit("week")
    'week'
    """
    if value is None:
        return None
    cleaned = value.strip().lower().lstrip("/")
    if not cleaned:
        return None
    return UNIT_SYNONYMS.get(cleaned, cleaned)


class RateUnit(str, Enum):
    """Billing unit of a posting's rate."""

    HOUR = "hour"
    DAY = "day"


class Priority(str, Enum):
    """Recruiting priority, used only to break ranking ties."""

    HIGH = "High"
    STANDARD = "Standard"


class JobPosting(BaseModel):
    """One job opening loaded from the catalog.

    Postings are frozen: the catalog hands out references to the same objects
    for every request, so nothing downstream may modify them.

    Source files may use snake_case (job_id, rate_numeric) or camelCase
    (jobId, rateNumeric) keys. facility_id is accepted for internal use but is
    excluded from every serialized form.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "job_id": "JO-1042",
                "title": "CRNA - Locum Tenens",
                "city": "Tampa",
                "state": "FL",
                "profession": "CRNA",
                "specialty": "Anesthesia",
                "rate_numeric": 210,
                "rate_unit": "hour",
                "priority": "High",
                "meta_line": "Level I trauma center, 13-week assignment",
                "url": "https://careerclinician.com/jobs/JO-1042",
            }
        },
    )

    job_id: str = Field(..., validation_alias=AliasChoices("job_id", "jobId"))
    title: str = ""
    city: str = ""
    state: str = ""
    profession: str = ""
    specialty: str = ""
    rate_numeric: float = Field(..., ge=0, validation_alias=AliasChoices("rate_numeric", "rateNumeric"))
    rate_unit: RateUnit = Field(..., validation_alias=AliasChoices("rate_unit", "rateUnit"))
    priority: Priority = Priority.STANDARD
    meta_line: str = Field("", validation_alias=AliasChoices("meta_line", "metaLine"))
    url: Optional[str] = None
    facility_id: Optional[str] = Field(
        None, exclude=True, validation_alias=AliasChoices("facility_id", "facilityId")
    )

    @field_validator("job_id", mode="before")
    @classmethod
    def coerce_job_id(cls, v: Any) -> str:
        """Accept numeric ids, reject blank ones."""
        if isinstance(v, bool) or not isinstance(v, (str, int)):
            raise ValueError("job_id must be a string or integer")
        stripped = str(v).strip()
        if not stripped:
            raise ValueError("job_id cannot be empty")
        return stripped

    @field_validator("title", "city", "profession", "specialty", "meta_line", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("state", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> str:
        """Store states as upper-case 2-letter codes (full names are converted)."""
        if v is None:
            return ""
        raw = str(v).strip()
        if not raw:
            return ""
        code = state_code_for(raw)
        if code:
            return code
        if len(raw) == 2 and raw.isalpha():
            return raw.upper()
        raise ValueError(f"state must be a 2-letter code, got: {raw!r}")

    @field_validator("rate_unit", mode="before")
    @classmethod
    def canonical_rate_unit(cls, v: Any) -> Any:
        if isinstance(v, str):
            return normalize_unit(v)
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v: Any) -> Priority:
        """Anything other than a case-insensitive "high" is Standard priority."""
        if isinstance(v, Priority):
            return v
        if isinstance(v, str) and v.strip().lower() == "high":
            return Priority.HIGH
        return Priority.STANDARD

    @field_validator("url", mode="before")
    @classmethod
    def blank_url_is_missing(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        stripped = str(v).strip()
        return stripped or None

    @property
    def is_high_priority(self) -> bool:
        return self.priority == Priority.HIGH

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize for API clients and prompts (internal identifiers omitted)."""
        return self.model_dump(mode="json")


def _optional_text(v: Any) -> Optional[str]:
    if not isinstance(v, str):
        return None
    stripped = " ".join(v.split())
    return stripped or None


class FilterSet(BaseModel):
    """Structured search constraints. Absent fields impose no constraint.

    Construction never fails on bad input: a value that cannot be understood
    (non-numeric or negative rate, blank or non-string text) becomes absent.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    state: Optional[str] = None
    profession: Optional[str] = None
    specialty: Optional[str] = None
    min_rate: Optional[float] = Field(None, validation_alias=AliasChoices("min_rate", "minRate"))
    unit: Optional[str] = None

    @field_validator("state", mode="before")
    @classmethod
    def lenient_state(cls, v: Any) -> Optional[str]:
        text = _optional_text(v)
        if text is None:
            return None
        return state_code_for(text) or text.upper()

    @field_validator("profession", "specialty", mode="before")
    @classmethod
    def lenient_text(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("min_rate", mode="before")
    @classmethod
    def lenient_rate(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, str):
            v = v.strip().lstrip("$").replace(",", "")
            if not v:
                return None
        try:
            rate = float(v)
        except (TypeError, ValueError):
            return None
        if math.isnan(rate) or math.isinf(rate) or rate < 0:
            return None
        return rate

    @field_validator("unit", mode="before")
    @classmethod
    def lenient_unit(cls, v: Any) -> Optional[str]:
        return normalize_unit(_optional_text(v))

    @classmethod
    def from_raw(cls, data: Any) -> "FilterSet":
        """Build from untrusted request data; non-mappings yield an empty set."""
        if not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())

    def without(self, *field_names: str) -> "FilterSet":
        """Copy with the named constraints removed."""
        return self.model_copy(update={name: None for name in field_names})

    def to_dict(self) -> Dict[str, Any]:
        """Present fields only, keyed the way API clients send them."""
        keys = {"min_rate": "minRate"}
        return {
            keys.get(name, name): value
            for name, value in self.model_dump().items()
            if value is not None
        }
