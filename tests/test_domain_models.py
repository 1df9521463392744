"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from jobchat.domain.models import FilterSet, JobPosting, Priority, RateUnit, normalize_unit
from jobchat.domain.states import state_code_for


class TestJobPosting:
    """Tests for JobPosting model."""

    def test_valid_posting_from_camel_case(self):
        """Test creating a posting from camelCase source keys."""
        posting = JobPosting.model_validate(
            {
                "jobId": "JO-1",
                "title": "CRNA",
                "city": "Tampa",
                "state": "FL",
                "profession": "CRNA",
                "specialty": "Anesthesia",
                "rateNumeric": 200,
                "rateUnit": "hour",
                "priority": "High",
                "metaLine": "13 weeks",
            }
        )

        assert posting.job_id == "JO-1"
        assert posting.rate_numeric == 200
        assert posting.rate_unit == RateUnit.HOUR
        assert posting.priority == Priority.HIGH
        assert posting.meta_line == "13 weeks"
        assert posting.is_high_priority is True

    def test_schema_example_is_valid(self):
        """Test that the documented schema example validates as a posting."""
        example = JobPosting.model_json_schema()["example"]
        posting = JobPosting.model_validate(example)

        assert posting.job_id == "JO-1042"
        assert posting.priority == Priority.HIGH

    def test_valid_posting_from_snake_case(self, posting_factory):
        """Test creating a posting from snake_case keys."""
        posting = posting_factory(job_id="JO-9", rate_numeric=99.5)

        assert posting.job_id == "JO-9"
        assert posting.rate_numeric == 99.5

    def test_numeric_job_id_is_coerced(self, posting_factory):
        """Test that integer ids become strings."""
        posting = posting_factory(job_id=1042)
        assert posting.job_id == "1042"

    def test_blank_job_id_rejected(self, posting_factory):
        """Test that an empty job id fails validation."""
        with pytest.raises(ValidationError):
            posting_factory(job_id="   ")

    def test_missing_rate_rejected(self):
        """Test that rate_numeric is required."""
        with pytest.raises(ValidationError):
            JobPosting.model_validate({"jobId": "JO-1", "rateUnit": "hour"})

    def test_negative_rate_rejected(self, posting_factory):
        """Test that negative rates fail validation."""
        with pytest.raises(ValidationError):
            posting_factory(rate_numeric=-1)

    def test_unit_synonyms_normalized(self, posting_factory):
        """Test that unit spellings map to canonical units."""
        assert posting_factory(rate_unit="hrs").rate_unit == RateUnit.HOUR
        assert posting_factory(rate_unit="Daily").rate_unit == RateUnit.DAY

    def test_unknown_unit_rejected(self, posting_factory):
        """Test that units outside hour/day fail validation."""
        with pytest.raises(ValidationError):
            posting_factory(rate_unit="week")

    def test_state_name_converted_to_code(self, posting_factory):
        """Test that full state names are stored as codes."""
        assert posting_factory(state="texas").state == "TX"
        assert posting_factory(state="fl").state == "FL"

    def test_invalid_state_rejected(self, posting_factory):
        """Test that a state that is neither name nor 2-letter code fails."""
        with pytest.raises(ValidationError):
            posting_factory(state="Florida Keys")

    def test_non_high_priority_is_standard(self, posting_factory):
        """Test that any priority other than High is Standard."""
        assert posting_factory(priority="HIGH").priority == Priority.HIGH
        assert posting_factory(priority="urgent").priority == Priority.STANDARD
        assert posting_factory(priority=None).priority == Priority.STANDARD

    def test_text_fields_stripped(self, posting_factory):
        """Test that whitespace is stripped from text fields."""
        posting = posting_factory(title="  CRNA  ", city=" Tampa ")
        assert posting.title == "CRNA"
        assert posting.city == "Tampa"

    def test_blank_url_becomes_none(self, posting_factory):
        """Test that a blank URL is treated as missing."""
        assert posting_factory(url="  ").url is None

    def test_posting_is_frozen(self, posting_factory):
        """Test that postings cannot be modified."""
        posting = posting_factory()
        with pytest.raises(ValidationError):
            posting.rate_numeric = 1

    def test_public_dict_excludes_facility_id(self, posting_factory):
        """Test that the internal facility id never reaches serialized output."""
        posting = posting_factory(facility_id="FAC-1")

        assert posting.facility_id == "FAC-1"
        public = posting.to_public_dict()
        assert "facility_id" not in public
        assert "FAC-1" not in str(public)
        assert public["rate_unit"] == "hour"
        assert public["priority"] == "Standard"


class TestFilterSet:
    """Tests for FilterSet model."""

    def test_empty_filter_set(self):
        """Test that a default FilterSet imposes no constraint."""
        filters = FilterSet()
        assert filters.is_empty()
        assert filters.to_dict() == {}

    def test_min_rate_alias(self):
        """Test that minRate is accepted as an alias."""
        assert FilterSet.model_validate({"minRate": 200}).min_rate == 200.0

    @pytest.mark.parametrize("value", ["abc", -5, "", None, True, float("nan")])
    def test_malformed_rate_is_absent(self, value):
        """Test that unusable rates become absent instead of failing."""
        assert FilterSet.model_validate({"min_rate": value}).min_rate is None

    def test_rate_string_parsed(self):
        """Test that currency strings are parsed."""
        assert FilterSet.model_validate({"min_rate": "$1,200"}).min_rate == 1200.0

    def test_state_normalized(self):
        """Test that state names and lowercase codes are normalized."""
        assert FilterSet(state="texas").state == "TX"
        assert FilterSet(state="fl").state == "FL"
        assert FilterSet(state="zz").state == "ZZ"

    def test_non_string_text_is_absent(self):
        """Test that non-string text fields become absent."""
        filters = FilterSet.model_validate({"profession": 5, "specialty": "   "})
        assert filters.profession is None
        assert filters.specialty is None

    def test_unit_normalized(self):
        """Test that unit spellings are canonicalized."""
        assert FilterSet(unit="hrs").unit == "hour"

    def test_from_raw_non_mapping(self):
        """Test that non-mapping input yields an empty set."""
        assert FilterSet.from_raw("state=FL").is_empty()
        assert FilterSet.from_raw(None).is_empty()

    def test_without_removes_fields(self):
        """Test that without() drops only the named constraints."""
        filters = FilterSet(state="FL", profession="CRNA", min_rate=200)
        relaxed = filters.without("state")

        assert relaxed.state is None
        assert relaxed.profession == "CRNA"
        assert relaxed.min_rate == 200
        assert filters.state == "FL"

    def test_to_dict_uses_client_keys(self):
        """Test that to_dict omits absent fields and uses minRate."""
        filters = FilterSet(state="TX", min_rate=200, unit="hour")
        assert filters.to_dict() == {"state": "TX", "minRate": 200.0, "unit": "hour"}


class TestHelpers:
    """Tests for unit and state helpers."""

    def test_normalize_unit(self):
        assert normalize_unit(" Hrs ") == "hour"
        assert normalize_unit("/day") == "day"
        assert normalize_unit("week") == "week"
        assert normalize_unit("  ") is None
        assert normalize_unit(None) is None

    def test_state_code_for(self):
        assert state_code_for("new   york") == "NY"
        assert state_code_for("District of Columbia") == "DC"
        assert state_code_for("Atlantis") is None
