"""Shared fixtures for catalog-backed tests."""

import pytest

from jobchat.catalog import Catalog, parse_catalog

from tests.helpers.factories import make_posting


@pytest.fixture
def posting_factory():
    """Factory fixture returning make_posting."""
    return make_posting


@pytest.fixture
def scenario_catalog() -> Catalog:
    """Two Florida CRNA postings differing in rate and priority."""
    return parse_catalog(
        [
            {"jobId": "JO-1", "state": "FL", "profession": "CRNA", "rateNumeric": 200, "rateUnit": "hour", "priority": "High"},
            {"jobId": "JO-2", "state": "FL", "profession": "CRNA", "rateNumeric": 150, "rateUnit": "hour", "priority": "Standard"},
        ]
    )


@pytest.fixture
def sample_records():
    """A small mixed catalog as raw source records."""
    return [
        {"jobId": "FL-1", "title": "CRNA Tampa", "city": "Tampa", "state": "FL", "profession": "CRNA", "specialty": "Anesthesia", "rateNumeric": 210, "rateUnit": "hour", "priority": "High", "facilityId": "FAC-1"},
        {"jobId": "FL-2", "title": "CRNA Orlando", "city": "Orlando", "state": "FL", "profession": "CRNA", "specialty": "Anesthesia", "rateNumeric": 180, "rateUnit": "hour", "priority": "Standard", "facilityId": "FAC-2"},
        {"jobId": "GA-1", "title": "CRNA Atlanta", "city": "Atlanta", "state": "GA", "profession": "CRNA", "specialty": "Anesthesia", "rateNumeric": 190, "rateUnit": "hour", "priority": "Standard"},
        {"jobId": "TX-1", "title": "CRNA Houston", "city": "Houston", "state": "TX", "profession": "CRNA", "specialty": "Anesthesia", "rateNumeric": 230, "rateUnit": "hour", "priority": "Standard"},
        {"jobId": "TX-2", "title": "Urgent Care Physician", "city": "Dallas", "state": "TX", "profession": "Physician", "specialty": "Urgent Care", "rateNumeric": 160, "rateUnit": "hour", "priority": "High"},
        {"jobId": "CA-1", "title": "Radiologist", "city": "Sacramento", "state": "CA", "profession": "Physician", "specialty": "Diagnostic Radiology", "rateNumeric": 3200, "rateUnit": "day", "priority": "Standard"},
        {"jobId": "AZ-1", "title": "Family NP", "city": "Phoenix", "state": "AZ", "profession": "NP", "specialty": "Family Medicine", "rateNumeric": 95, "rateUnit": "hour", "priority": "Standard"},
        {"jobId": "AL-1", "title": "Anesthesiologist", "city": "Birmingham", "state": "AL", "profession": "Physician", "specialty": "Anesthesiology", "rateNumeric": 2800, "rateUnit": "day", "priority": "High"},
    ]


@pytest.fixture
def sample_catalog(sample_records) -> Catalog:
    """sample_records loaded into a Catalog."""
    return parse_catalog(sample_records)
