"""Shared fixtures: canned generator payloads, scripted generators, API client."""

import json
from unittest.mock import AsyncMock

import pytest

from bill_reader.core.config import Settings

LONG_SUMMARY = (
    "This act establishes a statewide grant program for rural broadband expansion. "
    "It directs the department of commerce to award competitive grants to internet "
    "service providers that commit to serving unserved households, sets reporting "
    "requirements for grantees, and creates an oversight board that reviews progress "
    "annually and reports its findings to the legislature."
)

BILL_TEXT = (
    "HOUSE BILL 1234\nAN ACT relating to rural broadband; creating a grant program.\n"
    "Section 1. The department of commerce shall administer the program.\n"
    "Section 2. Grants may only be awarded to providers serving unserved households.\n"
)

RESEARCH = {
    "financialImplications": "Appropriates $25 million from the general fund. (AI)",
    "ideologicalLeaning": "Broadly bipartisan with a moderate lean. (AI)",
    "advocacyGroupPositions": "Rural cooperatives support the bill. (AI)",
    "changesTo": "Creates a new chapter in the commerce code. (AI)",
    "similarLaws": "Minnesota and Tennessee run comparable programs. (AI)",
    "otherFactors": "Federal funds may overlap with this program. (AI)",
    "citations": ["https://legislature.example.gov/hb1234", "Legiscan HB 1234"],
}


@pytest.fixture
def long_summary():
    return LONG_SUMMARY


@pytest.fixture
def bill_text():
    return BILL_TEXT


@pytest.fixture
def extraction_payload():
    return {
        "billNumber": "HB 1234",
        "billName": "Rural Broadband Expansion Act",
        "state": "Utah",
        "yearIntroduced": 2023,
        "sponsors": ["Rep. Jane Doe"],
        "cosponsors": ["Rep. John Roe", "Sen. Ann Poe"],
        "committee": "House Economic Development Committee",
        "summary": LONG_SUMMARY,
        "sections": [
            {"number": "1", "description": "Program administration."},
            {"number": "2", "description": "Grant eligibility."},
        ],
    }


@pytest.fixture
def research_payload():
    return dict(RESEARCH)


@pytest.fixture
def search_payload(extraction_payload, research_payload):
    payload = dict(extraction_payload)
    payload.update(research_payload)
    return payload


@pytest.fixture
def scripted_generator():
    """Build a generator whose successive calls return (or raise) the given items."""

    def _build(*responses):
        gen = AsyncMock()
        gen.generate.side_effect = [
            r if isinstance(r, (str, BaseException)) else json.dumps(r) for r in responses
        ]
        return gen

    return _build


@pytest.fixture
def test_settings(tmp_path):
    settings = Settings()
    settings.UPLOAD_DIR = tmp_path / "uploads"
    settings.GENERATION_TIMEOUT_S = 5
    return settings
