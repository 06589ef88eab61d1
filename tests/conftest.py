"""
Shared fixtures for the Drip API client test suite.
"""

import os

import pytest

from drip_api_client import DripClient

from tests.helpers import ACCOUNT_ID, API_KEY


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DRIP_* env vars to ensure clean state."""
    for key in list(os.environ.keys()):
        if key.startswith("DRIP_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def client(clean_env):
    return DripClient(API_KEY, ACCOUNT_ID)


@pytest.fixture
def subscriber_payload():
    return {
        "id": "z1togz2hcjrkpp5treip",
        "status": "active",
        "email": "john@acme.com",
        "time_zone": "America/Los_Angeles",
        "utc_offset": -440,
        "custom_fields": {"name": "John Doe"},
        "tags": ["Customer", "SEO"],
        "ip_address": "111.111.111.11",
        "prospect": True,
        "lead_score": 65,
        "lifetime_value": 0,
        "created_at": "2013-06-21T10:31:58Z",
        "href": "https://api.getdrip.com/v2/9999999/subscribers/12345",
        "user_id": "123",
        "base_lead_score": 30,
        "links": {"account": "9999999"},
    }
