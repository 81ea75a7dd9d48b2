"""Shared fixtures for the currency converter tests."""

from unittest.mock import MagicMock

import pytest
import requests

from currency_converter.config import Source

PRIMARY = "https://primary.test"
FALLBACK = "https://fallback.test"


@pytest.fixture
def sources():
    """Two-step fallback chain pointing at fake hosts."""
    return [Source("primary", PRIMARY), Source("fallback", FALLBACK)]


@pytest.fixture
def make_response():
    """Build a fake requests.Response with a JSON body or an HTTP error."""

    def _make(payload=None, status=200, bad_json=False):
        resp = MagicMock()
        resp.status_code = status
        if status >= 400:
            resp.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
        if bad_json:
            resp.json.side_effect = ValueError("Expecting value")
        else:
            resp.json.return_value = payload
        return resp

    return _make


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    for name in (
        "CURRENCY_API_PRIMARY_BASE",
        "CURRENCY_API_FALLBACK_BASE",
        "CURRENCY_API_TIMEOUT",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("currency_converter.config.load_dotenv", lambda *a, **k: False)
