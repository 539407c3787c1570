"""
Shared pytest fixtures for the FX rates publisher test suite.
"""

import json
from unittest.mock import Mock

import pytest

from config import Config


# Same structure as what fetch_merchant_rates() returns.
# Using a fixed dataset means tests are fast, deterministic, and don't hit the API.
@pytest.fixture
def merchant_rates():
    return {
        "EUR": {"USD": "1.1", "GBP": "0.86"},
        "GBP": {"USD": "1.3", "EUR": "1.16"},
        "NOK": {"USD": "0.094", "EUR": "0.085"},
    }


@pytest.fixture
def env():
    return {
        "API_URL": "https://rates.example.com/v1/merchant",
        "BUCKET_NAME": "fx-rates",
        "KEY_NAME": "rates/latest.json",
        "REGION": "eu-west-1",
        "BASE_CURRENCY": "USD",
    }


@pytest.fixture
def config(env):
    return Config(
        api_url=env["API_URL"],
        bucket_name=env["BUCKET_NAME"],
        key_name=env["KEY_NAME"],
        region=env["REGION"],
        base_currency=env["BASE_CURRENCY"],
    )


@pytest.fixture
def set_env(env, monkeypatch):
    """Export the fixture settings as real environment variables."""
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("ADLS_CONNECTION_STRING", raising=False)
    return env


@pytest.fixture
def make_response():
    """Factory for stand-ins of a streamed requests.Response."""
    def _make(body=None, status_code=200):
        response = Mock()
        response.status_code = status_code
        raw = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
        response.iter_content.return_value = iter([raw])
        return response
    return _make
