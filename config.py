"""
config.py – Central configuration for the FX rates publisher.
Tuneable constants live here; per-invocation settings come from the
environment through load_config() so nothing is hard-coded elsewhere.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from etl.errors import ConfigurationError

# ---------------------------------------------------------------------------
# FX Data Source
# The upstream API publishes a nested "merchant" table:
#   {"merchant": {"EUR": {"USD": "1.1", ...}, ...}}
# ---------------------------------------------------------------------------
API_TIMEOUT_SECONDS: int = 15

# ---------------------------------------------------------------------------
# Output artifact
# ---------------------------------------------------------------------------
CONTENT_TYPE: str = "application/json"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s – %(message)s"

# ---------------------------------------------------------------------------
# Environment variables read on every invocation.
# ---------------------------------------------------------------------------
REQUIRED_ENV_VARS: tuple[str, ...] = (
    "API_URL",
    "BUCKET_NAME",
    "KEY_NAME",
    "REGION",
    "BASE_CURRENCY",
)

# When set, the payload goes to Azure Blob Storage instead of S3.
AZURE_CONNECTION_ENV_VAR: str = "ADLS_CONNECTION_STRING"


@dataclass(frozen=True)
class Config:
    api_url: str
    bucket_name: str
    key_name: str
    region: str
    base_currency: str
    adls_connection_string: Optional[str] = None


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build a Config from environment variables.

    Every required variable is checked before anything else runs, and all
    missing names are reported together in one ConfigurationError.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name)]
    if missing:
        raise ConfigurationError(missing)

    return Config(
        api_url=env["API_URL"],
        bucket_name=env["BUCKET_NAME"],
        key_name=env["KEY_NAME"],
        region=env["REGION"],
        base_currency=env["BASE_CURRENCY"],
        adls_connection_string=env.get(AZURE_CONNECTION_ENV_VAR) or None,
    )
