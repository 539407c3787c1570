"""
etl/extract.py – Extraction layer.

Calls the upstream rates API once and returns its "merchant" table.

Expected response (HTTP 200):
  {
    "merchant": {
      "EUR": {"USD": "1.1",  "GBP": "0.86", ...},
      "GBP": {"USD": "1.3",  "EUR": "1.16", ...},
      ...
    }
  }

Rates arrive as decimal strings and are passed through untouched;
parsing them is the transform step's job.
"""

import json
import logging
import time

import requests

from config import API_TIMEOUT_SECONDS
from etl.errors import DecodeError, FetchError, UnexpectedStatusError

logger = logging.getLogger(__name__)

MerchantRates = dict[str, dict[str, str]]

CHUNK_SIZE = 64 * 1024


def _read_body(response: requests.Response, url: str, deadline: float) -> bytes:
    """Consume the whole body, giving up once the deadline has passed."""
    chunks = []
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if time.monotonic() > deadline:
                logger.error("Rates API body not received within %ds", API_TIMEOUT_SECONDS)
                raise FetchError(url, f"body not received within {API_TIMEOUT_SECONDS}s")
            chunks.append(chunk)
    except requests.exceptions.RequestException as exc:
        logger.error("Network error reading rates API body: %s", exc)
        raise FetchError(url, exc) from exc
    return b"".join(chunks)


def _check_shape(data: object) -> MerchantRates:
    if not isinstance(data, dict):
        raise DecodeError("response body is not a JSON object")

    merchant = data.get("merchant")
    if not isinstance(merchant, dict):
        raise DecodeError('response body has no "merchant" object')

    for currency, quotes in merchant.items():
        if not isinstance(quotes, dict):
            raise DecodeError(f"rates for {currency} are not a JSON object")
        for ref_currency, rate in quotes.items():
            if not isinstance(rate, str):
                raise DecodeError(
                    f"rate {currency}/{ref_currency} is not a string: {rate!r}"
                )

    return merchant


def fetch_merchant_rates(url: str) -> MerchantRates:
    """
    Fetch the merchant rate table from the upstream API.

    Parameters
    ----------
    url : str – full endpoint URL (API_URL)

    Returns
    -------
    dict[str, dict[str, str]]
        Maps each currency to its quotes against reference currencies.
        Example:
            {
              "EUR": {"USD": "1.1"},
              "GBP": {"USD": "1.3"},
            }

    Raises
    ------
    FetchError            – connection refused, DNS failure, timeout,
                            body not received within API_TIMEOUT_SECONDS
    UnexpectedStatusError – any status other than 200
    DecodeError           – body is not JSON or not the expected shape
    """
    logger.info("Calling rates API | %s", url)

    # timeout= bounds connect and each socket read; the deadline bounds the
    # whole exchange, including a body that trickles in slowly.
    deadline = time.monotonic() + API_TIMEOUT_SECONDS

    try:
        response = requests.get(url, timeout=API_TIMEOUT_SECONDS, stream=True)
    except requests.exceptions.RequestException as exc:
        logger.error("Network error reaching rates API: %s", exc)
        raise FetchError(url, exc) from exc

    try:
        if response.status_code != 200:
            logger.error("Unexpected status from rates API: %d", response.status_code)
            raise UnexpectedStatusError(url, response.status_code)

        body = _read_body(response, url, deadline)
    finally:
        response.close()

    try:
        data = json.loads(body)
    except ValueError as exc:
        logger.error("Malformed JSON from rates API: %s", exc)
        raise DecodeError(f"decode failed | url={url}: {exc}") from exc

    merchant = _check_shape(data)

    logger.info("Extraction done | %d currencies fetched", len(merchant))

    return merchant
