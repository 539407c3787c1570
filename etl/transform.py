"""
etl/transform.py – Transformation layer.

Re-keys the raw merchant table against a single base currency and
handles the JSON encoding of the result.

Given:  merchant[EUR][USD] = "1.1"
        merchant[GBP][USD] = "1.3"
And base USD:

Then:   {"base": "USD", "rates": {"EUR": 1.1, "GBP": 1.3}}

Every currency in the input must quote the base currency. One missing
or malformed quote fails the whole transform; there is no partial table.
"""

import json
import logging
import math
import re
from dataclasses import dataclass

from etl.errors import DecodeError, MissingBaseRateError, RateParseError, SerializeError

logger = logging.getLogger(__name__)

# Plain ASCII decimal notation with an optional exponent. float() alone
# would also accept "nan", "inf", "1_000" and non-ASCII digits.
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class RatesResponse:
    base: str
    rates: dict[str, float]


def parse_rate(currency: str, value: str) -> float:
    if not _DECIMAL_RE.fullmatch(value):
        raise RateParseError(currency, value)
    rate = float(value)
    if not math.isfinite(rate):
        # e.g. "1e999" overflows to inf
        raise RateParseError(currency, value)
    return rate


def build_rates_response(
    base_currency: str, merchant_rates: dict[str, dict[str, str]]
) -> RatesResponse:
    """
    Build the output record for one base currency.

    Parameters
    ----------
    base_currency : str
        Currency every rate is expressed against, e.g. "USD".
    merchant_rates : dict[str, dict[str, str]]
        Output of extract.fetch_merchant_rates().

    Returns
    -------
    RatesResponse with one rate per input currency.
    """
    rates: dict[str, float] = {}

    for currency, quotes in merchant_rates.items():
        if base_currency not in quotes:
            logger.error("No %s quote for %s, aborting transform", base_currency, currency)
            raise MissingBaseRateError(currency, base_currency)
        rates[currency] = parse_rate(currency, quotes[base_currency])

    logger.info("Transformation done | base=%s | %d rates", base_currency, len(rates))

    return RatesResponse(base=base_currency, rates=rates)


def encode_rates_response(response: RatesResponse) -> bytes:
    try:
        body = json.dumps(
            {"base": response.base, "rates": response.rates},
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SerializeError(f"could not encode rates for base {response.base}: {exc}") from exc
    return body.encode("utf-8")


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name}")


def decode_rates_response(payload: bytes) -> RatesResponse:
    """Inverse of encode_rates_response(), used when reading a published object back."""
    try:
        data = json.loads(payload, parse_constant=_reject_constant)
    except ValueError as exc:
        raise DecodeError(f"published payload is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or not isinstance(data.get("base"), str):
        raise DecodeError('published payload has no string "base"')

    rates = data.get("rates")
    if not isinstance(rates, dict):
        raise DecodeError('published payload has no "rates" object')

    decoded: dict[str, float] = {}
    for currency, rate in rates.items():
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise DecodeError(f"rate for {currency} is not a number: {rate!r}")
        try:
            value = float(rate)
        except OverflowError as exc:
            raise DecodeError(f"rate for {currency} is out of range") from exc
        if not math.isfinite(value):
            # e.g. 1e999 parses to inf
            raise DecodeError(f"rate for {currency} is not finite: {rate!r}")
        decoded[currency] = value

    return RatesResponse(base=data["base"], rates=decoded)
