"""
pipeline.py – Entry point for the FX rates publisher.

Usage
-----
# Run with settings from the environment (API_URL, BUCKET_NAME, ...)
    uv run python pipeline.py

# Re-key against another base currency and print instead of uploading
    uv run python pipeline.py --base-currency EUR --dry-run

Flow
----
    Extract   →  fetch the merchant rate table from API_URL
    Transform →  re-key every currency against BASE_CURRENCY
    Serialize →  encode {"base": ..., "rates": {...}} as JSON
    Load      →  write the object to S3 (or ADLS when configured)

Any failure aborts the run before the upload, so a half-built table is
never written.
"""

import argparse
import logging
import os
import sys
import time

from config import LOG_FORMAT, LOG_LEVEL, Config, load_config
from etl.extract import fetch_merchant_rates
from etl.load import upload_s3
from etl.load_azure import upload_azure
from etl.transform import build_rates_response, encode_rates_response

# ---------------------------------------------------------------------------
# Logging – structured, timestamped output to stdout
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("pipeline")


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def publish(config: Config, payload: bytes) -> str:
    # Auto-detect backend: a storage connection string means we are
    # deployed against Azure; otherwise write to S3 in config.region.
    if config.adls_connection_string:
        return upload_azure(
            payload, config.bucket_name, config.key_name, config.adls_connection_string
        )
    return upload_s3(payload, config.bucket_name, config.key_name, config.region)


def build_payload(config: Config) -> bytes:
    """Extract, transform and serialize; everything up to the upload."""
    logger.info("[1/4] Extracting merchant rates...")
    merchant = fetch_merchant_rates(config.api_url)

    logger.info("[2/4] Re-keying against %s...", config.base_currency)
    response = build_rates_response(config.base_currency, merchant)

    logger.info("[3/4] Serializing %d rates...", len(response.rates))
    return encode_rates_response(response)


def run(config: Config) -> str:
    logger.info("=" * 60)
    logger.info("FX rates publisher starting | base=%s", config.base_currency)
    logger.info("=" * 60)

    t0 = time.perf_counter()

    payload = build_payload(config)

    logger.info("[4/4] Uploading...")
    confirmation = publish(config, payload)

    elapsed = time.perf_counter() - t0
    logger.info("=" * 60)
    logger.info("Pipeline complete in %.2fs | %s", elapsed, confirmation)
    logger.info("=" * 60)

    return confirmation


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="FX rates publisher – fetches merchant rates and writes them to object storage."
    )
    parser.add_argument(
        "--base-currency",
        default=None,
        help="Override BASE_CURRENCY for this run",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the JSON payload to stdout instead of uploading it",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    env = dict(os.environ)
    if args.base_currency:
        env["BASE_CURRENCY"] = args.base_currency
    config = load_config(env)

    if args.dry_run:
        sys.stdout.write(build_payload(config).decode("utf-8") + "\n")
        return

    print(run(config))


if __name__ == "__main__":
    main()
