"""
validate.py – Reads the published rates object back and prints it.

Usage
-----
    uv run python validate.py

Purpose
-------
Confirms that the last run left a usable artifact behind:
  - the object at BUCKET_NAME/KEY_NAME exists and decodes
    (read from ADLS when ADLS_CONNECTION_STRING is set, S3 otherwise,
    matching the backend pipeline.publish() writes to)
  - the base currency matches BASE_CURRENCY
  - lists every rate, sorted by currency
"""

import boto3
from azure.storage.blob import BlobServiceClient

from config import Config, load_config
from etl.transform import decode_rates_response

SEPARATOR = "-" * 70


def read_published(config: Config) -> bytes:
    if config.adls_connection_string:
        print(f"Reading: container {config.bucket_name}, blob {config.key_name}")
        client = BlobServiceClient.from_connection_string(config.adls_connection_string)
        blob = client.get_container_client(config.bucket_name).download_blob(config.key_name)
        return blob.readall()

    print(f"Reading: s3://{config.bucket_name}/{config.key_name}")
    client = boto3.session.Session(region_name=config.region).client("s3")
    obj = client.get_object(Bucket=config.bucket_name, Key=config.key_name)
    return obj["Body"].read()


def main() -> None:
    config = load_config()
    response = decode_rates_response(read_published(config))

    print(SEPARATOR)
    print(f"  base: {response.base}  ({len(response.rates)} rates)")
    print(SEPARATOR)
    for currency, rate in sorted(response.rates.items()):
        print(f"  {currency:<6} {rate}")

    if response.base != config.base_currency:
        raise SystemExit(
            f"base mismatch: object has {response.base}, expected {config.base_currency}"
        )


if __name__ == "__main__":
    main()
