"""
etl/load.py – Load layer (S3).

Writes the encoded rates payload to a single S3 object, replacing
whatever was stored under that key before.

Credentials are resolved by boto3's usual chain (Lambda execution role,
environment, shared config); only the region is passed in explicitly.
A fresh session is created per call so nothing is shared between
invocations.
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from config import CONTENT_TYPE
from etl.errors import UploadError

logger = logging.getLogger(__name__)


def _get_client(region: str):
    """Build an S3 client for the given region from a new boto3 session."""
    return boto3.session.Session(region_name=region).client("s3")


def upload_s3(payload: bytes, bucket: str, key: str, region: str) -> str:
    """
    Upload the payload as the full content of s3://bucket/key.

    Returns
    -------
    str – confirmation message naming bucket and key.
    """
    logger.info("Writing to S3 | bucket: %s | key: %s | region: %s", bucket, key, region)

    try:
        client = _get_client(region)
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=payload,
            ContentType=CONTENT_TYPE,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("S3 upload failed: %s", exc)
        raise UploadError(bucket, key, exc) from exc

    logger.info("Uploaded %s (%d bytes)", key, len(payload))

    return f"Successfully uploaded rates to s3://{bucket}/{key}"
