"""
etl/load_azure.py – Azure load layer.

Writes the encoded rates payload to ADLS Gen2 / Blob Storage instead of
S3. Selected by pipeline.run() when ADLS_CONNECTION_STRING is set.

Mapping of the common settings
------------------------------
    BUCKET_NAME  → container name
    KEY_NAME     → blob path, e.g. "rates/latest.json"
"""

import logging

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings

from config import CONTENT_TYPE
from etl.errors import UploadError

logger = logging.getLogger(__name__)


def _get_client(connection_string: str) -> BlobServiceClient:
    """Build a BlobServiceClient from a storage account connection string."""
    return BlobServiceClient.from_connection_string(connection_string)


def upload_azure(
    payload: bytes,
    container: str,
    blob_name: str,
    connection_string: str,
) -> str:
    """Upload the payload as blob_name in container, overwriting any existing blob."""
    logger.info("Writing to ADLS Gen2 | container: %s | blob: %s", container, blob_name)

    try:
        client = _get_client(connection_string)
        client.get_container_client(container).upload_blob(
            name=blob_name,
            data=payload,
            overwrite=True,
            content_settings=ContentSettings(content_type=CONTENT_TYPE),
        )
    except (AzureError, ValueError) as exc:
        # ValueError: malformed connection string
        logger.error("Azure upload failed: %s", exc)
        raise UploadError(container, blob_name, exc) from exc

    logger.info("Uploaded %s (%d bytes)", blob_name, len(payload))

    return f"Successfully uploaded rates to container {container}, blob {blob_name}"
