"""
handler.py – AWS Lambda entry point.

Invoked by an external schedule (e.g. an EventBridge rule). The event
payload is ignored: everything the run needs comes from the function's
environment variables. Errors are not caught here, so a failed run is
reported as a failed invocation and the platform decides about retries.
"""

import logging

from config import load_config
from pipeline import run

logger = logging.getLogger(__name__)


def lambda_handler(event, context) -> str:
    """Run the pipeline once and return the upload confirmation."""
    logger.info("Lambda invoked | request_id=%s", getattr(context, "aws_request_id", None))

    config = load_config()
    return run(config)
