"""
function_app.py – Azure Functions v2 entry point.

Uses the decorator-based programming model (v2), so no function.json is
needed. Scheduling is owned by the caller (e.g. Azure Data Factory or a
Logic App), which POSTs to /api/fx_rates with a function key.

Pair with ADLS_CONNECTION_STRING to publish into Blob Storage; without
it the run writes to S3 like the Lambda deployment.
"""

import logging

import azure.functions as func

from config import load_config
from pipeline import run

app = func.FunctionApp()


@app.route(route="fx_rates", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def fx_rates(req: func.HttpRequest) -> func.HttpResponse:
    """HTTP trigger: run the pipeline once and answer with the confirmation."""
    logging.info("FX rates publish triggered via HTTP.")

    confirmation = run(load_config())

    logging.info("FX rates publish complete.")
    return func.HttpResponse(confirmation, status_code=200)
