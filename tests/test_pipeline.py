"""
End-to-end tests for pipeline.run() and the Lambda handler.
HTTP and S3 are mocked at the library boundary, so the real extract,
transform and load code runs.
"""

import dataclasses
import json
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from etl.errors import (
    ConfigurationError,
    MissingBaseRateError,
    UnexpectedStatusError,
    UploadError,
)
from handler import lambda_handler
from pipeline import main, run

SCENARIO = {"merchant": {"EUR": {"USD": "1.1"}, "GBP": {"USD": "1.3"}}}


def _put_object(boto3):
    return boto3.session.Session.return_value.client.return_value.put_object


def test_run_uploads_rekeyed_rates(config, make_response):
    with patch("etl.extract.requests.get", return_value=make_response(SCENARIO)), \
         patch("etl.load.boto3") as boto3:
        confirmation = run(config)

    put_object = _put_object(boto3)
    put_object.assert_called_once()
    kwargs = put_object.call_args.kwargs
    assert kwargs["Bucket"] == "fx-rates"
    assert kwargs["Key"] == "rates/latest.json"
    assert json.loads(kwargs["Body"]) == {"base": "USD", "rates": {"EUR": 1.1, "GBP": 1.3}}
    assert "fx-rates" in confirmation and "rates/latest.json" in confirmation


def test_missing_base_rate_writes_nothing(config, make_response):
    body = {"merchant": {"EUR": {"GBP": "0.9"}}}
    with patch("etl.extract.requests.get", return_value=make_response(body)), \
         patch("etl.load.boto3") as boto3:
        with pytest.raises(MissingBaseRateError) as exc_info:
            run(config)

    assert exc_info.value.currency == "EUR"
    boto3.session.Session.assert_not_called()


def test_unavailable_api_stops_before_transform(config, make_response):
    with patch("etl.extract.requests.get", return_value=make_response(status_code=503)), \
         patch("pipeline.build_rates_response") as transform, \
         patch("etl.load.boto3") as boto3:
        with pytest.raises(UnexpectedStatusError) as exc_info:
            run(config)

    assert exc_info.value.status_code == 503
    transform.assert_not_called()
    boto3.session.Session.assert_not_called()


def test_upload_failure_fails_the_run(config, make_response):
    denied = ClientError({"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject")
    with patch("etl.extract.requests.get", return_value=make_response(SCENARIO)), \
         patch("etl.load.boto3") as boto3:
        _put_object(boto3).side_effect = denied
        with pytest.raises(UploadError):
            run(config)

    _put_object(boto3).assert_called_once()


def test_azure_backend_when_connection_string_set(config, make_response):
    config = dataclasses.replace(config, adls_connection_string="AccountName=fx")
    with patch("etl.extract.requests.get", return_value=make_response(SCENARIO)), \
         patch("pipeline.upload_azure", return_value="ok") as upload_azure, \
         patch("pipeline.upload_s3") as upload_s3:
        assert run(config) == "ok"

    upload_azure.assert_called_once()
    args = upload_azure.call_args.args
    assert args[1:] == ("fx-rates", "rates/latest.json", "AccountName=fx")
    upload_s3.assert_not_called()


def test_handler_returns_confirmation(set_env, make_response):
    with patch("etl.extract.requests.get", return_value=make_response(SCENARIO)) as get, \
         patch("etl.load.boto3"):
        confirmation = lambda_handler({}, None)

    get.assert_called_once()
    assert "s3://fx-rates/rates/latest.json" in confirmation


@pytest.mark.parametrize("name", ["API_URL", "BUCKET_NAME", "KEY_NAME", "REGION"])
def test_handler_missing_config_makes_no_network_calls(set_env, monkeypatch, name):
    monkeypatch.delenv(name)
    with patch("etl.extract.requests.get") as get, patch("etl.load.boto3") as boto3:
        with pytest.raises(ConfigurationError):
            lambda_handler({}, None)

    get.assert_not_called()
    boto3.session.Session.assert_not_called()


def test_cli_dry_run_prints_payload(set_env, make_response, capsys):
    with patch("etl.extract.requests.get", return_value=make_response(SCENARIO)), \
         patch("etl.load.boto3") as boto3:
        main(["--dry-run", "--base-currency", "USD"])

    out = capsys.readouterr().out.strip().splitlines()[-1]
    assert json.loads(out) == {"base": "USD", "rates": {"EUR": 1.1, "GBP": 1.3}}
    boto3.session.Session.assert_not_called()


def test_cli_base_currency_override(set_env, make_response):
    body = {"merchant": {"USD": {"EUR": "0.91"}}}
    with patch("etl.extract.requests.get", return_value=make_response(body)), \
         patch("etl.load.boto3") as boto3:
        main(["--base-currency", "EUR"])

    sent = json.loads(_put_object(boto3).call_args.kwargs["Body"])
    assert sent == {"base": "EUR", "rates": {"USD": 0.91}}
