"""
etl/errors.py – Error taxonomy for the pipeline.

Every failure aborts the invocation. Nothing here is caught and retried
inside the pipeline; the invoking platform owns retries and alerting.
Each error carries the context needed to diagnose it (URL, status code,
currency, bucket/key) and chains the underlying cause where there is one.
"""


class PipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(PipelineError):
    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "missing required environment variable(s): " + ", ".join(self.missing)
        )


class FetchError(PipelineError):
    def __init__(self, url: str, cause=None, message: str = "fetch failed"):
        self.url = url
        text = f"{message} | url={url}"
        if cause is not None:
            text += f": {cause}"
        super().__init__(text)


class UnexpectedStatusError(FetchError):
    def __init__(self, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(url, message=f"unexpected status {status_code}")


class DecodeError(PipelineError):
    pass


class TransformError(PipelineError):
    pass


class MissingBaseRateError(TransformError):
    def __init__(self, currency: str, base_currency: str):
        self.currency = currency
        self.base_currency = base_currency
        super().__init__(
            f"missing base rate | currency={currency} base={base_currency!r}"
        )


class RateParseError(TransformError):
    def __init__(self, currency: str, value: str):
        self.currency = currency
        self.value = value
        super().__init__(f"rate parse failed | currency={currency} value={value!r}")


class SerializeError(PipelineError):
    pass


class UploadError(PipelineError):
    def __init__(self, bucket: str, key: str, cause=None):
        self.bucket = bucket
        self.key = key
        text = f"upload failed | bucket={bucket} key={key}"
        if cause is not None:
            text += f": {cause}"
        super().__init__(text)
