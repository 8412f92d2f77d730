import requests


class SmartsheetError(Exception):
    """Base class for every error raised by this SDK."""


# --- TRANSPORT ---


class InvalidHttpMethodError(SmartsheetError):
    def __init__(self, method: str | None = None):
        self.msg = (
            f"Method {method!r} is not supported. Use one of GET, POST, PUT, DELETE."
        )
        super().__init__(self.msg)


class HttpCodeError(SmartsheetError):
    """Raised when the API answers with a status code outside of 2xx."""

    def __init__(
        self, response: requests.Response | None = None, msg: str | None = None
    ):
        self.response = response
        if msg is None and response is not None:
            msg = f"HTTP {response.status_code} {response.reason}: {response.text}"
        self.msg = msg or "Unexpected HTTP status code"
        super().__init__(self.msg)


class ResourceNotFoundError(SmartsheetError):
    def __init__(self, msg: str | None = None):
        self.msg = msg or "The requested resource could not be found."
        super().__init__(self.msg)


# --- TRACING ---


class TraceCaptureError(SmartsheetError):
    """A request or response body could not be read while building a trace. The
    exchange itself is unaffected; only the trace is lost."""

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(self.msg)
