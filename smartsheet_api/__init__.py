from pathlib import Path

PROJECT_ROOT = Path(__file__).parent

# ruff: noqa: I001
from .apis.exception import (
    HttpCodeError,
    InvalidHttpMethodError,
    ResourceNotFoundError,
    SmartsheetError,
    TraceCaptureError,
)
from .models.trace import Trace
from .models.trace_settings import TraceSettings
from .models.snapshot import RequestAndResponseData, RequestData, ResponseData
from .utils.trace_capture import capture, capture_httpx, capture_requests
from .apis.logging_session import LoggingClient, LoggingSession
from .apis.api_client import ApiClient

__all__ = [
    "SmartsheetError",
    "HttpCodeError",
    "InvalidHttpMethodError",
    "ResourceNotFoundError",
    "TraceCaptureError",
    "Trace",
    "TraceSettings",
    "RequestData",
    "ResponseData",
    "RequestAndResponseData",
    "capture",
    "capture_requests",
    "capture_httpx",
    "LoggingSession",
    "LoggingClient",
    "ApiClient",
]
