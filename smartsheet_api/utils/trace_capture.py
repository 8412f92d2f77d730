import os

import httpx
import requests
from loguru import logger
from pydantic import ValidationError

from smartsheet_api.models.snapshot import RequestAndResponseData
from smartsheet_api.models.trace import Trace
from smartsheet_api.models.trace_settings import (
    DEFAULT_TRUNCATE_LEN,
    TRUNCATE_LEN_ENV,
    TraceSettings,
)
from smartsheet_api.utils.trace_builder import (
    PayloadBuilder,
    RequestDataBuilder,
    ResponseDataBuilder,
)
from smartsheet_api.utils.trace_sources import (
    BodySource,
    EntitySnapshot,
    HttpxRequestSource,
    HttpxResponseSource,
    PayloadSource,
    RequestsRequestSource,
    RequestsResponseSource,
)


def truncate_len_from_env() -> int:
    """Read SMARTSHEET_TRACE_TRUNCATE_LEN, falling back to the default when it's
    malformed so a bad value never breaks importing the SDK."""
    value = os.getenv(TRUNCATE_LEN_ENV, DEFAULT_TRUNCATE_LEN)
    try:
        return TraceSettings(truncate_len=value).truncate_len
    except ValidationError:
        logger.warning(
            f"Ignoring invalid {TRUNCATE_LEN_ENV}={value!r}, "
            f"using {DEFAULT_TRUNCATE_LEN}"
        )
        return DEFAULT_TRUNCATE_LEN


# read once at startup
TRUNCATE_LENGTH = truncate_len_from_env()


def redact_header(name: str, value: str | None) -> tuple[str, bool]:
    """Make a header safe to log.

    Returns:
        tuple[str, bool]: the display value, and whether the header marks the body
            as possibly binary (Content-Disposition).
    """
    value = value or ""
    if name == "Authorization" and value:
        return "Bearer ****" + value[-4:], False
    if name == "Content-Disposition":
        return value, True
    return value, False


def binary_body(body: BodySource) -> str:
    return f"**possibly-binary(type:{body.content_type}, len:{body.content_length})**"


def get_content_as_text(body: BodySource | None) -> str:
    """Read a body as UTF-8 text, falling back to hex for bytes that aren't text.

    Raises:
        TraceCaptureError: if the body can't be read from its source.
    """
    if body is None:
        return ""
    content = body.read()
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return content.hex()


def truncate_as_needed(text: str, truncate_len: int) -> str:
    if truncate_len == -1:
        return text
    truncate_len = min(len(text), truncate_len)
    suffix = "..." if truncate_len < len(text) else ""
    return text[:truncate_len] + suffix


def _capture_side(
    builder: PayloadBuilder,
    source: PayloadSource,
    traces: frozenset[Trace],
    headers_trace: Trace,
    body_trace: Trace,
    summary_trace: Trace,
    truncate_len: int,
):
    binary = False
    header_items = source.header_items()
    if headers_trace in traces and header_items is not None:
        builder.with_headers()
        for name, value in header_items:
            value, is_binary_marker = redact_header(name, value)
            binary = binary or is_binary_marker
            builder.add_header(name, value)

    # the binary marker is only known once every header has been seen
    body = source.body()
    if body is None:
        return
    if body_trace in traces:
        builder.set_body(binary_body(body) if binary else get_content_as_text(body))
    elif summary_trace in traces:
        builder.set_body(
            binary_body(body)
            if binary
            else truncate_as_needed(get_content_as_text(body), truncate_len)
        )


def capture(
    request: PayloadSource | None,
    response: PayloadSource | None,
    traces: frozenset[Trace],
    truncate_len: int | None = None,
) -> RequestAndResponseData:
    """Build the trace of one exchange from transport-neutral sources.

    Args:
        request (PayloadSource | None): request side, None if unavailable.
        response (PayloadSource | None): response side, None if the exchange failed
            before a response existed.
        traces (frozenset[Trace]): facets to capture.
        truncate_len (int | None, optional): limit for *BodySummary levels. Defaults
            to None, which means TRUNCATE_LENGTH.

    Raises:
        TraceCaptureError: if a requested body can't be read. Nothing is returned in
            that case.

    Returns:
        RequestAndResponseData
    """
    if truncate_len is None:
        truncate_len = TRUNCATE_LENGTH

    request_builder = RequestDataBuilder()
    if request is not None:
        request_builder.with_command(request.identifier())
        _capture_side(
            request_builder,
            request,
            traces,
            Trace.REQUEST_HEADERS,
            Trace.REQUEST_BODY,
            Trace.REQUEST_BODY_SUMMARY,
            truncate_len,
        )

    response_builder = ResponseDataBuilder()
    if response is not None:
        response_builder.with_status(response.identifier())
        _capture_side(
            response_builder,
            response,
            traces,
            Trace.RESPONSE_HEADERS,
            Trace.RESPONSE_BODY,
            Trace.RESPONSE_BODY_SUMMARY,
            truncate_len,
        )

    return RequestAndResponseData(request_builder.build(), response_builder.build())


def capture_requests(
    request: requests.PreparedRequest | None,
    request_entity: EntitySnapshot | None,
    response: requests.Response | None,
    response_entity: EntitySnapshot | None,
    traces: frozenset[Trace],
    truncate_len: int | None = None,
) -> RequestAndResponseData:
    """`capture()` for requests objects. Bodies come from entity snapshots buffered
    by the transport, see `EntitySnapshot.of_request` / `of_response`."""
    return capture(
        RequestsRequestSource(request, request_entity) if request is not None else None,
        RequestsResponseSource(response, response_entity)
        if response is not None
        else None,
        traces,
        truncate_len,
    )


def capture_httpx(
    request: httpx.Request | None,
    response: httpx.Response | None,
    traces: frozenset[Trace],
    truncate_len: int | None = None,
) -> RequestAndResponseData:
    """`capture()` for httpx objects. Bodies are read (and cached by httpx) on
    demand."""
    return capture(
        HttpxRequestSource(request) if request is not None else None,
        HttpxResponseSource(response) if response is not None else None,
        traces,
        truncate_len,
    )
