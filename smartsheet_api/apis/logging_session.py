from collections.abc import Callable

import httpx
from loguru import logger
from requests import PreparedRequest, Response, Session

from smartsheet_api.apis.exception import TraceCaptureError
from smartsheet_api.models.snapshot import RequestAndResponseData
from smartsheet_api.models.trace import Trace
from smartsheet_api.models.trace_settings import TraceSettings
from smartsheet_api.utils.trace_capture import capture_httpx, capture_requests
from smartsheet_api.utils.trace_sources import EntitySnapshot, HttpxRequestSource

REQUEST_BODY_TRACES = {Trace.REQUEST_BODY, Trace.REQUEST_BODY_SUMMARY}
RESPONSE_BODY_TRACES = {Trace.RESPONSE_BODY, Trace.RESPONSE_BODY_SUMMARY}


def log_trace(
    settings: TraceSettings, capture: Callable[..., RequestAndResponseData], *args
) -> RequestAndResponseData | None:
    """Run `capture(*args, traces, truncate_len)` and log the result. Tracing never
    breaks the exchange, so a capture failure is only logged as a warning."""
    if not settings.enabled:
        return None
    try:
        trace = capture(*args, settings.traces, settings.truncate_len)
    except TraceCaptureError as e:
        logger.warning(f"HTTP trace unavailable: {e.msg}")
        return None
    logger.info(trace.to_string(pretty=settings.pretty))
    return trace


def _settings_or_env(settings: TraceSettings | None) -> TraceSettings:
    return settings if settings is not None else TraceSettings.from_env()


class LoggingSession(Session):
    """
    requests.Session subclass that logs a redacted trace of every exchange, limited to
    the facets selected in its TraceSettings.
    """

    def __init__(self, settings: TraceSettings | None = None):
        super().__init__()
        self.trace_settings = _settings_or_env(settings)

    def send(self, request: PreparedRequest, **kwargs) -> Response:
        settings = self.trace_settings
        logger.debug(f"→ {request.method} {request.url}")
        request_entity = None
        if settings.traces & REQUEST_BODY_TRACES:
            request_entity = EntitySnapshot.of_request(request)

        try:
            resp = super().send(request, **kwargs)
        except Exception:
            # no response to show, the request half is still logged
            log_trace(settings, capture_requests, request, request_entity, None, None)
            raise

        logger.debug(f"← {resp.status_code} {resp.reason}")
        log_trace(
            settings,
            self._capture_with_response,
            request,
            request_entity,
            resp,
            not kwargs.get("stream", False),
        )
        return resp

    @staticmethod
    def _capture_with_response(
        request: PreparedRequest,
        request_entity: EntitySnapshot | None,
        resp: Response,
        buffered: bool,
        traces: frozenset[Trace],
        truncate_len: int,
    ) -> RequestAndResponseData:
        response_entity = None
        if traces & RESPONSE_BODY_TRACES:
            if buffered:
                # already read by Session.send, this only wraps the cached content
                response_entity = EntitySnapshot.of_response(resp)
            else:
                # reading a streamed body here would consume it behind the caller
                logger.debug("Response body not traced for a streamed response")
        return capture_requests(
            request, request_entity, resp, response_entity, traces, truncate_len
        )


class LoggingClient(httpx.Client):
    """httpx.Client subclass with the same tracing as LoggingSession."""

    def __init__(self, settings: TraceSettings | None = None, **kwargs):
        super().__init__(**kwargs)
        self.trace_settings = _settings_or_env(settings)

    def send(self, request: httpx.Request, **kwargs) -> httpx.Response:
        settings = self.trace_settings
        logger.debug(f"→ {request.method} {request.url}")
        if settings.traces & REQUEST_BODY_TRACES:
            self._buffer_request_body(request)
        try:
            resp = super().send(request, **kwargs)
        except Exception:
            log_trace(settings, capture_httpx, request, None)
            raise

        logger.debug(f"← {resp.status_code} {resp.reason_phrase}")
        log_trace(settings, capture_httpx, request, resp)
        return resp

    @staticmethod
    def _buffer_request_body(request: httpx.Request):
        """Read a streamed request body up front. httpx then sends the buffered copy,
        so the trace sees the same bytes as the server."""
        body = HttpxRequestSource(request).body()
        if body is None:
            return
        try:
            body.read()
        except TraceCaptureError as e:
            # capture_httpx hits the same error later and logs it as a warning
            logger.debug(f"Request body not buffered for tracing: {e.msg}")
