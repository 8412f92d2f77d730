from unittest import mock

import pytest
import requests
from helpers import make_requests_response

from smartsheet_api import (
    ApiClient,
    HttpCodeError,
    InvalidHttpMethodError,
    LoggingSession,
    ResourceNotFoundError,
    TraceSettings,
)


def respond_with(status_code=200, content=b'{"id": 1}', reason="OK"):
    return mock.patch(
        "requests.adapters.HTTPAdapter.send",
        side_effect=lambda request, **kwargs: make_requests_response(
            request, status_code=status_code, content=content, reason=reason
        ),
    )


class TestApiClient:
    def test_plain_session_without_tracing(self):
        client = ApiClient("abcd1234wxyz", trace_settings=TraceSettings())
        assert type(client.session) is requests.Session
        assert client.session.headers["Authorization"] == "Bearer abcd1234wxyz"
        assert client.session.headers["Accept"] == "application/json"

    def test_logging_session_with_tracing(self, log_messages):
        client = ApiClient("abcd1234wxyz", trace_settings=TraceSettings(traces="Request"))
        assert isinstance(client.session, LoggingSession)

        with respond_with():
            response = client.call_api("/sheets", "GET")

        assert response.status_code == 200
        assert response.body == {"id": 1}
        trace = next(m for m in log_messages if m.startswith("{"))
        assert "command:'GET https://api.smartsheet.com/2.0/sheets'" in trace
        assert "'Authorization':'Bearer ****wxyz'" in trace

    def test_invalid_method(self):
        client = ApiClient(trace_settings=TraceSettings())
        with pytest.raises(InvalidHttpMethodError):
            client.call_api("/sheets", "PATCH")

    def test_not_found(self):
        client = ApiClient(trace_settings=TraceSettings())
        with respond_with(404, b'{"errorCode": 1006, "message": "Not Found"}', "Not Found"):
            with pytest.raises(ResourceNotFoundError, match="Not Found"):
                client.call_api("/sheets/1", "GET")

    def test_http_error(self):
        client = ApiClient(trace_settings=TraceSettings())
        with respond_with(500, b"oops", "Server Error"):
            with pytest.raises(HttpCodeError) as e:
                client.call_api("/sheets", "GET")
        assert e.value.response.status_code == 500

    def test_ok_error_codes(self):
        client = ApiClient(trace_settings=TraceSettings())
        with respond_with(400, b'{"errorCode": 1008, "message": "bad"}', "Bad Request"):
            response = client.call_api(
                "/sheets", "POST", body={"name": "x"}, ok_error_codes=[1008]
            )
        assert response.status_code == 400
        assert response.body["errorCode"] == 1008

    def test_caller_headers_are_not_modified(self):
        client = ApiClient(trace_settings=TraceSettings())
        headers = {"X-Custom": "1"}
        with respond_with():
            client.call_api("/sheets", "POST", headers=headers, body={"name": "x"})
        assert headers == {"X-Custom": "1"}

    def test_any_2xx_is_success(self):
        client = ApiClient(trace_settings=TraceSettings())
        with respond_with(206, b'{"id": 1}', "Partial Content"):
            response = client.call_api("/sheets", "GET")
        assert response.status_code == 206
        assert response.body == {"id": 1}
