import httpx
import requests
from requests.structures import CaseInsensitiveDict


def make_requests_response(
    request: requests.PreparedRequest,
    status_code: int = 200,
    content: bytes = b'{"id": 1}',
    headers: dict | None = None,
    reason: str = "OK",
    raw=None,
) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = reason
    resp._content = content
    resp.headers = CaseInsensitiveDict(
        headers if headers is not None else {"Content-Type": "application/json"}
    )
    resp.request = request
    resp.url = request.url
    resp.encoding = "utf-8"
    if raw is not None:
        # left unread, as a stream=True response is
        resp._content = False
        resp.raw = raw
    return resp


def make_httpx_exchange(
    method: str = "GET",
    url: str = "https://api.example.com/sheets",
    request_headers: dict | None = None,
    request_content: bytes | None = None,
    status_code: int = 200,
    response_headers: dict | None = None,
    response_content: bytes = b'{"id": 1}',
) -> tuple[httpx.Request, httpx.Response]:
    request = httpx.Request(
        method, url, headers=request_headers or {}, content=request_content
    )
    response = httpx.Response(
        status_code,
        headers=response_headers
        if response_headers is not None
        else {"Content-Type": "application/json"},
        content=response_content,
        request=request,
    )
    return request, response
