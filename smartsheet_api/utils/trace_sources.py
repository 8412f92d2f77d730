"""Adapters exposing requests and httpx objects through one small interface, so the
trace capture is written once for both transports."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Protocol, Self

import httpx
import requests

from smartsheet_api.apis.exception import TraceCaptureError

HeaderItems = Iterable[tuple[str, str]]


class BodySource(Protocol):
    content_type: str | None
    content_length: int

    def read(self) -> bytes: ...


class PayloadSource(Protocol):
    """One side of an exchange: a request or a response."""

    def identifier(self) -> str: ...

    def header_items(self) -> HeaderItems | None: ...

    def body(self) -> BodySource | None: ...


def content_length(headers: Mapping[str, str], default: int = -1) -> int:
    try:
        return int(headers.get("Content-Length", default))
    except (TypeError, ValueError):
        return default


# --- LEGACY: requests ---


@dataclass(frozen=True, slots=True)
class EntitySnapshot:
    """Pre-buffered copy of a requests body. `content` is None for streamed uploads
    (files, generators) that can't be read without consuming them."""

    content: bytes | None
    content_type: str | None
    content_length: int

    def read(self) -> bytes:
        if self.content is None:
            raise TraceCaptureError("Body is a stream and was not buffered for tracing")
        return self.content

    @classmethod
    def of_request(cls, request: requests.PreparedRequest) -> Self | None:
        body = request.body
        if body is None:
            return None
        content_type = request.headers.get("Content-Type")
        if isinstance(body, str):
            body = body.encode("utf-8")
        if isinstance(body, bytes):
            return cls(body, content_type, content_length(request.headers, len(body)))
        return cls(None, content_type, content_length(request.headers))

    @classmethod
    def of_response(cls, response: requests.Response) -> Self:
        """Buffer the response content. requests keeps it cached, so the caller can
        still iterate the body afterwards.

        Raises:
            TraceCaptureError: if the content can't be read from the connection.
        """
        try:
            content = response.content or b""
        except (requests.RequestException, OSError, RuntimeError) as e:
            raise TraceCaptureError(f"Unable to read response body: {e}") from e
        return cls(
            content,
            response.headers.get("Content-Type"),
            content_length(response.headers, len(content)),
        )


class RequestsRequestSource:
    def __init__(
        self, request: requests.PreparedRequest, entity: EntitySnapshot | None = None
    ):
        self._request = request
        self._entity = entity

    def identifier(self) -> str:
        return f"{self._request.method} {self._request.url}"

    def header_items(self) -> HeaderItems | None:
        if self._request.headers is None:
            return None
        return self._request.headers.items()

    def body(self) -> EntitySnapshot | None:
        return self._entity


class RequestsResponseSource:
    def __init__(
        self, response: requests.Response, entity: EntitySnapshot | None = None
    ):
        self._response = response
        self._entity = entity

    def identifier(self) -> str:
        return str(self._response.status_code)

    def header_items(self) -> HeaderItems | None:
        if self._response.headers is None:
            return None
        return self._response.headers.items()

    def body(self) -> EntitySnapshot | None:
        return self._entity


# --- MODERN: httpx ---


class StreamBody:
    """A one-shot httpx body. httpx caches what it reads, so reading here doesn't
    starve the caller."""

    def __init__(
        self, reader: Callable[[], bytes], content_type: str | None, content_length: int
    ):
        self._reader = reader
        self.content_type = content_type
        self.content_length = content_length

    def read(self) -> bytes:
        try:
            return self._reader()
        except (httpx.HTTPError, httpx.StreamError, OSError) as e:
            raise TraceCaptureError(f"Unable to read body: {e}") from e


def raw_header_items(headers: httpx.Headers) -> HeaderItems:
    # httpx lowercases names everywhere except in .raw
    return [
        (name.decode(headers.encoding), value.decode(headers.encoding))
        for name, value in headers.raw
    ]


class HttpxRequestSource:
    def __init__(self, request: httpx.Request):
        self._request = request

    def identifier(self) -> str:
        return f"{self._request.method} {self._request.url}"

    def header_items(self) -> HeaderItems | None:
        return raw_header_items(self._request.headers)

    def body(self) -> StreamBody | None:
        headers = self._request.headers
        if "Content-Length" not in headers and "Transfer-Encoding" not in headers:
            return None
        return StreamBody(
            self._request.read, headers.get("Content-Type"), content_length(headers)
        )


class HttpxResponseSource:
    def __init__(self, response: httpx.Response):
        self._response = response

    def identifier(self) -> str:
        return str(self._response.status_code)

    def header_items(self) -> HeaderItems | None:
        return raw_header_items(self._response.headers)

    def body(self) -> StreamBody:
        headers = self._response.headers
        return StreamBody(
            self._response.read, headers.get("Content-Type"), content_length(headers)
        )
