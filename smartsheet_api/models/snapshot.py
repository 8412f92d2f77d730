from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HttpPayloadData:
    """One side of a traced exchange.

    `headers` is None when headers were not requested and an empty mapping when they
    were requested but none were found. `body` is None when the body was not
    requested.
    """

    headers: Mapping[str, str] | None = None
    body: str | None = None

    @property
    def has_headers(self) -> bool:
        return self.headers is not None

    @property
    def has_body(self) -> bool:
        return self.body is not None


@dataclass(frozen=True, slots=True)
class RequestData(HttpPayloadData):
    command: str | None = None


@dataclass(frozen=True, slots=True)
class ResponseData(HttpPayloadData):
    status: str | None = None


@dataclass(frozen=True, slots=True)
class RequestAndResponseData:
    """Immutable snapshot of one request/response exchange, ready to be logged.

    Either side is None when it was not available, e.g. the request failed before a
    response existed.
    """

    request: RequestData | None
    response: ResponseData | None

    def __str__(self) -> str:
        return self.to_string(pretty=False)

    def to_string(self, pretty: bool = False) -> str:
        """Render as a javascript-ish object literal meant for humans, not parsers.

        Args:
            pretty (bool, optional): one field per line with two-space indents.
                Defaults to False.
        """
        eol = "\n" if pretty else ""
        indent = "  " if pretty else ""

        parts = ["{", eol, indent, "request:"]
        if self.request is None:
            parts += ["null,", eol]
        else:
            parts += ["{", eol]
            parts += [indent * 2, f"command:'{self.request.command}',", eol]
            parts += _render_payload(self.request, eol, indent)
            parts += [indent, "},", eol]

        parts += [indent, "response:"]
        if self.response is None:
            parts += ["null", eol]
        else:
            parts += ["{", eol]
            parts += [indent * 2, f"status:'{self.response.status}',", eol]
            parts += _render_payload(self.response, eol, indent)
            parts += [indent, "}", eol]
        parts.append("}")
        return "".join(parts)


def _render_payload(payload: HttpPayloadData, eol: str, indent: str) -> list[str]:
    parts = []
    if payload.has_headers:
        parts += [indent * 2, "headers:{", eol]
        for name, value in payload.headers.items():
            parts += [indent * 3, f"'{name}':'{value}',", eol]
        parts += [indent * 2, "},", eol]
    if payload.has_body:
        parts += [indent * 2, f"body:'{payload.body}'", eol]
    return parts
