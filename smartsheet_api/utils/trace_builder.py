from types import MappingProxyType
from typing import Generic, Self, TypeVar

from smartsheet_api.models.snapshot import HttpPayloadData, RequestData, ResponseData

PayloadT = TypeVar("PayloadT", bound=HttpPayloadData)


class PayloadBuilder(Generic[PayloadT]):
    """Accumulates one side of an exchange. Not thread safe; make a new one per side
    per exchange.
    """

    payload_type: type[PayloadT]

    def __init__(self):
        self.reset()

    def reset(self):
        self._fields: dict | None = None

    def _data(self) -> dict:
        if self._fields is None:
            self._fields = {}
        return self._fields

    def with_headers(self) -> Self:
        # separate from add_header so "requested, none found" stays visible
        self._data().setdefault("headers", {})
        return self

    def add_header(self, name: str, value: str) -> Self:
        self.with_headers()
        self._fields["headers"][name] = value
        return self

    def set_body(self, body: str) -> Self:
        self._data()["body"] = body
        return self

    def build(self) -> PayloadT | None:
        """Return what was accumulated and reset, or None if nothing was ever set."""
        fields, self._fields = self._fields, None
        if fields is None:
            return None
        if "headers" in fields:
            headers = dict(sorted(fields["headers"].items()))
            fields["headers"] = MappingProxyType(headers)
        return self.payload_type(**fields)


class RequestDataBuilder(PayloadBuilder[RequestData]):
    payload_type = RequestData

    def with_command(self, command: str) -> Self:
        self._data()["command"] = command
        return self


class ResponseDataBuilder(PayloadBuilder[ResponseData]):
    payload_type = ResponseData

    def with_status(self, status: str) -> Self:
        self._data()["status"] = status
        return self
