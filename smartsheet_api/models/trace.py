from enum import StrEnum
from typing import Self


class Trace(StrEnum):
    """Facets of an HTTP exchange that can be captured in a trace."""

    REQUEST_HEADERS = "RequestHeaders"
    REQUEST_BODY = "RequestBody"
    REQUEST_BODY_SUMMARY = "RequestBodySummary"
    RESPONSE_HEADERS = "ResponseHeaders"
    RESPONSE_BODY = "ResponseBody"
    RESPONSE_BODY_SUMMARY = "ResponseBodySummary"

    @classmethod
    def _missing_(cls, value):  # type: ignore[override]
        """Accept level names regardless of case, e.g. `requestheaders`."""
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    @classmethod
    def parse(cls, parts: str | None) -> frozenset[Self]:
        """Parse a comma separated list of trace levels and groups.

        Args:
            parts (str | None): e.g. "Request,ResponseHeaders". Group names are
                listed in `TRACE_GROUPS`.

        Raises:
            ValueError: for a name that is neither a level nor a group.

        Returns:
            frozenset[Trace]: the selected levels, possibly empty.
        """
        traces: set[Trace] = set()
        for part in (parts or "").split(","):
            part = part.strip()
            if not part:
                continue
            group = TRACE_GROUPS.get(part.lower())
            if group is not None:
                traces.update(group)
            else:
                traces.add(cls(part))
        return frozenset(traces)


TRACE_GROUPS: dict[str, frozenset[Trace]] = {
    "none": frozenset(),
    "request": frozenset({Trace.REQUEST_HEADERS, Trace.REQUEST_BODY_SUMMARY}),
    "response": frozenset({Trace.RESPONSE_HEADERS, Trace.RESPONSE_BODY_SUMMARY}),
    "standardheaders": frozenset({Trace.REQUEST_HEADERS, Trace.RESPONSE_HEADERS}),
    "standardbodies": frozenset({Trace.REQUEST_BODY, Trace.RESPONSE_BODY}),
    "standard": frozenset(
        {
            Trace.REQUEST_HEADERS,
            Trace.REQUEST_BODY_SUMMARY,
            Trace.RESPONSE_HEADERS,
            Trace.RESPONSE_BODY_SUMMARY,
        }
    ),
    "everything": frozenset(Trace),
}
