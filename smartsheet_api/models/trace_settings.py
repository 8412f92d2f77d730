import os
from typing import Annotated, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from smartsheet_api.models.trace import Trace

DEFAULT_TRUNCATE_LEN = 1024

PARTS_ENV = "SMARTSHEET_TRACE_PARTS"
PRETTY_ENV = "SMARTSHEET_TRACE_PRETTY"
TRUNCATE_LEN_ENV = "SMARTSHEET_TRACE_TRUNCATE_LEN"


def parse_traces(value):
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return Trace.parse(value)
    return frozenset(Trace(v) for v in value)


def parse_flag(value):
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return value


TraceSet = Annotated[frozenset[Trace], BeforeValidator(parse_traces)]


class TraceSettings(BaseModel):
    """What to trace and how to print it. Read once at startup with `from_env()`."""

    model_config = ConfigDict(frozen=True)

    traces: TraceSet = frozenset()
    pretty: Annotated[bool, BeforeValidator(parse_flag)] = False
    truncate_len: int = Field(
        DEFAULT_TRUNCATE_LEN,
        ge=-1,
        description="Max characters kept for *BodySummary levels, -1 for no limit.",
    )

    @property
    def enabled(self) -> bool:
        return bool(self.traces)

    @classmethod
    def from_env(cls) -> Self:
        """Build settings from the SMARTSHEET_TRACE_* environment variables.

        Raises:
            pydantic.ValidationError: for an unknown trace level or a bad length.
        """
        return cls(
            traces=os.getenv(PARTS_ENV),
            pretty=os.getenv(PRETTY_ENV, False),
            truncate_len=os.getenv(TRUNCATE_LEN_ENV, DEFAULT_TRUNCATE_LEN),
        )
