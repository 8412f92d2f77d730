from dataclasses import dataclass

from requests.structures import CaseInsensitiveDict


@dataclass(frozen=True, slots=True)
class ValidatedResponse:
    status_code: int
    headers: CaseInsensitiveDict
    body: list | dict
