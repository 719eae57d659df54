"""Value types shared by the Herald networking layer."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Mapping

if TYPE_CHECKING:
    from .errors import HttpClientError


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"

    @classmethod
    def coerce(cls, method: HttpMethod | str) -> HttpMethod:
        """Return the enum member for a method name (case-insensitive)."""
        if isinstance(method, cls):
            return method
        try:
            return cls(str(method).upper())
        except ValueError:
            raise ValueError(f"unsupported HTTP method: {method!r}") from None


def _new_request_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class RequestInfo:
    """Descriptor for one logical call.

    Created once per call and shared by every attempt. Only ``headers`` is
    mutated after construction: credentials are written into it before each
    attempt.
    """

    method: HttpMethod
    url: str
    params: Mapping[str, str] | None = None
    data: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=_new_request_id)


@dataclass(frozen=True)
class ClientResponse:
    """Successful outcome of a call."""

    data: Any
    status: int
    status_text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class AbsorbedFailure:
    """Outcome of a failed call on a client configured to absorb failures.

    The failure has already been reported to the tracker; callers that do
    not care about the outcome can drop this value.
    """

    error: HttpClientError

    @property
    def ok(self) -> bool:
        return False


CallResult = ClientResponse | AbsorbedFailure
