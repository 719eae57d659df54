"""Normalized errors raised by the Herald networking layer.

Every failure that reaches a tracker or a caller is one of the classes below,
whatever the transport's native error representation was.
"""

from __future__ import annotations

import traceback
from enum import Enum
from typing import Any, Mapping

from .transport import TransportError
from .types import RequestInfo


class ErrorKind(str, Enum):
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"
    AUTHORIZER = "authorizer"
    UNEXPECTED = "unexpected"


class HttpClientError(Exception):
    """Base error carrying the originating request and response status."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(
        self,
        message: str,
        *,
        url: str,
        method: str,
        params: Mapping[str, str] | None = None,
        status_code: int | None = None,
        status_text: str | None = None,
        source_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.method = method
        self.params: dict[str, str] = dict(params or {})
        self.status_code = status_code
        self.status_text = status_text
        self.source_error = source_error
        self.stack = "".join(traceback.format_stack()[:-1])
        if source_error is not None:
            self.__cause__ = source_error

    @classmethod
    def for_request(
        cls,
        request_info: RequestInfo,
        message: str,
        **kwargs: Any,
    ) -> HttpClientError:
        return cls(
            message,
            url=request_info.url,
            method=request_info.method.value,
            params=request_info.params,
            **kwargs,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, method={self.method!r}, "
            f"url={self.url!r}, status_code={self.status_code!r})"
        )


class HttpConnectionError(HttpClientError):
    """The transport could not produce any response."""

    kind = ErrorKind.CONNECTION


class RequestTimeoutError(HttpConnectionError):
    """The transport gave up waiting for a response."""

    kind = ErrorKind.TIMEOUT


class HttpStatusError(HttpClientError):
    """The server answered with a non-success status code."""

    kind = ErrorKind.HTTP_STATUS


class AuthorizerError(HttpClientError):
    """The credential producer failed."""

    kind = ErrorKind.AUTHORIZER


def make_error(request_info: RequestInfo, reason: BaseException) -> HttpClientError:
    """Normalize any attempt failure into an HttpClientError."""
    if isinstance(reason, HttpClientError):
        return reason

    if isinstance(reason, TransportError):
        if reason.status is not None:
            return HttpStatusError.for_request(
                request_info,
                reason.message,
                status_code=reason.status,
                status_text=reason.status_text,
                source_error=reason,
            )
        error_cls = RequestTimeoutError if reason.timed_out else HttpConnectionError
        return error_cls.for_request(
            request_info, reason.message, source_error=reason
        )

    return HttpClientError.for_request(
        request_info, str(reason) or type(reason).__name__, source_error=reason
    )
