"""Lifecycle observers for HttpClient calls.

Hook order for one call: ``start`` once, then per attempt ``try_attempt``
followed by ``finish`` or ``failed_attempt``, and finally ``fail`` once if the
call as a whole failed. Hooks are synchronous and must not raise.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .errors import HttpClientError
from .transport import TransportResponse
from .types import RequestInfo

logger = logging.getLogger(__name__)


class Tracker:
    """Base tracker; every hook is a no-op. Override the ones you need."""

    def start(self, request_info: RequestInfo) -> None:
        pass

    def try_attempt(self, request_info: RequestInfo) -> None:
        pass

    def finish(
        self, request_info: RequestInfo, response: TransportResponse
    ) -> None:
        pass

    def failed_attempt(
        self, request_info: RequestInfo, error: HttpClientError
    ) -> None:
        pass

    def fail(self, request_info: RequestInfo, error: HttpClientError) -> None:
        pass


class LoggingTracker(Tracker):
    """Report every lifecycle point to a logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def start(self, request_info: RequestInfo) -> None:
        self._log.debug(
            f"[{request_info.id}] start {request_info.method.value} {request_info.url}"
        )

    def try_attempt(self, request_info: RequestInfo) -> None:
        self._log.debug(
            f"[{request_info.id}] attempt {request_info.method.value} {request_info.url}"
        )

    def finish(
        self, request_info: RequestInfo, response: TransportResponse
    ) -> None:
        self._log.info(
            f"[{request_info.id}] finish {request_info.method.value} "
            f"{request_info.url} status={response.status}"
        )

    def failed_attempt(
        self, request_info: RequestInfo, error: HttpClientError
    ) -> None:
        self._log.warning(
            f"[{request_info.id}] failed attempt {request_info.method.value} "
            f"{request_info.url} status={error.status_code}: {error.message}"
        )

    def fail(self, request_info: RequestInfo, error: HttpClientError) -> None:
        self._log.error(
            f"[{request_info.id}] fail {request_info.method.value} "
            f"{request_info.url}: {error.message}"
        )


class RemoteTrackOperation(Protocol):
    request: str

    def complete(self) -> None: ...

    def fail(self, error: Any) -> None: ...


class RemoteTracker(Protocol):
    def start(
        self, action: str, options: Any | None = None
    ) -> RemoteTrackOperation: ...


class RemoteTrackerBridge(Tracker):
    """Mirror each logical call as one operation on a remote tracker.

    The operation is opened on ``start`` and closed exactly once, by
    ``finish`` or ``fail``. Individual attempts are not reported.
    """

    def __init__(self, remote: RemoteTracker) -> None:
        self._remote = remote
        self._operations: dict[str, RemoteTrackOperation] = {}

    def start(self, request_info: RequestInfo) -> None:
        action = f"{request_info.method.value} {request_info.url}"
        self._operations[request_info.id] = self._remote.start(
            action, {"params": dict(request_info.params or {})}
        )

    def finish(
        self, request_info: RequestInfo, response: TransportResponse
    ) -> None:
        operation = self._operations.pop(request_info.id, None)
        if operation is not None:
            operation.complete()

    def fail(self, request_info: RequestInfo, error: HttpClientError) -> None:
        operation = self._operations.pop(request_info.id, None)
        if operation is not None:
            operation.fail(error)

    @property
    def open_operations(self) -> int:
        return len(self._operations)
