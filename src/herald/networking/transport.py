"""Wire transport used by HttpClient to perform single attempts.

The client never talks to the network directly. A transport performs exactly
one request per ``send`` call: no retries, no credentials, no tracking.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

import requests


@dataclass(frozen=True)
class TransportResponse:
    status: int
    status_text: str
    data: Any
    headers: Mapping[str, str] = field(default_factory=dict)


class TransportError(Exception):
    """A single attempt failed.

    ``status`` is set only when the server produced a response; connection
    level failures leave it as None.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        status_text: str | None = None,
        raw: BaseException | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text
        self.raw = raw
        self.timed_out = timed_out


class Transport(Protocol):
    async def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None,
        body: Any,
        headers: Mapping[str, str],
        timeout: float | None,
    ) -> TransportResponse: ...

    def close(self) -> None: ...


class RequestsTransport:
    """Transport backed by ``requests`` sessions.

    Requests block, so each one runs on a worker thread and the event loop
    stays free for other calls. ``requests.Session`` is not guaranteed to be
    thread-safe, so every worker thread gets a session of its own. A session
    passed in explicitly is used by all threads; the caller owns that risk.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        verify_tls: bool = True,
    ) -> None:
        self._session = session
        self._verify_tls = verify_tls
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _thread_session(self) -> requests.Session:
        """Return the session owned by the calling thread, creating it once."""
        if self._session is not None:
            return self._session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None,
        body: Any,
        headers: Mapping[str, str],
        timeout: float | None,
    ) -> TransportResponse:
        return await asyncio.to_thread(
            self._send_blocking,
            method,
            url,
            params=params,
            body=body,
            headers=headers,
            timeout=timeout,
        )

    def _send_blocking(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None,
        body: Any,
        headers: Mapping[str, str],
        timeout: float | None,
    ) -> TransportResponse:
        try:
            response = self._thread_session().request(
                method,
                url,
                params=dict(params) if params else None,
                json=body,
                headers=dict(headers),
                timeout=timeout,
                verify=self._verify_tls,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise self._to_transport_error(e) from e

        return TransportResponse(
            status=response.status_code,
            status_text=response.reason or "",
            data=self._decode_body(response),
            headers=dict(response.headers),
        )

    @staticmethod
    def _to_transport_error(
        e: requests.exceptions.RequestException,
    ) -> TransportError:
        response = e.response
        if response is not None:
            return TransportError(
                str(e),
                status=response.status_code,
                status_text=response.reason,
                raw=e,
            )
        return TransportError(
            str(e),
            raw=e,
            timed_out=isinstance(e, requests.exceptions.Timeout),
        )

    @staticmethod
    def _decode_body(response: requests.Response) -> Any:
        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type and response.content:
            try:
                return response.json()
            except ValueError:
                pass  # Mislabelled body, fall back to text
        return response.text

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
