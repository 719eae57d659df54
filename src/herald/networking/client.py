"""Asynchronous HTTP client facade for the Herald networking layer.

The client adds three things on top of a bare transport: credentials from a
shared single-flight authorizer, retries with backoff and a caller veto, and
lifecycle notifications to a tracker for every attempt and outcome.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Mapping

from .config import HttpClientConfig
from .errors import AuthorizerError, make_error
from .resolver import BlockingResolver
from .retry import retry
from .tracker import Tracker
from .transport import RequestsTransport, Transport
from .types import AbsorbedFailure, CallResult, ClientResponse, HttpMethod, RequestInfo

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401


class HttpClient:
    """Retrying, authenticated HTTP client.

    Clients derived with ``scope()`` share the retry policy, tracker,
    transport and authorizer state of their parent, but own a copy of its
    headers. Invalidating credentials through any of them affects all.
    """

    def __init__(
        self,
        url_base: str | None = None,
        config: HttpClientConfig | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        """Create a new HttpClient.

        Args:
            url_base: Prefix prepended verbatim to every request URL.
            config: Timeouts, headers, retry policy, tracker and authorizer.
            transport: Performs single attempts. Defaults to a requests session.
        """
        self._url_base = url_base
        self._config = config or HttpClientConfig()
        self._transport: Transport = (
            transport if transport is not None else RequestsTransport()
        )
        self._tracker = self._config.tracker or Tracker()

        self._headers: dict[str, str] = dict(self._config.default_headers)
        self._headers.setdefault("Content-Type", "application/json")
        if self._config.user_agent:
            self._headers["User-Agent"] = self._config.user_agent

        self._authorizer_resolver: BlockingResolver[str | None] | None = None
        if self._config.authorizer_resolver is not None:
            self._authorizer_resolver = self._config.authorizer_resolver
        elif self._config.authorizer is not None:
            self._authorizer_resolver = BlockingResolver(self._config.authorizer)

    @property
    def url_base(self) -> str | None:
        return self._url_base

    @property
    def headers(self) -> Mapping[str, str]:
        return dict(self._headers)

    @property
    def authorizer_resolver(self) -> BlockingResolver[str | None] | None:
        return self._authorizer_resolver

    def scope(self, url: str) -> HttpClient:
        """Derive a client whose base URL is this one's joined with ``url``."""
        parts = [part for part in (self._url_base, url) if part]
        scope_config = replace(
            self._config,
            default_headers=self._headers,
            tracker=self._tracker,
            authorizer=None,
            authorizer_resolver=self._authorizer_resolver,
            user_agent=None,
        )
        return HttpClient("/".join(parts), scope_config, transport=self._transport)

    def header(self, name: str, value: str) -> HttpClient:
        self._headers[name] = value
        return self

    async def get(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> CallResult:
        return await self.execute(HttpMethod.GET, url, params, None)

    async def head(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> CallResult:
        return await self.execute(HttpMethod.HEAD, url, params, None)

    async def delete(
        self, url: str, params: Mapping[str, str] | None = None
    ) -> CallResult:
        return await self.execute(HttpMethod.DELETE, url, params, None)

    async def post(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
    ) -> CallResult:
        return await self.execute(HttpMethod.POST, url, params, data)

    async def put(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
    ) -> CallResult:
        return await self.execute(HttpMethod.PUT, url, params, data)

    async def patch(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
    ) -> CallResult:
        return await self.execute(HttpMethod.PATCH, url, params, data)

    async def options(
        self,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
    ) -> CallResult:
        return await self.execute(HttpMethod.OPTIONS, url, params, data)

    async def execute(
        self,
        method: HttpMethod | str,
        url: str,
        params: Mapping[str, str] | None = None,
        data: Any | None = None,
    ) -> CallResult:
        """Perform one logical call, retrying failed attempts per policy.

        Args:
            method: HTTP verb.
            url: Request URL, appended to the base URL as-is.
            params: Optional query parameters.
            data: Optional JSON-serializable body.

        Returns:
            ClientResponse on success, or AbsorbedFailure when the call failed
            and the client is configured to absorb failures.

        Raises:
            HttpClientError: The call failed and failures are not absorbed.
        """
        final_url = url
        if self._url_base:
            final_url = self._url_base + final_url

        request_info = RequestInfo(
            method=HttpMethod.coerce(method),
            url=final_url,
            params=dict(params) if params is not None else None,
            data=data,
            headers=dict(self._headers),
        )

        self._tracker.start(request_info)

        try:
            return await retry(
                lambda: self._execute_single(request_info),
                self._config.retry,
                self._bind_can_continue(request_info),
                operation_name=f"[{request_info.id}] {request_info.method.value} {final_url}",
            )
        except Exception as e:
            error = make_error(request_info, e)
            self._tracker.fail(request_info, error)
            if self._config.absorb_failures:
                logger.warning(
                    f"[{request_info.id}] {request_info.method.value} {final_url} "
                    f"failed, absorbing: {error.message}"
                )
                return AbsorbedFailure(error)
            raise error from error.source_error

    def _bind_can_continue(
        self, request_info: RequestInfo
    ) -> Callable[[Exception], Any] | None:
        user_can_continue = self._config.retry.can_continue
        if user_can_continue is None:
            return None

        def can_continue(reason: Exception) -> Any:
            return user_can_continue(make_error(request_info, reason), request_info)

        return can_continue

    async def _execute_single(self, request_info: RequestInfo) -> ClientResponse:
        try:
            await self._prepare_headers(request_info)
            logger.debug(
                f"[{request_info.id}] attempt {request_info.method.value} {request_info.url}"
            )
            self._tracker.try_attempt(request_info)
            response = await self._transport.send(
                request_info.method.value,
                request_info.url,
                params=request_info.params,
                body=request_info.data,
                headers=request_info.headers,
                timeout=self._config.timeout_seconds,
            )
        except Exception as e:
            error = make_error(request_info, e)
            if (
                error.status_code == UNAUTHORIZED
                and self._authorizer_resolver is not None
            ):
                self._authorizer_resolver.invalidate()
            self._tracker.failed_attempt(request_info, error)
            raise error from error.source_error

        self._tracker.finish(request_info, response)
        return ClientResponse(
            data=response.data,
            status=response.status,
            status_text=response.status_text,
        )

    async def _prepare_headers(self, request_info: RequestInfo) -> None:
        if self._authorizer_resolver is None:
            return
        try:
            auth = await self._authorizer_resolver.resolve()
        except Exception as e:
            raise AuthorizerError.for_request(
                request_info,
                f"authorizer failed: {e}",
                source_error=e,
            ) from e
        if auth:
            request_info.headers["Authorization"] = auth

    def close(self) -> None:
        """Close the underlying transport (shared with scoped clients)."""
        self._transport.close()
