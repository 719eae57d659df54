"""Configuration models for the HttpClient interface."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Union

if TYPE_CHECKING:
    from .errors import HttpClientError
    from .resolver import BlockingResolver
    from .tracker import Tracker
    from .types import RequestInfo

CanContinueCallback = Callable[
    ["HttpClientError", "RequestInfo"], Union[bool, Awaitable[bool]]
]
AuthorizerCallback = Callable[[], Union[str, None, Awaitable[Union[str, None]]]]


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently a failed call is retried.

    With ``unlimited_retries`` off, a call makes at most ``retry_count + 1``
    attempts. ``can_continue`` may veto further attempts after any failure.
    """

    unlimited_retries: bool = False
    retry_count: int = 3
    init_retry_delay_seconds: float = 0.5
    max_retry_delay_seconds: float = 5.0
    retry_delay_coeff: float = 2.0
    can_continue: CanContinueCallback | None = None

    def __post_init__(self) -> None:
        if self.retry_count < 0:
            raise ValueError("retry_count must be >= 0")
        if self.init_retry_delay_seconds < 0:
            raise ValueError("init_retry_delay_seconds must be >= 0")
        if self.max_retry_delay_seconds < self.init_retry_delay_seconds:
            raise ValueError(
                "max_retry_delay_seconds must be >= init_retry_delay_seconds"
            )
        if self.retry_delay_coeff < 1:
            raise ValueError("retry_delay_coeff must be >= 1")

    def next_delay(self, delay: float) -> float:
        """Return the wait that follows a wait of ``delay``, capped at the max."""
        return min(self.max_retry_delay_seconds, delay * self.retry_delay_coeff)


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HttpClient behavior.

    ``authorizer`` is a plain callback; ``authorizer_resolver`` passes an
    existing resolver so several clients share one credential state.
    """

    timeout_seconds: float | None = None
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    tracker: Tracker | None = None
    absorb_failures: bool = False
    authorizer: AuthorizerCallback | None = None
    authorizer_resolver: BlockingResolver[Any] | None = None
    user_agent: str | None = None

    def __post_init__(self) -> None:
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 when provided")
        if self.authorizer is not None and self.authorizer_resolver is not None:
            raise ValueError(
                "authorizer and authorizer_resolver are mutually exclusive"
            )

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )
