"""Networking layer: the HttpClient facade and its collaborators."""

from .client import HttpClient
from .config import HttpClientConfig, RetryPolicy
from .errors import (
    AuthorizerError,
    ErrorKind,
    HttpClientError,
    HttpConnectionError,
    HttpStatusError,
    RequestTimeoutError,
    make_error,
)
from .resolver import BlockingResolver
from .retry import retry
from .tracker import LoggingTracker, RemoteTracker, RemoteTrackerBridge, Tracker
from .transport import RequestsTransport, Transport, TransportError, TransportResponse
from .types import AbsorbedFailure, ClientResponse, HttpMethod, RequestInfo

__all__ = [
    "AbsorbedFailure",
    "AuthorizerError",
    "BlockingResolver",
    "ClientResponse",
    "ErrorKind",
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpConnectionError",
    "HttpMethod",
    "HttpStatusError",
    "LoggingTracker",
    "RemoteTracker",
    "RemoteTrackerBridge",
    "RequestInfo",
    "RequestTimeoutError",
    "RequestsTransport",
    "RetryPolicy",
    "Tracker",
    "Transport",
    "TransportError",
    "TransportResponse",
    "make_error",
    "retry",
]
