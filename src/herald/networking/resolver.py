"""Single-flight resolution of an expensive value (credentials)."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Generic, TypeVar, Union

logger = logging.getLogger(__name__)

Value = TypeVar("Value")


class BlockingResolver(Generic[Value]):
    """Share one producer invocation among all concurrent callers.

    The first ``resolve()`` call starts the producer; callers arriving while
    it runs await the same result. A successful result is cached until
    ``invalidate()``. A failed production is not cached: the failure reaches
    every waiter and the next ``resolve()`` starts the producer again.
    """

    def __init__(
        self, producer: Callable[[], Union[Value, Awaitable[Value]]]
    ) -> None:
        self._producer = producer
        self._generation = 0
        self._has_value = False
        self._value: Value | None = None
        self._pending: asyncio.Task[Value] | None = None

    @property
    def is_resolved(self) -> bool:
        return self._has_value

    async def resolve(self) -> Value:
        if self._has_value:
            return self._value  # type: ignore[return-value]

        pending = self._pending
        if pending is None:
            pending = asyncio.ensure_future(self._produce(self._generation))
            self._pending = pending
        return await asyncio.shield(pending)

    def invalidate(self) -> None:
        """Forget the cached or in-flight value. Safe to call repeatedly."""
        if self._has_value or self._pending is not None:
            logger.debug(f"Resolver invalidated (generation {self._generation})")
        self._generation += 1
        self._has_value = False
        self._value = None
        self._pending = None

    async def _produce(self, generation: int) -> Value:
        logger.debug(f"Invoking resolver producer (generation {generation})")
        try:
            value = self._producer()
            if inspect.isawaitable(value):
                value = await value
        except BaseException:
            if generation == self._generation:
                self._pending = None
            raise

        if generation == self._generation:
            self._value = value  # type: ignore[assignment]
            self._has_value = True
            self._pending = None
        return value  # type: ignore[return-value]
