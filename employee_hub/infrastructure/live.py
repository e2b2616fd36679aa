"""
Change notification and live queries.

Storage engines own a `ChangeNotifier` and call `notify()` after every
committed write. A `LiveQuery` pairs a fetch coroutine with that notifier:
subscribers receive the current snapshot immediately and a fresh snapshot
after each mutation, until they cancel.

Usage:
    query = store.observe_all()
    subscription = await query.subscribe(lambda employees: print(len(employees)))
    ...
    subscription.cancel()

    async for employees in query.stream():
        render(employees)
"""

from __future__ import annotations

import asyncio
import inspect
from typing import (
    AsyncGenerator,
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from employee_hub.utils.logging import get_logger

T = TypeVar("T")

Refresh = Callable[[], Awaitable[None]]
Listener = Callable[[T], Union[None, Awaitable[None]]]

log = get_logger(__name__)


class Subscription:
    """Handle returned by `subscribe`; cancelling it stops further deliveries."""

    def __init__(self, notifier: "ChangeNotifier", refresh: Refresh) -> None:
        self._notifier = notifier
        self._refresh = refresh
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._notifier._remove(self)

    async def _deliver(self) -> None:
        if self._active:
            await self._refresh()


class ChangeNotifier:
    """Registry of subscriptions refreshed after every committed write."""

    def __init__(self, name: str = "store") -> None:
        self.name = name
        self._subscriptions: List[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def register(self, refresh: Refresh) -> Subscription:
        subscription = Subscription(self, refresh)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def notify(self) -> None:
        """
        Refresh every active subscription in registration order.

        A failing refresh is logged and skipped; the write that triggered the
        notification has already been committed.
        """
        for subscription in list(self._subscriptions):
            try:
                await subscription._deliver()
            except Exception:  # noqa: BLE001 - one broken listener must not fail the writer
                log.exception(
                    "Live query refresh failed",
                    extra={"notifier": self.name},
                )


class LiveQuery(Generic[T]):
    """
    A query whose result is pushed to subscribers whenever the store changes.
    """

    def __init__(self, fetch: Callable[[], Awaitable[T]], notifier: ChangeNotifier) -> None:
        self._fetch = fetch
        self._notifier = notifier

    async def get(self) -> T:
        """Run the query once and return the current snapshot."""
        return await self._fetch()

    def recover(
        self,
        errors: Union[Type[BaseException], Tuple[Type[BaseException], ...]],
        fallback: Callable[[BaseException], T],
    ) -> "LiveQuery[T]":
        """
        Return a query on the same notifier that replaces `errors` with a value.

        `fallback` runs inside the exception handler, so it may log with
        `log.exception`.
        """

        async def fetch() -> T:
            try:
                return await self._fetch()
            except errors as exc:
                return fallback(exc)

        return LiveQuery(fetch, self._notifier)

    async def subscribe(self, listener: Listener[T]) -> Subscription:
        """
        Deliver the current snapshot to `listener` now and after every change.

        `listener` may be a plain function or a coroutine function.
        """

        async def refresh() -> None:
            value = await self._fetch()
            if not subscription.active:
                return
            outcome = listener(value)
            if inspect.isawaitable(outcome):
                await outcome

        subscription = self._notifier.register(refresh)
        try:
            await refresh()
        except BaseException:
            subscription.cancel()
            raise
        return subscription

    async def stream(self) -> AsyncGenerator[T, None]:
        """
        Iterate over snapshots as they are published.

        Closing the iterator (or breaking out of the loop) cancels the
        underlying subscription.
        """
        queue: asyncio.Queue[T] = asyncio.Queue()
        subscription: Optional[Subscription] = None
        try:
            subscription = await self.subscribe(queue.put_nowait)
            while True:
                yield await queue.get()
        finally:
            if subscription is not None:
                subscription.cancel()


__all__ = ["ChangeNotifier", "LiveQuery", "Subscription"]
