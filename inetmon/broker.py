"""Publish/subscribe fan-out of reports to independent subscribers."""

import asyncio
import logging
import threading
from uuid import UUID, uuid4

from inetmon.report import Report

logger = logging.getLogger(__name__)

_END = object()  # Terminal marker placed on a subscriber queue


class Subscription:
    """Ordered stream of reports published after subscribing.

    Iterate with ``async for``; iteration ends when the subscription is
    unsubscribed or the broker closes. Usable as an async context manager
    that unsubscribes on exit.
    """

    def __init__(self, broker: "SubscriptionBroker | None" = None):
        self.id: UUID = uuid4()
        self._broker = broker
        self._queue = asyncio.Queue()  # Unbounded: reports are never dropped
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def _deliver(self, report: Report) -> None:
        self._queue.put_nowait(report)

    def _finish(self) -> None:
        if not self._finished:
            self._finished = True
            self._queue.put_nowait(_END)

    def unsubscribe(self) -> None:
        """Stop receiving reports; pending iteration ends after queued items."""
        if self._broker is not None:
            self._broker._remove(self.id)
        self._finish()

    def __aiter__(self):
        return self

    async def __anext__(self) -> Report:
        item = await self._queue.get()
        if item is _END:
            # Keep the marker so repeated iteration also ends
            self._queue.put_nowait(_END)
            raise StopAsyncIteration
        return item

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.unsubscribe()


class SubscriptionBroker:
    """Holds the current subscriber set and broadcasts reports to it.

    The subscriber mapping is guarded by a lock so that subscribe and
    unsubscribe calls may race with a broadcast. Each subscriber receives
    reports in publish order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: dict[UUID, Subscription] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def open(self) -> None:
        """Accept new subscribers again after a close."""
        with self._lock:
            self._closed = False

    def subscribe(self) -> Subscription:
        """Create a subscription; already finished if the broker is closed."""
        with self._lock:
            if self._closed:
                subscription = Subscription()
                subscription._finish()
                logger.debug("Subscription refused: broker closed")
                return subscription
            subscription = Subscription(self)
            self._subscribers[subscription.id] = subscription
            count = len(self._subscribers)
        logger.debug("Subscriber added: %s (total: %d)", subscription.id, count)
        return subscription

    def _remove(self, subscription_id: UUID) -> None:
        with self._lock:
            removed = self._subscribers.pop(subscription_id, None)
            count = len(self._subscribers)
        if removed is not None:
            logger.debug("Subscriber removed: %s (remaining: %d)", subscription_id, count)

    def publish(self, report: Report) -> None:
        """Deliver a report to every current subscriber."""
        with self._lock:
            for subscription in self._subscribers.values():
                subscription._deliver(report)

    def close(self) -> None:
        """Finish every subscription, clear the set and refuse new ones."""
        with self._lock:
            self._closed = True
            subscribers = list(self._subscribers.values())
            self._subscribers.clear()
        for subscription in subscribers:
            subscription._finish()
        logger.debug("Broker closed: %d subscribers finished", len(subscribers))
