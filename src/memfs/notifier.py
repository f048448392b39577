"""Debounced delivery of change records to subscribed listeners."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from .events import ChangeEvent

logger = logging.getLogger(__name__)

ChangeListener = Callable[[Tuple[ChangeEvent, ...]], None]

DEFAULT_DEBOUNCE_SECONDS = 0.005


@dataclass
class NotifierStats:
    """Counters emitted by the notifier for observability."""

    flushes: int = 0
    events_delivered: int = 0
    listener_errors: int = 0


class Subscription:
    """Handle returned by :meth:`ChangeNotifier.on_did_change`."""

    def __init__(self, notifier: "ChangeNotifier", listener: ChangeListener):
        self._notifier = notifier
        self._listener = listener
        self._disposed = False

    @property
    def listener(self) -> ChangeListener:
        return self._listener

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._notifier._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.dispose()


class ChangeNotifier:
    """Collects change records and flushes them as one batch per debounce window.

    The first record landing in an empty batch arms a one-shot timer; every
    record appended before the timer fires joins the same batch. Listeners get
    the batch as a tuple in append order.
    """

    def __init__(self, delay: float = DEFAULT_DEBOUNCE_SECONDS):
        if delay <= 0:
            raise ValueError("Debounce delay must be positive")
        self._delay = delay
        self._lock = threading.Lock()
        # Serializes deliveries; reentrant so a listener may flush again.
        self._delivery_lock = threading.RLock()
        self._pending: List[ChangeEvent] = []
        self._timer: Optional[threading.Timer] = None
        self._subscriptions: List[Subscription] = []
        self._stats = NotifierStats()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def stats(self) -> NotifierStats:
        return self._stats

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def on_did_change(self, listener: ChangeListener) -> Subscription:
        """Register ``listener`` for every future batch."""

        subscription = Subscription(self, listener)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def fire_soon(self, *events: ChangeEvent) -> None:
        """Append records to the pending batch, arming the timer if it was empty."""

        if not events:
            return
        with self._lock:
            was_empty = not self._pending
            self._pending.extend(events)
            if was_empty and self._timer is None:
                self._timer = threading.Timer(self._delay, self._on_timer)
                self._timer.daemon = True
                self._timer.start()
        for event in events:
            logger.debug("Queued change %s", event.describe())

    def flush(self) -> Tuple[ChangeEvent, ...]:
        """Deliver the pending batch now and return it.

        Waits for a delivery already running on another thread, so batches
        reach each listener in append order.
        """

        with self._delivery_lock:
            with self._lock:
                if self._timer is not None:
                    self._timer.cancel()
                    self._timer = None
                batch = tuple(self._pending)
                self._pending.clear()
                listeners = [sub for sub in self._subscriptions if not sub.disposed]
            if not batch:
                return batch

            self._stats.flushes += 1
            self._stats.events_delivered += len(batch)
            logger.debug("Flushing %s change(s) to %s listener(s)", len(batch), len(listeners))
            self._deliver(batch, listeners)
            return batch

    def close(self) -> None:
        """Cancel the timer and deliver whatever is still pending."""

        self.flush()
        logger.debug(
            "Notifier closed after %s flushes, %s events",
            self._stats.flushes,
            self._stats.events_delivered,
        )

    def _on_timer(self) -> None:
        with self._lock:
            # Timer is a Thread; a stale timer must not clear its replacement.
            if self._timer is not threading.current_thread():
                return
            self._timer = None
        self.flush()

    def _deliver(self, batch: Tuple[ChangeEvent, ...], listeners: Sequence[Subscription]) -> None:
        for subscription in listeners:
            # A listener disposed by an earlier one during this delivery is skipped.
            if subscription.disposed:
                continue
            try:
                subscription.listener(batch)
            except Exception:
                self._stats.listener_errors += 1
                logger.exception("Change listener %r failed for %s event(s)", subscription.listener, len(batch))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            try:
                self._subscriptions.remove(subscription)
            except ValueError:
                pass
