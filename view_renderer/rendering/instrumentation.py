"""Instrumentation spans around template execution.

Monitoring code subscribes to event names; the renderer wraps each template
execution in Notifier.instrument. Spans are observational only: a span with a
subscriber publishes exactly once, also when the execution raises, and a failing
subscriber never changes what the render returns.
"""

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from view_renderer.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Monitoring systems key off these names
RENDER_TEMPLATE_EVENT = "action_view.render_template"
RENDER_PARTIAL_EVENT = "action_view.render_partial"


@dataclass(frozen=True)
class RenderEvent:
    """A finished instrumentation span."""

    name: str
    payload: dict[str, Any]
    started_at: float
    finished_at: float
    duration_ms: float
    error: str | None = None


Subscriber = Callable[[RenderEvent], None]


@dataclass(frozen=True)
class Subscription:
    """Handle returned by Notifier.subscribe.

    A pattern ending in ``*`` matches every event name with that prefix.
    """

    pattern: str
    callback: Subscriber = field(compare=False)

    def matches(self, name: str) -> bool:
        if self.pattern.endswith("*"):
            return name.startswith(self.pattern[:-1])
        return name == self.pattern


class Notifier:
    """Publishes instrumentation spans to subscribers.

    Subscriptions may change while renders run on other threads, so the
    subscriber list is guarded by a lock; callbacks run outside it.
    """

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, pattern: str, callback: Subscriber) -> Subscription:
        subscription = Subscription(pattern, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions = [s for s in self._subscriptions if s is not subscription]

    def listening(self, name: str) -> bool:
        with self._lock:
            return any(s.matches(name) for s in self._subscriptions)

    @contextmanager
    def instrument(self, name: str, **payload: Any) -> Iterator[dict[str, Any]]:
        """Wrap an operation in a span.

        The payload dict is yielded so the operation can add to it. When the
        operation raises, the payload gains an ``exception`` entry
        (type name, message) and the exception propagates unchanged. Spans
        with no matching subscriber are not timed or published.

        Args:
            name: Event name
            **payload: Identifying metadata

        Yields:
            The mutable payload
        """
        if not self.listening(name):
            yield payload
            return

        started_at = time.time()
        start = time.perf_counter()
        error: str | None = None
        try:
            yield payload
        except BaseException as e:
            error = type(e).__name__
            payload["exception"] = (error, str(e))
            raise
        finally:
            event = RenderEvent(
                name=name,
                payload=payload,
                started_at=started_at,
                finished_at=time.time(),
                duration_ms=(time.perf_counter() - start) * 1000,
                error=error,
            )
            self.publish(event)

    def publish(self, event: RenderEvent) -> None:
        with self._lock:
            subscriptions = [s for s in self._subscriptions if s.matches(event.name)]

        for subscription in subscriptions:
            try:
                subscription.callback(event)
            except Exception as e:
                log_with_context(
                    logger,
                    "warning",
                    "Instrumentation subscriber failed",
                    event_name=event.name,
                    subscriber=getattr(subscription.callback, "__name__", repr(subscription.callback)),
                    error=str(e),
                    error_type=type(e).__name__,
                    event_type="instrumentation_subscriber_error",
                )


def log_render_event(event: RenderEvent) -> None:
    """Subscriber that writes every span to the structured log."""
    log_with_context(
        logger,
        "warning" if event.error else "info",
        "Render failed" if event.error else "Rendered",
        event_name=event.name,
        identifier=event.payload.get("identifier"),
        layout=event.payload.get("layout"),
        duration_ms=round(event.duration_ms, 2),
        error_type=event.error,
        event_type="render_event",
    )
