"""Event system for decoupled simulation event handling.

This module provides a publish/subscribe event system that lets the simulation
tell its host about things that happen without knowing who is listening. The
ViewManager uses it as the navigation sink; tests use it to observe trail
expiry and bootstrap outcomes.

The event system consists of:
- Event: Base class for all events
- Concrete event classes: Specific event types for simulation occurrences
- EventBus: Central hub for subscribing to and publishing events

Example usage:
    event_bus = EventBus()

    def handle_navigation(event: NavigationRequestedEvent):
        print(f"Going to {event.target}")

    event_bus.subscribe(NavigationRequestedEvent, handle_navigation)
    event_bus.publish(NavigationRequestedEvent("Photos", "photos"))
    event_bus.clear()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class Event:
    """Base event class."""


@dataclass
class NavigationRequestedEvent(Event):
    """Fired when a special particle is activated.

    Published exactly once per activation. Subscribers act as the navigation
    sink: the ViewManager switches to the page named by ``target``.

    Attributes:
        label: Caption of the activated particle.
        target: Navigation target stored on the particle.
    """

    label: str
    target: str


@dataclass
class ParticleExpiredEvent(Event):
    """Fired when a trail particle removes itself after its lifetime.

    Attributes:
        uid: Identity of the removed particle.
        glyph: Glyph of the removed particle.
    """

    uid: int
    glyph: str


@dataclass
class PopulationRestoredEvent(Event):
    """Fired at the end of bootstrap.

    Attributes:
        count: Population size after bootstrap (including specials and title letters).
        restored: True if the population came from the session store, False if
            it was freshly spawned.
    """

    count: int
    restored: bool


class EventBus:
    """Central event bus for publish/subscribe event handling.

    Thread safety: This implementation is NOT thread-safe. All subscribe, publish, and
    unsubscribe calls should happen on the main thread, which is also the thread
    the frame loop runs on.
    """

    def __init__(self) -> None:
        """Initialize the event bus with no registered listeners."""
        self.listeners: dict[type[Event], list[Callable[[Event], None]]] = {}

    def subscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Subscribe a handler to an event type.

        Handlers are called in the order they were registered. The same handler
        can be subscribed more than once and will be called once per subscription.

        Args:
            event_type: The type of event to listen for (e.g., NavigationRequestedEvent).
            handler: Callback function that takes the event as parameter.
        """
        if event_type not in self.listeners:
            self.listeners[event_type] = []
        self.listeners[event_type].append(handler)

    def unsubscribe(self, event_type: type[Event], handler: Callable[[Event], None]) -> None:
        """Unsubscribe a handler from an event type.

        Removes ALL subscriptions of ``handler`` for ``event_type``. Does nothing
        if the handler is not subscribed.
        """
        if event_type in self.listeners:
            self.listeners[event_type] = [h for h in self.listeners[event_type] if h != handler]

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Handlers are called synchronously. If a handler raises, the exception
        propagates and later handlers are not called.

        Args:
            event: The event instance to publish.
        """
        event_type = type(event)
        if event_type in self.listeners:
            # Copy so handlers may unsubscribe while being notified
            for handler in list(self.listeners[event_type]):
                handler(event)

    def clear(self) -> None:
        """Clear all event listeners for all event types."""
        self.listeners.clear()

    def unregister_all(self, subscriber: object) -> None:
        """Unregister all bound-method handlers belonging to ``subscriber``.

        Args:
            subscriber: The instance whose handlers should be removed.
        """
        for event_type in self.listeners:
            self.listeners[event_type] = [
                h for h in self.listeners[event_type] if not (hasattr(h, "__self__") and h.__self__ == subscriber)
            ]
