"""Module for events."""

from levitas.events.base import (
    Event,
    EventBus,
    NavigationRequestedEvent,
    ParticleExpiredEvent,
    PopulationRestoredEvent,
)

__all__ = [
    "Event",
    "EventBus",
    "NavigationRequestedEvent",
    "ParticleExpiredEvent",
    "PopulationRestoredEvent",
]
