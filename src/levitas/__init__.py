"""Levitas - anti-gravity floating particles on Arcade.

This package animates floating emoji, title letters and clickable special
particles with a small anti-gravity simulation that shies away from the
pointer. The particle state follows the visitor across pages through a
session store.

Quick start:
    # Optionally create a settings.py file in your project root:
    # SCREEN_WIDTH = 1920
    # SPECIAL_TARGETS = [("Photos", "photos")]

    from levitas import run_app

    if __name__ == "__main__":
        run_app()

Headless usage:
    from levitas import MemorySessionStore, Simulation

    simulation = Simulation(1280, 720, interactive=True, store=MemorySessionStore())
    simulation.bootstrap()
    simulation.tick(1 / 60)
"""

__version__ = "0.1.0"

from levitas.conf import settings
from levitas.events import EventBus, NavigationRequestedEvent, ParticleExpiredEvent, PopulationRestoredEvent
from levitas.exceptions import DecodeError, MissingAnchorError
from levitas.helpers import create_app, run_app
from levitas.particles import Particle, RenderCommand, SpecialParticle
from levitas.saves import FileSessionStore, MemorySessionStore, PersistenceCodec, SessionStore
from levitas.simulation import Scheduler, Simulation
from levitas.types import Mobility, ParticleVariant
from levitas.view_manager import ViewManager

__all__ = [
    "DecodeError",
    "EventBus",
    "FileSessionStore",
    "MemorySessionStore",
    "MissingAnchorError",
    "Mobility",
    "NavigationRequestedEvent",
    "Particle",
    "ParticleExpiredEvent",
    "ParticleVariant",
    "PersistenceCodec",
    "PopulationRestoredEvent",
    "RenderCommand",
    "Scheduler",
    "SessionStore",
    "Simulation",
    "SpecialParticle",
    "ViewManager",
    "__version__",
    "create_app",
    "run_app",
    "settings",
]
