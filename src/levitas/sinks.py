"""Rendering sink interface.

The simulation never draws anything itself. It tells a rendering sink when a
particle's visual must be created or torn down, and where to place it every
tick. ``levitas.views.ArcadeRenderSink`` draws with arcade; ``NullRenderSink``
draws nothing and is used when running headless.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from levitas.particles.base import Particle, RenderCommand


class RenderSink(Protocol):
    """Receives visual lifecycle and placement requests for particles."""

    def create(self, particle: Particle) -> None:
        """Create the visual for a newly added particle."""
        ...

    def place(self, particle: Particle, command: RenderCommand) -> None:
        """Move and rotate a particle's visual."""
        ...

    def destroy(self, particle: Particle) -> None:
        """Tear down the visual of a removed particle."""
        ...


class NullRenderSink:
    """Rendering sink that ignores every request."""

    def create(self, particle: Particle) -> None:
        """Ignore."""

    def place(self, particle: Particle, command: RenderCommand) -> None:
        """Ignore."""

    def destroy(self, particle: Particle) -> None:
        """Ignore."""
