"""Rendering sink that draws particles with arcade.

Each particle gets one ``arcade.Text`` for its glyph, plus one for the label
of a special particle. The simulation works in y-down screen coordinates like
a web page; this sink flips them into arcade's y-up window coordinates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import arcade

from levitas.conf import settings
from levitas.particles.base import SpecialParticle
from levitas.types import ParticleVariant

if TYPE_CHECKING:
    from levitas.particles.base import Particle, RenderCommand

logger = logging.getLogger(__name__)

TEXT_COLOR = (233, 30, 99)
"""Color of title letters and special particle labels."""


class ArcadeRenderSink:
    """Keeps an ``arcade.Text`` per particle and draws them in population order.

    Attributes:
        height: Window height used to flip y coordinates. Keep it in sync on resize.
    """

    def __init__(self, height: float) -> None:
        """Initialize the sink.

        Args:
            height: Current window height.
        """
        self.height = height
        self._glyphs: dict[int, arcade.Text] = {}
        self._labels: dict[int, arcade.Text] = {}

    def create(self, particle: Particle) -> None:
        """Create the visual for a particle."""
        alpha = round(255 * max(0.0, min(1.0, particle.opacity)))
        if particle.variant is ParticleVariant.TEXT:
            color = (*TEXT_COLOR, alpha)
        else:
            color = (255, 255, 255, alpha)

        self._glyphs[particle.uid] = arcade.Text(
            particle.glyph,
            particle.x,
            self.height - particle.y,
            color,
            font_size=particle.size,
            anchor_x="center",
            anchor_y="center",
            bold=particle.variant is ParticleVariant.TEXT,
            rotation=particle.rotation,
        )
        if isinstance(particle, SpecialParticle) and particle.label:
            self._labels[particle.uid] = arcade.Text(
                particle.label,
                particle.x,
                self.height - particle.y - settings.SPECIAL_LABEL_OFFSET,
                TEXT_COLOR,
                font_size=14,
                anchor_x="center",
                anchor_y="center",
                bold=True,
            )

    def place(self, particle: Particle, command: RenderCommand) -> None:
        """Move and rotate a particle's visual."""
        glyph = self._glyphs.get(particle.uid)
        if glyph is None:
            return
        screen_y = self.height - command.y
        glyph.x = command.x
        glyph.y = screen_y
        glyph.rotation = command.rotation

        label = self._labels.get(particle.uid)
        if label is not None:
            label.x = command.x
            label.y = screen_y - settings.SPECIAL_LABEL_OFFSET

    def destroy(self, particle: Particle) -> None:
        """Drop a particle's visual."""
        self._glyphs.pop(particle.uid, None)
        self._labels.pop(particle.uid, None)

    def clear(self) -> None:
        """Drop every visual."""
        self._glyphs.clear()
        self._labels.clear()

    def draw(self) -> None:
        """Draw every visual, labels on top of their glyphs."""
        for uid, glyph in self._glyphs.items():
            glyph.draw()
            label = self._labels.get(uid)
            if label is not None:
                label.draw()
