"""Spawn policies for the particle population.

Each function builds new particles and returns them; adding them to a
population and creating their visuals is up to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from levitas.exceptions import MissingAnchorError
from levitas.particles.base import Particle, SpecialParticle, default_rng
from levitas.types import ParticleVariant

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def spawn_floating(
    count: int,
    width: float,
    height: float,
    glyphs: Sequence[str],
    depth: float = 500,
    rng: random.Random | None = None,
) -> list[Particle]:
    """Create the background field of floating particles.

    Particles start anywhere across the viewport width and up to ``depth``
    pixels below its bottom edge, so they drift in from below.

    Args:
        count: Number of particles.
        width: Viewport width.
        height: Viewport height.
        glyphs: Palette to draw each glyph from.
        depth: Maximum distance below the viewport to start at.
        rng: Random source.

    Returns:
        The new particles.
    """
    rng = rng or default_rng
    if not glyphs:
        logger.warning("No floating glyphs configured, spawning nothing")
        return []

    particles = []
    for _ in range(count):
        x = rng.random() * width
        y = height + rng.random() * depth
        glyph = glyphs[int(rng.random() * len(glyphs))]
        particles.append(Particle.create(x, y, glyph, ParticleVariant.FLOATING, rng=rng))
    return particles


def spawn_specials(
    targets: Sequence[tuple[str, str]],
    width: float,
    height: float,
    glyph: str = "❤️",
    depth: float = 200,
    rng: random.Random | None = None,
) -> list[SpecialParticle]:
    """Create one special particle per (label, target) pair.

    The particles are spread evenly across the viewport width, start below its
    bottom edge and are launched gently upward.

    Args:
        targets: (label, target) pairs in display order.
        width: Viewport width.
        height: Viewport height.
        glyph: Glyph for every special particle.
        depth: Maximum distance below the viewport to start at.
        rng: Random source.

    Returns:
        The new special particles, in the order of ``targets``.
    """
    rng = rng or default_rng
    slots = len(targets)
    specials = []
    for index, (label, target) in enumerate(targets):
        x = (width / slots) * index + width / (slots * 2)
        y = height + rng.random() * depth
        special = SpecialParticle.create_special(x, y, label, target, glyph=glyph, rng=rng)
        special.vx = (rng.random() - 0.5) * 0.5
        special.vy = -1 - rng.random()
        specials.append(special)
    return specials


def spawn_trail(x: float, y: float, glyph: str = "✨", size: float = 10, rng: random.Random | None = None) -> Particle:
    """Create a small decorative particle at the pointer.

    Trail particles are light (small, never intercept the pointer) and start
    drifting upward at once.
    """
    particle = Particle.create(x, y, glyph, ParticleVariant.FLOATING, rng=rng)
    particle.size = size
    particle.pointer_blocking = False
    particle.vy = -1.0
    return particle


def title_to_particles(
    text: str,
    anchor: tuple[float, float] | None,
    pitch: float = 40,
    rng: random.Random | None = None,
) -> list[Particle]:
    """Break a title into one Fixed text particle per character.

    Characters are laid out left to right, ``pitch`` pixels apart, centered
    horizontally on the anchor. Each letter is released independently by the
    first pointer touch.

    Args:
        text: Title text. Spaces become (invisible) particles too.
        anchor: (x, y) center of the title on screen.
        pitch: Horizontal distance between characters.
        rng: Random source.

    Returns:
        The letter particles, left to right.

    Raises:
        MissingAnchorError: If there is no anchor or no text.
    """
    if anchor is None:
        msg = "Title has no anchor"
        raise MissingAnchorError(msg)
    if not text:
        msg = "Title has no text"
        raise MissingAnchorError(msg)

    anchor_x, anchor_y = anchor
    start_x = anchor_x - len(text) * pitch / 2
    letters = []
    for index, char in enumerate(text):
        letters.append(Particle.create(start_x + index * pitch, anchor_y, char, ParticleVariant.TEXT, rng=rng))
    return letters
