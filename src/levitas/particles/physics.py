"""Motion model shared by every particle variant.

All tunable constants live in the ``TUNING`` table, keyed by variant, and the
per-frame update is split into three phases that dispatch on that table:

1. ``apply_repulsion``: push away from the pointer inside the force radius.
2. ``integrate``: anti-gravity, velocity, spin and friction for Free particles.
3. ``apply_boundary``: recycle or wrap particles that leave the viewport.

Units are screen pixels with y growing downward, and time is measured in
frames: a particle moves by its velocity once per tick regardless of the
actual frame duration.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from levitas.types import Mobility, ParticleVariant

if TYPE_CHECKING:
    from levitas.particles.base import Particle

FORCE_RADIUS = 150.0
"""Pointer distance inside which repulsion applies."""

FRICTION = 0.96
"""Velocity multiplier applied after every Free integration step."""

RECYCLE_TOP = -50.0
"""Floating and special particles above this y are relaunched from the bottom."""

RECYCLE_REENTRY = 20.0
"""Distance below the viewport a recycled particle re-enters from."""

TEXT_WRAP_TOP = -100.0
"""Text particles above this y wrap to the bottom."""

TEXT_WRAP_REENTRY = 100.0
"""Distance below the viewport a wrapped text particle re-enters from."""


class BoundaryPolicy(Enum):
    """What happens when a particle leaves the viewport."""

    RECYCLE = auto()
    BOUNCE_AND_WRAP = auto()


@dataclass(frozen=True)
class VariantTuning:
    """Physics constants for one particle variant.

    Attributes:
        gravity: Upward bias subtracted from vy every Free step.
        push: Repulsion strength at the pointer.
        fixed_push: Repulsion strength while the particle is still Fixed.
        repulsion_exempt: Skip the repulsion phase entirely.
        boundary: Edge-of-viewport policy.
    """

    gravity: float
    push: float
    fixed_push: float
    repulsion_exempt: bool
    boundary: BoundaryPolicy


# Special particles carry a push constant but never react to the pointer.
TUNING: dict[ParticleVariant, VariantTuning] = {
    ParticleVariant.FLOATING: VariantTuning(
        gravity=0.05,
        push=15.0,
        fixed_push=15.0,
        repulsion_exempt=False,
        boundary=BoundaryPolicy.RECYCLE,
    ),
    ParticleVariant.TEXT: VariantTuning(
        gravity=0.05,
        push=15.0,
        fixed_push=2.0,
        repulsion_exempt=False,
        boundary=BoundaryPolicy.BOUNCE_AND_WRAP,
    ),
    ParticleVariant.SPECIAL: VariantTuning(
        gravity=0.02,
        push=3.0,
        fixed_push=3.0,
        repulsion_exempt=True,
        boundary=BoundaryPolicy.RECYCLE,
    ),
}


def apply_repulsion(particle: Particle, pointer_x: float, pointer_y: float) -> bool:
    """Push the particle away from the pointer.

    The force falls off linearly from 1 at the pointer to 0 at ``FORCE_RADIUS``.
    A Fixed particle that gets pushed is released and becomes Free.

    Args:
        particle: Particle to push.
        pointer_x: Last known pointer X.
        pointer_y: Last known pointer Y.

    Returns:
        True if the particle was inside the force radius and got pushed.
    """
    tuning = TUNING[particle.variant]
    if tuning.repulsion_exempt:
        return False

    dx = particle.x - pointer_x
    dy = particle.y - pointer_y
    distance = math.hypot(dx, dy)
    if distance >= FORCE_RADIUS:
        return False

    angle = math.atan2(dy, dx)
    force = (FORCE_RADIUS - distance) / FORCE_RADIUS
    fixed = particle.mobility is Mobility.FIXED
    push = tuning.fixed_push if fixed else tuning.push

    particle.vx += math.cos(angle) * force * push
    particle.vy += math.sin(angle) * force * push

    if fixed:
        particle.release()
    return True


def integrate(particle: Particle) -> None:
    """Advance a Free particle by one frame."""
    particle.vy -= TUNING[particle.variant].gravity

    particle.x += particle.vx
    particle.y += particle.vy
    particle.rotation += particle.vr

    particle.vx *= particle.friction
    particle.vy *= particle.friction


def apply_boundary(particle: Particle, width: float, height: float, rng: random.Random) -> None:
    """Recycle, bounce or wrap a particle that left the viewport.

    Args:
        particle: Particle to check.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        rng: Random source for relaunch trajectories.
    """
    if TUNING[particle.variant].boundary is BoundaryPolicy.RECYCLE:
        if particle.y < RECYCLE_TOP:
            particle.y = height + RECYCLE_REENTRY
            particle.x = rng.random() * width
            particle.vy = -rng.random() * 2 - 2
            if particle.variant is ParticleVariant.SPECIAL:
                # Keep special particles rising without picking up spin
                particle.vx = rng.random() - 0.5
                particle.vr = rng.random() - 0.5
                particle.vy = -2 - rng.random()
        return

    if particle.x < 0 or particle.x > width:
        particle.vx *= -1
    if particle.y < TEXT_WRAP_TOP:
        particle.y = height + TEXT_WRAP_REENTRY
