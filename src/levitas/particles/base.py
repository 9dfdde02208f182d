"""Particle state and the per-frame update.

A particle is a single glyph drifting on screen: floating emoji, a letter of a
title broken apart, or a clickable special particle that navigates somewhere.
The variant tag decides which constants and boundary policy apply; the physics
itself lives in ``levitas.particles.physics``.

Example usage:
    particle = Particle.create(400, 300, "🌸", rng=random.Random(1))
    command = particle.update(pointer_x, pointer_y, 1280, 720)
    render_sink.place(particle, command)
"""

from __future__ import annotations

import itertools
import random
from dataclasses import dataclass, field
from typing import Any

from levitas.particles import physics
from levitas.types import Mobility, ParticleVariant

_uids = itertools.count(1)

default_rng = random.Random()
"""Random source used when callers do not inject their own."""


@dataclass(frozen=True)
class RenderCommand:
    """Final placement of a particle for the rendering sink.

    Attributes:
        x: X position in screen pixels.
        y: Y position in screen pixels (grows downward).
        rotation: Rotation in degrees.
    """

    x: float
    y: float
    rotation: float


@dataclass(eq=False)
class Particle:
    """One simulated glyph.

    Kinematic fields are mutated in place by ``update``. Visual weight fields
    (``size``, ``opacity``, ``pointer_blocking``) are hints for the rendering
    sink and are not persisted.

    Attributes:
        x: X position in screen pixels.
        y: Y position in screen pixels (grows downward).
        glyph: Single display unit drawn for this particle.
        variant: Behavioral variant. Cannot change after creation.
        vx: Horizontal velocity in pixels per frame.
        vy: Vertical velocity in pixels per frame.
        rotation: Rotation in degrees.
        vr: Angular velocity in degrees per frame.
        mobility: FREE or FIXED. Only text particles may start FIXED, and a
            particle only ever goes from FIXED to FREE.
        origin_x: X at construction (informational).
        origin_y: Y at construction (informational).
        friction: Velocity multiplier per Free step.
        size: Font size hint for the rendering sink.
        opacity: Alpha hint for the rendering sink, 0.0 to 1.0.
        pointer_blocking: Whether the visual may intercept pointer events.
        uid: Identity used by sinks to track the particle's visual.
    """

    x: float
    y: float
    glyph: str
    variant: ParticleVariant = ParticleVariant.FLOATING
    vx: float = 0.0
    vy: float = 0.0
    rotation: float = 0.0
    vr: float = 0.0
    mobility: Mobility = Mobility.FREE
    origin_x: float | None = None
    origin_y: float | None = None
    friction: float = physics.FRICTION
    size: float = 30.0
    opacity: float = 1.0
    pointer_blocking: bool = True
    uid: int = field(default_factory=lambda: next(_uids))

    def __post_init__(self) -> None:
        """Fill in the origin and check the mobility and variant invariants."""
        if self.origin_x is None:
            self.origin_x = self.x
        if self.origin_y is None:
            self.origin_y = self.y
        if self.mobility is Mobility.FIXED and self.variant is not ParticleVariant.TEXT:
            msg = f"Only text particles may start fixed, got {self.variant.value}"
            raise ValueError(msg)
        if self.variant is ParticleVariant.SPECIAL and not isinstance(self, SpecialParticle):
            msg = "Special particles must be built as SpecialParticle"
            raise ValueError(msg)

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Refuse to change the variant once it has been set."""
        if name == "variant" and "variant" in self.__dict__:
            msg = "Particle variant is immutable"
            raise AttributeError(msg)
        if name == "mobility" and value is Mobility.FIXED and self.__dict__.get("mobility") is Mobility.FREE:
            msg = "A free particle cannot become fixed again"
            raise AttributeError(msg)
        super().__setattr__(name, value)

    @classmethod
    def create(
        cls,
        x: float,
        y: float,
        glyph: str,
        variant: ParticleVariant = ParticleVariant.FLOATING,
        rng: random.Random | None = None,
    ) -> Particle:
        """Construct a particle with randomized initial kinematics.

        Velocity and angular velocity are drawn from (-1, 1) and rotation from
        [0, 360). Floating particles also get a random size and opacity; text
        particles start Fixed.

        Args:
            x: Initial X position.
            y: Initial Y position.
            glyph: Glyph to draw.
            variant: FLOATING or TEXT. Use ``SpecialParticle.create`` for specials.
            rng: Random source (defaults to a shared module instance).

        Returns:
            The new particle.
        """
        rng = rng or default_rng
        particle = cls(
            x=x,
            y=y,
            glyph=glyph,
            variant=variant,
            vx=(rng.random() - 0.5) * 2,
            vy=(rng.random() - 0.5) * 2,
            rotation=rng.random() * 360,
            vr=(rng.random() - 0.5) * 2,
            mobility=Mobility.FIXED if variant is ParticleVariant.TEXT else Mobility.FREE,
        )
        if variant is ParticleVariant.FLOATING:
            particle.size = rng.random() * 20 + 20
            particle.opacity = rng.random() * 0.5 + 0.5
        elif variant is ParticleVariant.TEXT:
            particle.size = 64.0
        return particle

    @property
    def is_free(self) -> bool:
        """Whether the particle integrates its motion."""
        return self.mobility is Mobility.FREE

    def release(self) -> None:
        """Let a Fixed particle start moving. No-op if already Free."""
        self.mobility = Mobility.FREE

    def update(
        self,
        pointer_x: float,
        pointer_y: float,
        viewport_width: float,
        viewport_height: float,
        interaction_enabled: bool = True,  # noqa: FBT001, FBT002
        rng: random.Random | None = None,
    ) -> RenderCommand:
        """Advance the particle by one frame.

        Pointer repulsion only happens when ``interaction_enabled`` is True.
        Motion and boundary handling happen regardless.

        Args:
            pointer_x: Last known pointer X.
            pointer_y: Last known pointer Y.
            viewport_width: Current viewport width.
            viewport_height: Current viewport height.
            interaction_enabled: Whether the pointer may push particles.
            rng: Random source for relaunch trajectories.

        Returns:
            Where the rendering sink should draw the particle.
        """
        if interaction_enabled:
            physics.apply_repulsion(self, pointer_x, pointer_y)

        if self.is_free:
            physics.integrate(self)
            physics.apply_boundary(self, viewport_width, viewport_height, rng or default_rng)

        return RenderCommand(self.x, self.y, self.rotation)


@dataclass(eq=False)
class SpecialParticle(Particle):
    """A clickable particle that carries a navigation target.

    Special particles float more slowly than floating ones and never react to
    the pointer. Clicking one hands ``target`` to the navigation sink.

    Attributes:
        label: Caption drawn under the glyph.
        target: Where activation navigates to.
    """

    glyph: str = "❤️"
    variant: ParticleVariant = ParticleVariant.SPECIAL
    size: float = 60.0
    label: str = ""
    target: str = ""

    def __post_init__(self) -> None:
        """Check that the variant tag matches the type."""
        if self.variant is not ParticleVariant.SPECIAL:
            msg = f"SpecialParticle must have the special variant, got {self.variant.value}"
            raise ValueError(msg)
        super().__post_init__()

    @classmethod
    def create_special(
        cls,
        x: float,
        y: float,
        label: str,
        target: str,
        glyph: str = "❤️",
        rng: random.Random | None = None,
    ) -> SpecialParticle:
        """Construct a special particle with randomized initial kinematics.

        Same as ``Particle.create`` except that the angular velocity is drawn
        from (-0.25, 0.25) for a slower spin.
        """
        rng = rng or default_rng
        return cls(
            x=x,
            y=y,
            glyph=glyph,
            vx=(rng.random() - 0.5) * 2,
            vy=(rng.random() - 0.5) * 2,
            rotation=rng.random() * 360,
            vr=(rng.random() - 0.5) * 0.5,
            label=label,
            target=target,
        )
