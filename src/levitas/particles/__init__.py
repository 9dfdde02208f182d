"""Particles and the motion model.

This package provides the particle types, the per-variant physics table and
the spawn policies used to populate a simulation.
"""

from levitas.particles.base import Particle, RenderCommand, SpecialParticle
from levitas.particles.physics import FORCE_RADIUS, FRICTION, TUNING, VariantTuning
from levitas.particles.spawn import spawn_floating, spawn_specials, spawn_trail, title_to_particles

__all__ = [
    "FORCE_RADIUS",
    "FRICTION",
    "TUNING",
    "Particle",
    "RenderCommand",
    "SpecialParticle",
    "VariantTuning",
    "spawn_floating",
    "spawn_specials",
    "spawn_trail",
    "title_to_particles",
]
