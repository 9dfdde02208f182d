"""Custom types and enumerations."""

from enum import Enum
from typing import TypedDict


class ParticleVariant(Enum):
    """Behavioral variant of a particle.

    The value is the tag written to the session store.
    """

    FLOATING = "floating"
    TEXT = "text"
    SPECIAL = "special"


class Mobility(Enum):
    """Whether a particle integrates its motion each tick."""

    FREE = "free"
    FIXED = "fixed"


class SnapshotRecordDict(TypedDict):
    """TypedDict for one persisted particle."""

    x: float
    y: float
    vx: float
    vy: float
    rotation: float
    vr: float
    variant: str
    glyph: str
    label: str | None
    target: str | None
