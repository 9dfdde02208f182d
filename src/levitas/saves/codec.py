"""Snapshot codec for the particle population.

The persisted form is a flat, order-preserving list of records, one per
particle, encoded as JSON:

    [
        {"x": 10.5, "y": 300.0, "vx": 0.2, "vy": -1.1, "rotation": 45.0, "vr": 0.3,
         "variant": "floating", "glyph": "🌸", "label": null, "target": null},
        {"x": 640.0, "y": 720.0, "vx": 0.0, "vy": -2.0, "rotation": 12.0, "vr": 0.1,
         "variant": "special", "glyph": "❤️", "label": "Photos", "target": "photos"}
    ]

There is no version field. Anything that does not decode cleanly raises
``DecodeError`` and callers treat it as "no prior state".
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from levitas.exceptions import DecodeError
from levitas.particles.base import Particle, SpecialParticle
from levitas.types import ParticleVariant, SnapshotRecordDict

if TYPE_CHECKING:
    import random
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

KINEMATIC_FIELDS = ("x", "y", "vx", "vy", "rotation", "vr")


class PersistenceCodec:
    """Converts between a particle population and its snapshot records.

    ``snapshot``/``restore`` work on lists of record dicts; ``encode``/``decode``
    add the JSON layer on top for the session store.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        """Initialize the codec.

        Args:
            rng: Random source handed to the particle constructors on restore.
                The randomized values are always overwritten.
        """
        self.rng = rng

    def snapshot(self, particles: Iterable[Particle]) -> list[SnapshotRecordDict]:
        """Map each particle to its record, preserving order.

        Args:
            particles: Population in iteration order.

        Returns:
            One record per particle.
        """
        records: list[SnapshotRecordDict] = []
        for particle in particles:
            special = particle if isinstance(particle, SpecialParticle) else None
            records.append(
                {
                    "x": particle.x,
                    "y": particle.y,
                    "vx": particle.vx,
                    "vy": particle.vy,
                    "rotation": particle.rotation,
                    "vr": particle.vr,
                    "variant": particle.variant.value,
                    "glyph": particle.glyph,
                    "label": special.label if special else None,
                    "target": special.target if special else None,
                }
            )
        return records

    def restore(self, records: Any) -> list[Particle]:  # noqa: ANN401
        """Rebuild particles from snapshot records.

        Each particle is constructed the normal way for its variant, then its
        position, velocity, rotation and angular velocity are overwritten with
        the persisted values.

        Args:
            records: Decoded snapshot, expected to be a list of record dicts.

        Returns:
            The particles, in record order.

        Raises:
            DecodeError: If the records are malformed.
        """
        if not isinstance(records, list):
            msg = f"Snapshot must be a list of records, got {type(records).__name__}"
            raise DecodeError(msg)

        particles = []
        for index, record in enumerate(records):
            try:
                particles.append(self._restore_one(record))
            except DecodeError as e:
                msg = f"Record {index}: {e}"
                raise DecodeError(msg) from e
        logger.debug("Restored %d particles from snapshot", len(particles))
        return particles

    def encode(self, particles: Iterable[Particle]) -> str:
        """Snapshot the population and serialize it to JSON."""
        return json.dumps(self.snapshot(particles), ensure_ascii=False)

    def decode(self, payload: str | None) -> list[Particle]:
        """Parse a JSON payload and restore the population from it.

        Args:
            payload: JSON text from the session store, or None if nothing was stored.

        Returns:
            The restored particles.

        Raises:
            DecodeError: If the payload is absent, not JSON, or malformed.
        """
        if payload is None:
            msg = "No saved state"
            raise DecodeError(msg)
        try:
            records = json.loads(payload)
        except (json.JSONDecodeError, TypeError) as e:
            msg = f"Saved state is not valid JSON: {e}"
            raise DecodeError(msg) from e
        return self.restore(records)

    def _restore_one(self, record: Any) -> Particle:  # noqa: ANN401
        if not isinstance(record, dict):
            msg = f"expected an object, got {type(record).__name__}"
            raise DecodeError(msg)

        kinematics = {name: _number(record, name) for name in KINEMATIC_FIELDS}

        try:
            variant = ParticleVariant(record.get("variant"))
        except ValueError as e:
            msg = f"unknown variant {record.get('variant')!r}"
            raise DecodeError(msg) from e

        glyph = record.get("glyph")
        if not isinstance(glyph, str):
            msg = "glyph must be a string"
            raise DecodeError(msg)

        if variant is ParticleVariant.SPECIAL:
            label = _optional_str(record, "label")
            target = _optional_str(record, "target")
            particle: Particle = SpecialParticle.create_special(
                kinematics["x"], kinematics["y"], label or "", target or "", glyph=glyph, rng=self.rng
            )
        else:
            particle = Particle.create(kinematics["x"], kinematics["y"], glyph, variant, rng=self.rng)

        # Persisted kinematics always win over constructor randomization
        for name, value in kinematics.items():
            setattr(particle, name, value)
        return particle


def _number(record: dict[str, Any], name: str) -> float:
    value = record.get(name)
    # bool is an int subclass but never a valid coordinate
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"{name} must be a number, got {value!r}"
        raise DecodeError(msg)
    return float(value)


def _optional_str(record: dict[str, Any], name: str) -> str | None:
    value = record.get(name)
    if value is not None and not isinstance(value, str):
        msg = f"{name} must be a string or null, got {value!r}"
        raise DecodeError(msg)
    return value
