"""Simulation orchestrator for the particle population.

This module provides the Simulation class, which owns the particle population
and everything the particles react to: the last known pointer position, the
viewport size and whether the page is interactive. A host (normally
``levitas.views.FloatView``) forwards its events to it and calls ``tick`` once
per frame.

Lifecycle:
1. ``bootstrap()`` restores the population from the session store, or spawns
   a fresh floating field if there is nothing usable stored. Then the context
   policy runs: the home page makes sure every navigation target has a special
   particle, sub pages drop all special particles.
2. ``tick(delta_time)`` updates every particle once, in population order, and
   then runs deferred tasks (trail expiry) that became due.
3. ``pointer_moved``, ``resize`` and ``click`` record input between ticks.
4. ``teardown()`` snapshots the population into the session store before the
   page goes away.

Example usage:
    simulation = Simulation(1280, 720, interactive=True, store=MemorySessionStore())
    simulation.bootstrap()

    # Every frame
    simulation.tick(delta_time)

    # Leaving the page
    simulation.teardown()
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from levitas.conf import settings
from levitas.events import EventBus, NavigationRequestedEvent, ParticleExpiredEvent, PopulationRestoredEvent
from levitas.exceptions import DecodeError, MissingAnchorError
from levitas.particles.base import Particle, SpecialParticle
from levitas.particles.spawn import spawn_floating, spawn_specials, spawn_trail, title_to_particles
from levitas.saves.codec import PersistenceCodec
from levitas.saves.store import MemorySessionStore, SessionStore
from levitas.simulation.scheduler import ScheduledTask, Scheduler
from levitas.sinks import NullRenderSink, RenderSink

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

OFFSCREEN_POINTER = -1000.0
"""Pointer coordinate used until the first pointer event arrives."""


class Simulation:
    """Owns the particle population and drives it frame by frame.

    Attributes:
        particles: The population, in update and snapshot order.
        width: Current viewport width.
        height: Current viewport height.
        interactive: True on the home page (pointer repulsion, trail, special
            particles), False on sub pages.
        pointer_x: Last known pointer X.
        pointer_y: Last known pointer Y.
        store: Session store the population is persisted to.
        event_bus: Bus for navigation, expiry and bootstrap events.
        render_sink: Receives create/place/destroy requests for visuals.
        scheduler: Frame-clock scheduler for deferred tasks.
        codec: Snapshot codec.
        rng: Random source for every randomized decision.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        interactive: bool,
        store: SessionStore | None = None,
        event_bus: EventBus | None = None,
        render_sink: RenderSink | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize an empty simulation.

        Args:
            width: Initial viewport width.
            height: Initial viewport height.
            interactive: Page context flag, fixed for the simulation's lifetime.
            store: Session store (defaults to a private in-memory store).
            event_bus: Event bus (defaults to a private bus).
            render_sink: Rendering sink (defaults to one that draws nothing).
            rng: Random source (defaults to a fresh unseeded one).
        """
        self.particles: list[Particle] = []
        self.width = width
        self.height = height
        self.interactive = interactive
        self.pointer_x = OFFSCREEN_POINTER
        self.pointer_y = OFFSCREEN_POINTER

        self.store = store if store is not None else MemorySessionStore()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.render_sink: RenderSink = render_sink if render_sink is not None else NullRenderSink()
        self.rng = rng if rng is not None else random.Random()
        self.codec = PersistenceCodec(rng=self.rng)
        self.scheduler = Scheduler()

        self._expiry_tasks: dict[int, ScheduledTask] = {}

    # Population

    def add(self, particle: Particle) -> None:
        """Append a particle to the population and create its visual."""
        self.particles.append(particle)
        self.render_sink.create(particle)

    def add_all(self, particles: Iterable[Particle]) -> None:
        """Append several particles, keeping their order."""
        for particle in particles:
            self.add(particle)

    def remove(self, particle: Particle) -> bool:
        """Remove a particle and tear down its visual.

        Args:
            particle: Particle to remove (matched by identity).

        Returns:
            True if the particle was part of the population.
        """
        for index, member in enumerate(self.particles):
            if member is particle:
                del self.particles[index]
                self.render_sink.destroy(particle)
                task = self._expiry_tasks.pop(particle.uid, None)
                if task:
                    task.cancel()
                return True
        return False

    def specials(self) -> list[SpecialParticle]:
        """Special particles currently in the population."""
        return [p for p in self.particles if isinstance(p, SpecialParticle)]

    # Lifecycle

    def bootstrap(self) -> bool:
        """Populate the simulation for a newly shown page.

        Restores the stored snapshot if there is a usable one, otherwise spawns
        a fresh floating field. Then applies the context policy for special
        particles. Never raises for bad stored state.

        Returns:
            True if the population was restored from the session store.
        """
        restored = self._load_state()
        if not restored:
            self.spawn_floating(settings.FLOATING_COUNT)
            if self.interactive and settings.CONVERT_TITLE:
                self.convert_title(settings.TITLE_TEXT, (self.width / 2, self.height / 2 - 50))

        if self.interactive:
            self.ensure_specials()
        else:
            self.remove_specials()

        logger.info(
            "Simulation ready with %d particles (%s, %s page)",
            len(self.particles),
            "restored" if restored else "fresh",
            "home" if self.interactive else "sub",
        )
        self.event_bus.publish(PopulationRestoredEvent(count=len(self.particles), restored=restored))
        return restored

    def tick(self, delta_time: float) -> None:
        """Advance the simulation by one frame.

        Every particle is updated once, in population order, and its new
        placement is sent to the rendering sink. A particle whose update raises
        is logged and skipped for this frame; the rest still move. Deferred
        tasks run after the particle pass.

        Args:
            delta_time: Seconds since the previous tick (drives deferred tasks only).
        """
        for particle in list(self.particles):
            try:
                command = particle.update(
                    self.pointer_x,
                    self.pointer_y,
                    self.width,
                    self.height,
                    self.interactive,
                    rng=self.rng,
                )
                self.render_sink.place(particle, command)
            except Exception:
                logger.exception("Particle %d update failed", particle.uid)

        self.scheduler.advance(delta_time)

    def teardown(self) -> bool:
        """Persist the population before the page goes away.

        Best effort: failures are logged and reported through the return
        value, never raised. Pending deferred tasks are cancelled.

        Returns:
            True if the snapshot was written.
        """
        self.scheduler.cancel_all()
        self._expiry_tasks.clear()
        try:
            payload = self.codec.encode(self.particles)
            self.store.set(settings.SESSION_KEY, payload)
        except Exception:
            logger.exception("Failed to save particle state")
            return False
        else:
            logger.debug("Saved %d particles to session key %s", len(self.particles), settings.SESSION_KEY)
            return True

    # Input

    def pointer_moved(self, x: float, y: float) -> Particle | None:
        """Record a pointer move and maybe leave a trail particle.

        Args:
            x: Pointer X.
            y: Pointer Y.

        Returns:
            The trail particle spawned by this move, if any.
        """
        self.pointer_x = x
        self.pointer_y = y
        if self.interactive:
            return self.spawn_trail(x, y)
        return None

    def resize(self, width: float, height: float) -> None:
        """Record new viewport dimensions for subsequent ticks."""
        self.width = width
        self.height = height
        logger.debug("Viewport resized to %sx%s", width, height)

    def hit_test(self, x: float, y: float, radius: float | None = None) -> SpecialParticle | None:
        """Find the special particle under a point.

        A labelled special particle is clickable from its glyph down to its
        label, SPECIAL_LABEL_OFFSET pixels below. Later particles are drawn on
        top, so they win ties.

        Args:
            x: Point X.
            y: Point Y.
            radius: Hit radius (defaults to SPECIAL_HIT_RADIUS).

        Returns:
            The topmost special particle within ``radius`` of its glyph or
            label, or None.
        """
        if radius is None:
            radius = settings.SPECIAL_HIT_RADIUS
        for particle in reversed(self.particles):
            if isinstance(particle, SpecialParticle):
                reach = settings.SPECIAL_LABEL_OFFSET if particle.label else 0
                # Nearest point on the segment from the glyph to the label
                nearest_y = min(max(y, particle.y), particle.y + reach)
                dx = particle.x - x
                dy = nearest_y - y
                if dx * dx + dy * dy <= radius * radius:
                    return particle
        return None

    def click(self, x: float, y: float) -> bool:
        """Handle a click at a point.

        Returns:
            True if the click activated a special particle and must not
            propagate any further.
        """
        special = self.hit_test(x, y)
        if special is None:
            return False
        return self.activate(special)

    def activate(self, particle: Particle) -> bool:
        """Activate a special particle, signalling the navigation sink once.

        Args:
            particle: The clicked particle.

        Returns:
            True if a navigation request was published (the click is consumed).
        """
        if not isinstance(particle, SpecialParticle):
            return False
        if not any(member is particle for member in self.particles):
            logger.warning("Ignoring click on special particle %d that is no longer present", particle.uid)
            return False

        logger.info("Special particle %r activated, navigating to %s", particle.label, particle.target)
        self.event_bus.publish(NavigationRequestedEvent(label=particle.label, target=particle.target))
        return True

    # Spawn policies

    def spawn_floating(self, count: int) -> list[Particle]:
        """Add ``count`` floating particles drifting in from below the viewport."""
        particles = spawn_floating(
            count,
            self.width,
            self.height,
            settings.FLOATING_GLYPHS,
            depth=settings.FLOATING_SPAWN_DEPTH,
            rng=self.rng,
        )
        self.add_all(particles)
        logger.debug("Spawned %d floating particles", len(particles))
        return particles

    def ensure_specials(self) -> list[SpecialParticle]:
        """Make sure every configured navigation target has a special particle.

        Returns:
            The special particles that had to be added.
        """
        present = {special.target for special in self.specials()}
        candidates = spawn_specials(
            settings.SPECIAL_TARGETS,
            self.width,
            self.height,
            glyph=settings.SPECIAL_GLYPH,
            depth=settings.SPECIAL_SPAWN_DEPTH,
            rng=self.rng,
        )
        missing = [special for special in candidates if special.target not in present]
        self.add_all(missing)
        if missing:
            logger.debug("Spawned %d special particles", len(missing))
        return missing

    def remove_specials(self) -> int:
        """Drop every special particle from the population.

        Returns:
            Number of particles removed.
        """
        removed = 0
        for special in self.specials():
            if self.remove(special):
                removed += 1
        if removed:
            logger.info("Removed %d special particles outside the home page", removed)
        return removed

    def spawn_trail(self, x: float, y: float) -> Particle | None:
        """Maybe leave a short-lived particle at the pointer.

        The particle removes itself after TRAIL_LIFETIME seconds of frame time,
        whatever it is doing at that point.

        Returns:
            The trail particle, or None if the roll did not spawn one.
        """
        if self.rng.random() >= settings.TRAIL_SPAWN_CHANCE:
            return None

        particle = spawn_trail(x, y, glyph=settings.TRAIL_GLYPH, size=settings.TRAIL_SIZE, rng=self.rng)
        self.add(particle)
        self._expiry_tasks[particle.uid] = self.scheduler.schedule(
            settings.TRAIL_LIFETIME, lambda: self._expire(particle)
        )
        return particle

    def convert_title(self, text: str, anchor: tuple[float, float] | None) -> list[Particle]:
        """Break a title into Fixed letter particles.

        Does nothing if there is no anchor or no text.

        Args:
            text: Title text.
            anchor: (x, y) center of the title, or None if the title is not shown.

        Returns:
            The letter particles that were added.
        """
        try:
            letters = title_to_particles(text, anchor, pitch=settings.TITLE_LETTER_PITCH, rng=self.rng)
        except MissingAnchorError as e:
            logger.debug("Skipping title conversion: %s", e)
            return []
        self.add_all(letters)
        return letters

    # Persistence

    def _load_state(self) -> bool:
        """Replace the population with the stored snapshot, if there is one."""
        try:
            payload = self.store.get(settings.SESSION_KEY)
        except Exception:
            logger.exception("Failed to read saved particle state")
            return False

        if payload is None:
            logger.debug("No saved particle state")
            return False

        try:
            particles = self.codec.decode(payload)
        except DecodeError as e:
            logger.warning("Discarding saved particle state: %s", e)
            return False

        self.add_all(particles)
        return True

    def _expire(self, particle: Particle) -> None:
        self._expiry_tasks.pop(particle.uid, None)
        if self.remove(particle):
            self.event_bus.publish(ParticleExpiredEvent(uid=particle.uid, glyph=particle.glyph))
