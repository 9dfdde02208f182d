"""Unit tests for Simulation."""

import json
import random
import unittest
from unittest.mock import MagicMock

from levitas.conf import settings
from levitas.events import EventBus, NavigationRequestedEvent, ParticleExpiredEvent, PopulationRestoredEvent
from levitas.particles import Particle, SpecialParticle
from levitas.saves import MemorySessionStore, PersistenceCodec
from levitas.simulation import Simulation
from levitas.types import Mobility, ParticleVariant

KEY = "valentines_state"


def _stored(*particles: Particle) -> MemorySessionStore:
    """A session store already holding a snapshot of ``particles``."""
    store = MemorySessionStore()
    store.set(KEY, PersistenceCodec().encode(particles))
    return store


class SimulationTestCase(unittest.TestCase):
    """Shared setup for simulation tests."""

    def setUp(self) -> None:
        """Create mocks for the sinks and an event recorder."""
        self.render_sink = MagicMock()
        self.event_bus = EventBus()
        self.events: list = []
        for event_type in (NavigationRequestedEvent, ParticleExpiredEvent, PopulationRestoredEvent):
            self.event_bus.subscribe(event_type, self.events.append)

    def make(self, *, interactive: bool = True, store: MemorySessionStore | None = None) -> Simulation:
        """Create a deterministic simulation with an 800x600 viewport."""
        return Simulation(
            800,
            600,
            interactive=interactive,
            store=store if store is not None else MemorySessionStore(),
            event_bus=self.event_bus,
            render_sink=self.render_sink,
            rng=random.Random(1234),
        )

    def events_of(self, event_type: type) -> list:
        """Recorded events of one type."""
        return [e for e in self.events if isinstance(e, event_type)]


class TestBootstrap(SimulationTestCase):
    """Test population setup for home and sub pages."""

    def test_fresh_home_page(self) -> None:
        """Test that an empty session spawns the floating field plus one special per target."""
        simulation = self.make()

        restored = simulation.bootstrap()

        assert restored is False
        floating = [p for p in simulation.particles if p.variant is ParticleVariant.FLOATING]
        assert len(floating) == 20
        assert [s.target for s in simulation.specials()] == ["letter", "photos", "playlist", "question"]
        assert self.render_sink.create.call_count == 24
        assert self.events_of(PopulationRestoredEvent) == [PopulationRestoredEvent(count=24, restored=False)]

    def test_fresh_floating_field_placement(self) -> None:
        """Test that fresh floating particles start below the viewport with palette glyphs."""
        simulation = self.make(interactive=False)

        simulation.bootstrap()

        for particle in simulation.particles:
            assert 0 <= particle.x < 800
            assert 600 <= particle.y < 1100
            assert particle.glyph in settings.FLOATING_GLYPHS

    def test_fresh_special_placement(self) -> None:
        """Test that special particles are spread evenly and launched upward."""
        simulation = self.make()

        simulation.bootstrap()

        assert [s.x for s in simulation.specials()] == [100.0, 300.0, 500.0, 700.0]
        for special in simulation.specials():
            assert 600 <= special.y < 800
            assert -2 < special.vy <= -1
            assert abs(special.vx) <= 0.25

    def test_fresh_sub_page_has_no_specials(self) -> None:
        """Test that a sub page never spawns special particles."""
        simulation = self.make(interactive=False)

        simulation.bootstrap()

        assert len(simulation.particles) == 20
        assert simulation.specials() == []

    def test_restore_keeps_state_and_order(self) -> None:
        """Test that a stored snapshot is restored exactly instead of spawning."""
        saved = [
            Particle(x=1.5, y=2.5, glyph="🌸", vx=0.25, vy=-0.5, rotation=33.0, vr=0.75),
            Particle(x=10.0, y=20.0, glyph="💌", vx=-1.0, vy=-2.0, rotation=1.0, vr=-0.5),
        ]
        simulation = self.make(interactive=False, store=_stored(*saved))

        restored = simulation.bootstrap()

        assert restored is True
        assert [(p.x, p.y, p.vx, p.vy, p.rotation, p.vr, p.glyph) for p in simulation.particles] == [
            (1.5, 2.5, 0.25, -0.5, 33.0, 0.75, "🌸"),
            (10.0, 20.0, -1.0, -2.0, 1.0, -0.5, "💌"),
        ]
        assert self.events_of(PopulationRestoredEvent)[0].restored is True

    def test_sub_page_removes_restored_specials(self) -> None:
        """Test that specials carried over from the home page are dropped on a sub page."""
        special = SpecialParticle(x=50, y=60, label="Photos", target="photos")
        store = _stored(Particle(x=1, y=2, glyph="🌸"), special, Particle(x=3, y=4, glyph="💖"))
        simulation = self.make(interactive=False, store=store)

        simulation.bootstrap()

        assert simulation.specials() == []
        assert [p.glyph for p in simulation.particles] == ["🌸", "💖"]
        destroyed = [c.args[0] for c in self.render_sink.destroy.call_args_list]
        assert len(destroyed) == 1
        assert isinstance(destroyed[0], SpecialParticle)

    def test_home_page_tops_up_missing_specials(self) -> None:
        """Test that only targets without a special particle get a new one."""
        store = _stored(
            SpecialParticle(x=50, y=60, label="Photos", target="photos"),
            SpecialParticle(x=70, y=80, label="Song", target="playlist"),
        )
        simulation = self.make(store=store)

        simulation.bootstrap()

        targets = [s.target for s in simulation.specials()]
        assert sorted(targets) == ["letter", "photos", "playlist", "question"]
        assert targets[:2] == ["photos", "playlist"]

    def test_malformed_state_falls_back_to_fresh(self) -> None:
        """Test that undecodable state is treated as no state."""
        store = MemorySessionStore()
        store.set(KEY, json.dumps([{"x": "oops"}]))
        simulation = self.make(interactive=False, store=store)

        with self.assertLogs("levitas.simulation.manager", level="WARNING"):
            restored = simulation.bootstrap()

        assert restored is False
        assert len(simulation.particles) == 20

    def test_unreadable_store_falls_back_to_fresh(self) -> None:
        """Test that a store read failure is logged and not raised."""
        store = MagicMock()
        store.get.side_effect = OSError("disk gone")
        simulation = Simulation(800, 600, interactive=False, store=store, rng=random.Random(1))

        with self.assertLogs("levitas.simulation.manager", level="ERROR"):
            restored = simulation.bootstrap()

        assert restored is False
        assert len(simulation.particles) == 20

    def test_title_converted_on_fresh_home_page(self) -> None:
        """Test that CONVERT_TITLE adds fixed letters on a fresh home page."""
        settings.configure(CONVERT_TITLE=True, TITLE_TEXT="Hi")
        simulation = self.make()

        simulation.bootstrap()

        letters = [p for p in simulation.particles if p.variant is ParticleVariant.TEXT]
        assert [p.glyph for p in letters] == ["H", "i"]
        assert all(p.mobility is Mobility.FIXED for p in letters)

    def test_pointer_starts_offscreen(self) -> None:
        """Test that nothing is repelled before the first pointer event."""
        simulation = self.make()

        assert (simulation.pointer_x, simulation.pointer_y) == (-1000.0, -1000.0)


class TestTick(SimulationTestCase):
    """Test the per-frame update pass."""

    def test_every_particle_updated_and_placed(self) -> None:
        """Test that each particle moves once and its placement reaches the sink."""
        simulation = self.make()
        first = Particle(x=100, y=100, glyph="🌸", vx=1.0)
        second = Particle(x=200, y=200, glyph="💖", vx=-1.0)
        simulation.add_all([first, second])

        simulation.tick(1 / 60)

        assert (first.x, second.x) == (101.0, 199.0)
        placed = [c.args[0] for c in self.render_sink.place.call_args_list]
        assert placed == [first, second]

    def test_failing_particle_does_not_stop_others(self) -> None:
        """Test that one faulty particle is logged and the rest still move."""
        simulation = self.make()
        broken = MagicMock()
        broken.uid = 999
        broken.update.side_effect = RuntimeError("boom")
        healthy = Particle(x=100, y=100, glyph="🌸", vx=1.0)
        simulation.particles.extend([broken, healthy])

        with self.assertLogs("levitas.simulation.manager", level="ERROR"):
            simulation.tick(1 / 60)

        assert healthy.x == 101.0

    def test_resize_applies_to_next_tick(self) -> None:
        """Test that recycling uses the most recent viewport height."""
        simulation = self.make()
        particle = Particle(x=10, y=-51, glyph="🌸")
        simulation.add(particle)

        simulation.resize(100, 300)
        simulation.tick(1 / 60)

        assert particle.y == 320
        assert 0 <= particle.x < 100

    def test_resize_does_not_move_particles(self) -> None:
        """Test that a resize by itself repositions nothing."""
        simulation = self.make()
        particle = Particle(x=700, y=500, glyph="🌸")
        simulation.add(particle)

        simulation.resize(100, 100)

        assert (particle.x, particle.y) == (700, 500)

    def test_sub_page_ignores_pointer(self) -> None:
        """Test that particles on a sub page are not repelled."""
        simulation = self.make(interactive=False)
        particle = Particle(x=100, y=100, glyph="🌸")
        simulation.add(particle)

        simulation.pointer_moved(100, 100)
        simulation.tick(1 / 60)

        assert particle.vx == 0.0

    def test_home_page_repels(self) -> None:
        """Test that particles on the home page are pushed by the pointer."""
        settings.configure(TRAIL_SPAWN_CHANCE=0.0)
        simulation = self.make()
        particle = Particle(x=100, y=100, glyph="🌸")
        simulation.add(particle)

        simulation.pointer_moved(90, 100)
        simulation.tick(1 / 60)

        assert particle.vx > 0


class TestTrail(SimulationTestCase):
    """Test the pointer trail."""

    def test_trail_particle_expires(self) -> None:
        """Test that a trail particle lives for its lifetime and leaves nothing else changed."""
        settings.configure(TRAIL_SPAWN_CHANCE=1.0)
        simulation = self.make()
        others = [Particle(x=100, y=100, glyph="🌸"), Particle(x=200, y=200, glyph="💖")]
        simulation.add_all(others)

        trail = simulation.pointer_moved(400, 300)

        assert trail is not None
        assert trail in simulation.particles
        assert trail.glyph == "✨"
        assert trail.size == 10
        assert trail.pointer_blocking is False
        assert trail.is_free

        simulation.tick(0.5)
        assert trail in simulation.particles

        simulation.tick(0.5)
        assert trail not in simulation.particles
        assert simulation.particles == others
        self.render_sink.destroy.assert_called_once_with(trail)
        assert self.events_of(ParticleExpiredEvent) == [ParticleExpiredEvent(uid=trail.uid, glyph="✨")]

    def test_trail_starts_rising(self) -> None:
        """Test that a trail particle is launched upward."""
        settings.configure(TRAIL_SPAWN_CHANCE=1.0)
        simulation = self.make()

        trail = simulation.pointer_moved(400, 300)

        assert trail is not None
        assert trail.vy == -1.0

    def test_trail_chance(self) -> None:
        """Test that a zero chance never spawns and pointer position is still recorded."""
        settings.configure(TRAIL_SPAWN_CHANCE=0.0)
        simulation = self.make()

        for _ in range(50):
            assert simulation.pointer_moved(10, 20) is None

        assert simulation.particles == []
        assert (simulation.pointer_x, simulation.pointer_y) == (10, 20)

    def test_no_trail_on_sub_page(self) -> None:
        """Test that sub pages never leave a trail."""
        settings.configure(TRAIL_SPAWN_CHANCE=1.0)
        simulation = self.make(interactive=False)

        assert simulation.pointer_moved(10, 20) is None
        assert simulation.particles == []

    def test_removed_trail_cancels_timer(self) -> None:
        """Test that removing a trail particle early also drops its expiry task."""
        settings.configure(TRAIL_SPAWN_CHANCE=1.0)
        simulation = self.make()
        trail = simulation.pointer_moved(400, 300)

        assert simulation.remove(trail) is True
        simulation.tick(2.0)

        assert simulation.scheduler.pending == 0
        assert self.events_of(ParticleExpiredEvent) == []


class TestClick(SimulationTestCase):
    """Test special particle activation."""

    def test_click_on_special_navigates_once(self) -> None:
        """Test that clicking a special particle signals its target exactly once."""
        simulation = self.make()
        special = SpecialParticle(x=300, y=200, label="Photos", target="photos")
        simulation.add_all([Particle(x=300, y=200, glyph="🌸"), special])

        consumed = simulation.click(310, 195)

        assert consumed is True
        assert self.events_of(NavigationRequestedEvent) == [NavigationRequestedEvent(label="Photos", target="photos")]

    def test_click_elsewhere(self) -> None:
        """Test that a click away from every special particle is not consumed."""
        simulation = self.make()
        simulation.add(SpecialParticle(x=300, y=200, label="Photos", target="photos"))

        assert simulation.click(10, 10) is False
        assert self.events_of(NavigationRequestedEvent) == []

    def test_click_on_label_navigates(self) -> None:
        """Test that the label under a special particle is part of its click area."""
        simulation = self.make()
        simulation.add(SpecialParticle(x=300, y=200, label="Photos", target="photos"))

        consumed = simulation.click(300, 200 + settings.SPECIAL_LABEL_OFFSET + 10)

        assert consumed is True
        assert [e.target for e in self.events_of(NavigationRequestedEvent)] == ["photos"]

    def test_click_below_label_is_ignored(self) -> None:
        """Test that the click area stops one hit radius below the label."""
        simulation = self.make()
        simulation.add(SpecialParticle(x=300, y=200, label="Photos", target="photos"))

        below = 200 + settings.SPECIAL_LABEL_OFFSET + settings.SPECIAL_HIT_RADIUS + 1

        assert simulation.click(300, below) is False
        assert simulation.click(300, 200 - settings.SPECIAL_HIT_RADIUS - 1) is False

    def test_unlabelled_special_hit_only_on_glyph(self) -> None:
        """Test that a special particle without a label is hit around its glyph only."""
        simulation = self.make()
        simulation.add(SpecialParticle(x=300, y=200, target="photos"))

        assert simulation.click(300, 200 + settings.SPECIAL_LABEL_OFFSET + 10) is False
        assert simulation.click(300, 210) is True

    def test_topmost_special_wins(self) -> None:
        """Test that overlapping specials resolve to the one drawn last."""
        simulation = self.make()
        simulation.add(SpecialParticle(x=300, y=200, label="Photos", target="photos"))
        simulation.add(SpecialParticle(x=305, y=200, label="Song", target="playlist"))

        simulation.click(302, 200)

        assert [e.target for e in self.events_of(NavigationRequestedEvent)] == ["playlist"]

    def test_activate_ignores_non_special(self) -> None:
        """Test that ordinary particles cannot be activated."""
        simulation = self.make()
        particle = Particle(x=300, y=200, glyph="🌸")
        simulation.add(particle)

        assert simulation.activate(particle) is False
        assert self.events_of(NavigationRequestedEvent) == []

    def test_activate_ignores_removed_special(self) -> None:
        """Test that a special no longer in the population does nothing."""
        simulation = self.make()
        special = SpecialParticle(x=300, y=200, label="Photos", target="photos")

        assert simulation.activate(special) is False


class TestTeardown(SimulationTestCase):
    """Test persistence on page teardown."""

    def test_teardown_then_bootstrap_round_trips(self) -> None:
        """Test that the next page resumes the exact population."""
        store = MemorySessionStore()
        home = self.make(store=store)
        home.bootstrap()
        for _ in range(30):
            home.tick(1 / 60)

        assert home.teardown() is True

        restored = self.make(store=store)
        restored.bootstrap()

        def fields(p: Particle) -> tuple:
            return (p.x, p.y, p.vx, p.vy, p.rotation, p.vr, p.variant, p.glyph)

        assert [fields(p) for p in restored.particles] == [fields(p) for p in home.particles]
        assert [s.target for s in restored.specials()] == [s.target for s in home.specials()]

    def test_teardown_uses_session_key(self) -> None:
        """Test that the snapshot is stored under the configured key."""
        settings.configure(SESSION_KEY="other_key")
        store = MemorySessionStore()
        simulation = self.make(store=store)
        simulation.add(Particle(x=1, y=2, glyph="🌸"))

        simulation.teardown()

        assert store.get("other_key") is not None
        assert store.get(KEY) is None

    def test_teardown_failure_is_not_raised(self) -> None:
        """Test that a failing store write is logged and reported, never raised."""
        store = MagicMock()
        store.set.side_effect = OSError("read-only")
        simulation = Simulation(800, 600, interactive=True, store=store, rng=random.Random(1))
        simulation.add(Particle(x=1, y=2, glyph="🌸"))

        with self.assertLogs("levitas.simulation.manager", level="ERROR"):
            assert simulation.teardown() is False

    def test_teardown_cancels_pending_trail_timers(self) -> None:
        """Test that no deferred task survives the page."""
        settings.configure(TRAIL_SPAWN_CHANCE=1.0)
        simulation = self.make()
        simulation.pointer_moved(10, 10)

        simulation.teardown()

        assert simulation.scheduler.pending == 0


class TestTitle(SimulationTestCase):
    """Test title-to-particles conversion."""

    def test_letters_laid_out_around_anchor(self) -> None:
        """Test one fixed letter per character, 40px apart, centered on the anchor."""
        simulation = self.make()

        letters = simulation.convert_title("Love", (400, 250))

        assert [p.glyph for p in letters] == ["L", "o", "v", "e"]
        assert [p.x for p in letters] == [320.0, 360.0, 400.0, 440.0]
        assert all(p.y == 250 for p in letters)
        assert all(p.mobility is Mobility.FIXED for p in letters)
        assert simulation.particles == letters

    def test_letters_released_independently(self) -> None:
        """Test that touching one letter leaves the others fixed."""
        settings.configure(TRAIL_SPAWN_CHANCE=0.0)
        simulation = self.make()
        letters = simulation.convert_title("AB", (400, 250))
        # Put the pointer near the first letter only
        letters[1].x = 1000

        simulation.pointer_moved(letters[0].x, 250)
        simulation.tick(1 / 60)

        assert letters[0].is_free
        assert not letters[1].is_free

    def test_missing_anchor_is_a_no_op(self) -> None:
        """Test that conversion without an anchor silently does nothing."""
        simulation = self.make()

        assert simulation.convert_title("Love", None) == []
        assert simulation.convert_title("", (400, 250)) == []
        assert simulation.particles == []
