"""Page view hosting a particle simulation.

This module provides the FloatView class, an arcade View that plays the part
of a web page: it owns one Simulation, forwards window events to it and draws
its particles through an ArcadeRenderSink.

Event mapping:
- on_show_view: bootstrap (restore or spawn)
- on_update: one simulation tick
- on_mouse_motion: pointer move (may leave a trail on the home page)
- on_mouse_press: activate the special particle under the pointer, if any
- on_resize: viewport resize
- on_hide_view: pre-teardown (snapshot into the session store)

Window coordinates are y-up; the simulation is y-down, so every pointer
position is flipped on the way in.

Example usage:
    view = FloatView(view_manager, interactive=True, store=store, event_bus=bus)
    window.show_view(view)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import arcade

from levitas.conf import settings
from levitas.simulation import Simulation
from levitas.views.render_sink import TEXT_COLOR, ArcadeRenderSink

if TYPE_CHECKING:
    import random

    from levitas.events import EventBus
    from levitas.saves.store import SessionStore
    from levitas.view_manager import ViewManager

logger = logging.getLogger(__name__)


class FloatView(arcade.View):
    """A page with floating particles.

    Attributes:
        view_manager: Manager used to navigate back home from a sub page.
        interactive: True for the home page, False for sub pages.
        page_title: Heading drawn on sub pages.
        simulation: The page's simulation, created when the view is shown.
        render_sink: Arcade sink the simulation draws through.
        initialized: Whether the simulation has been bootstrapped.
    """

    def __init__(
        self,
        view_manager: ViewManager,
        *,
        interactive: bool,
        store: SessionStore,
        event_bus: EventBus,
        page_title: str = "",
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the view.

        Args:
            view_manager: Manager that owns the window and the session.
            interactive: Page context flag.
            store: Session store shared by every page of the session.
            event_bus: Event bus shared by every page of the session.
            page_title: Heading for sub pages.
            rng: Random source for the simulation.
        """
        super().__init__()
        self.view_manager = view_manager
        self.interactive = interactive
        self.page_title = page_title
        self._store = store
        self._event_bus = event_bus
        self._rng = rng

        self.simulation: Simulation | None = None
        self.render_sink: ArcadeRenderSink | None = None
        self.title_text: arcade.Text | None = None
        self.initialized = False

    def setup(self) -> None:
        """Create and bootstrap the simulation for the current window size."""
        width, height = self.window.width, self.window.height
        self.render_sink = ArcadeRenderSink(height)
        self.simulation = Simulation(
            width,
            height,
            interactive=self.interactive,
            store=self._store,
            event_bus=self._event_bus,
            render_sink=self.render_sink,
            rng=self._rng,
        )
        self.simulation.bootstrap()

        if self.page_title:
            self.title_text = arcade.Text(
                self.page_title,
                width / 2,
                height - 80,
                TEXT_COLOR,
                font_size=36,
                anchor_x="center",
                bold=True,
            )

    def on_show_view(self) -> None:
        """Bootstrap the page the first time it is shown."""
        arcade.set_background_color(settings.BACKGROUND_COLOR)
        if not self.initialized:
            self.setup()
            self.initialized = True

    def on_hide_view(self) -> None:
        """Persist the population before the page goes away."""
        self.cleanup()

    def on_update(self, delta_time: float) -> None:
        """Advance the simulation by one frame."""
        if self.simulation:
            self.simulation.tick(delta_time)

    def on_draw(self) -> None:
        """Draw the particles and the page heading."""
        self.clear()
        if self.render_sink:
            self.render_sink.draw()
        if self.title_text:
            self.title_text.draw()

    def on_mouse_motion(self, x: int, y: int, dx: int, dy: int) -> None:
        """Forward pointer moves in simulation coordinates."""
        if self.simulation:
            self.simulation.pointer_moved(x, self.window.height - y)

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> bool | None:
        """Activate the special particle under the pointer.

        Returns:
            True if a special particle consumed the click.
        """
        if self.simulation and self.simulation.click(x, self.window.height - y):
            return True
        return None

    def on_key_press(self, symbol: int, modifiers: int) -> bool | None:
        """Escape leaves a sub page for the home page."""
        if symbol == arcade.key.ESCAPE and not self.interactive:
            self.view_manager.show_home()
            return True
        return None

    def on_resize(self, width: int, height: int) -> None:
        """Record the new viewport size."""
        if self.simulation:
            self.simulation.resize(width, height)
        if self.render_sink:
            self.render_sink.height = height
        if self.title_text:
            self.title_text.x = width / 2
            self.title_text.y = height - 80

    def cleanup(self) -> None:
        """Snapshot the population and drop the page's visuals.

        The view can be shown again afterwards; it will bootstrap from the
        session store like a freshly loaded page.
        """
        if self.simulation:
            if not self.simulation.teardown():
                logger.warning("Particle state was not saved for this page")
        if self.render_sink:
            self.render_sink.clear()

        self.simulation = None
        self.render_sink = None
        self.title_text = None
        self.initialized = False
