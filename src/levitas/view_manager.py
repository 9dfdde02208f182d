"""Page navigation for a levitas session.

The ViewManager owns everything that outlives a single page: the window, the
session store and the event bus. It shows the home page, listens for
navigation requests from special particles and shows the matching sub page.
Particle state follows the visitor from page to page through the session store.

Example usage:
    window = arcade.Window(1280, 720, "Levitas")
    view_manager = ViewManager(window)
    view_manager.show_home()
    arcade.run()
    view_manager.end_session()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, cast

from levitas.conf import settings
from levitas.events import Event, EventBus, NavigationRequestedEvent
from levitas.saves.store import FileSessionStore, MemorySessionStore, SessionStore
from levitas.views import FloatView

if TYPE_CHECKING:
    import random

    import arcade

logger = logging.getLogger(__name__)


class ViewManager:
    """Shows the home page and the sub pages special particles lead to.

    Attributes:
        window: Window pages are shown in.
        store: Session store shared by every page.
        event_bus: Event bus shared by every page.
        current_target: Target of the sub page being shown, or None on the home page.
    """

    def __init__(
        self,
        window: arcade.Window,
        store: SessionStore | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the manager and subscribe to navigation requests.

        Args:
            window: Window to show pages in.
            store: Session store (defaults to the one SESSION_DIR selects).
            event_bus: Event bus (defaults to a new one).
            rng: Random source handed to every page.
        """
        self.window = window
        self.store = store if store is not None else create_session_store()
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.rng = rng
        self.current_target: str | None = None
        self.event_bus.subscribe(NavigationRequestedEvent, self._on_navigation_requested)

    def show_home(self) -> FloatView:
        """Show the interactive home page."""
        view = FloatView(self, interactive=True, store=self.store, event_bus=self.event_bus, rng=self.rng)
        self.current_target = None
        self.window.show_view(view)
        logger.info("Showing home page")
        return view

    def show_page(self, target: str, label: str = "") -> FloatView:
        """Show the sub page for a navigation target.

        Args:
            target: Navigation target.
            label: Heading for the page (defaults to the target).
        """
        view = FloatView(
            self,
            interactive=False,
            store=self.store,
            event_bus=self.event_bus,
            page_title=label or target,
            rng=self.rng,
        )
        self.current_target = target
        self.window.show_view(view)
        logger.info("Showing page %s", target)
        return view

    def end_session(self) -> None:
        """Persist the current page, then forget all session state."""
        current = self.window.current_view
        if isinstance(current, FloatView):
            current.cleanup()
        self.store.clear()
        self.event_bus.unregister_all(self)
        logger.info("Session ended")

    def _on_navigation_requested(self, event: Event) -> None:
        navigation = cast("NavigationRequestedEvent", event)
        self.show_page(navigation.target, navigation.label)


def create_session_store() -> SessionStore:
    """Create the session store selected by SESSION_DIR.

    Returns:
        A FileSessionStore if SESSION_DIR is set, otherwise a MemorySessionStore.
    """
    if settings.SESSION_DIR:
        return FileSessionStore(Path(settings.SESSION_DIR))
    return MemorySessionStore()
