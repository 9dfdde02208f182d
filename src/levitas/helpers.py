"""Helper functions for creating and running a levitas window.

Users can choose between the simple run_app() function or create_app() for
more control over the window before the event loop starts.
"""

import logging

import arcade
from rich.logging import RichHandler

from levitas.conf import settings
from levitas.view_manager import ViewManager


def setup_logging(log_level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Side effects:
        - Configures the root logger with RichHandler
        - Sets the specified log level
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, markup=True)],
    )


def create_app() -> arcade.Window:
    """Create a window with a ViewManager attached.

    Creates an arcade.Window using the settings from your project's settings.py
    (or the module specified by LEVITAS_SETTINGS_MODULE) and sets up logging.

    Returns:
        Configured arcade.Window with a view_manager attribute attached.

    Example:
        >>> from levitas import create_app
        >>> window = create_app()
        >>> window.view_manager.show_home()
        >>> arcade.run()
    """
    setup_logging(settings.LOG_LEVEL)

    window = arcade.Window(
        settings.SCREEN_WIDTH,
        settings.SCREEN_HEIGHT,
        settings.WINDOW_TITLE,
        resizable=True,
    )
    window.view_manager = ViewManager(window)
    return window


def run_app() -> None:
    """Create the window, show the home page and run until it is closed.

    The session ends when the event loop returns: the current page is
    persisted and the session store is cleared.
    """
    window = create_app()
    window.view_manager.show_home()
    try:
        arcade.run()
    finally:
        window.view_manager.end_session()
