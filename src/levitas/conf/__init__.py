"""Django-like settings system for levitas.

Usage:
    # In your project's settings.py
    from levitas.conf import global_settings

    # Override defaults
    SCREEN_WIDTH = 1920
    SCREEN_HEIGHT = 1080
    FLOATING_COUNT = 40

    # In your code
    from levitas.conf import settings

    print(settings.FLOATING_COUNT)  # 40
"""

import importlib
import os
from typing import Any

from levitas.conf import global_settings


class LazySettings:
    """Lazy settings proxy that loads user settings on first access.

    Settings are loaded from:
    1. global_settings (package defaults)
    2. User's settings module (overrides)

    The settings module location is determined by:
    - LEVITAS_SETTINGS_MODULE environment variable, or
    - Convention: "settings" module in current directory
    """

    def __init__(self) -> None:
        """Initialize the lazy settings proxy."""
        self._wrapped: Settings | None = None

    def _setup(self) -> None:
        """Load settings from global_settings and user's settings module."""
        settings_module = os.environ.get("LEVITAS_SETTINGS_MODULE", "settings")

        self._wrapped = Settings()

        try:
            mod = importlib.import_module(settings_module)
            for setting in dir(mod):
                if setting.isupper():
                    setattr(self._wrapped, setting, getattr(mod, setting))
        except ImportError:
            # No user settings module found, use defaults only
            pass

    def __getattr__(self, name: str) -> Any:  # noqa: ANN401
        """Get a setting value, loading settings if not yet loaded."""
        if self._wrapped is None:
            self._setup()
        if self._wrapped is None:
            msg = "Settings could not be loaded"
            raise RuntimeError(msg)
        return getattr(self._wrapped, name)

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Set a setting value."""
        if name == "_wrapped":
            self.__dict__["_wrapped"] = value
        else:
            if self._wrapped is None:
                self._setup()
            if self._wrapped is None:
                msg = "Settings could not be loaded"
                raise RuntimeError(msg)
            setattr(self._wrapped, name, value)

    def configure(self, **options: Any) -> None:  # noqa: ANN401
        """Manually configure settings (useful for testing).

        Example:
            settings.configure(
                FLOATING_COUNT=5,
                TRAIL_SPAWN_CHANCE=1.0,
            )
        """
        if self._wrapped is None:
            self._wrapped = Settings()
        for name, value in options.items():
            setattr(self._wrapped, name, value)

    def is_configured(self) -> bool:
        """Check if settings have been loaded."""
        return self._wrapped is not None


class Settings:
    """Container for all settings with attribute access."""

    def __init__(self) -> None:
        """Initialize settings with defaults from global_settings."""
        for setting in dir(global_settings):
            if setting.isupper():
                value = getattr(global_settings, setting)
                # Copy mutable defaults so overrides never leak back into the module
                if isinstance(value, list):
                    value = list(value)
                setattr(self, setting, value)


settings = LazySettings()

__all__ = ["LazySettings", "Settings", "global_settings", "settings"]
