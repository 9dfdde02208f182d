"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from levitas.conf import settings

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def configure_test_settings() -> Generator[None]:
    """Configure settings for each test and reset them afterwards.

    Tests may call settings.configure() again to override single values; the
    reset below throws every override away.

    Yields:
        None
    """
    settings.configure(
        SCREEN_WIDTH=800,
        SCREEN_HEIGHT=600,
        WINDOW_TITLE="Test",
        FLOATING_COUNT=20,
        FLOATING_GLYPHS=["❤️", "🌹", "🌸", "✨", "💖", "💌"],
        FLOATING_SPAWN_DEPTH=500,
        SPECIAL_GLYPH="❤️",
        SPECIAL_TARGETS=[
            ("My Letter", "letter"),
            ("Photos", "photos"),
            ("Song", "playlist"),
            ("My Question to You", "question"),
        ],
        SPECIAL_SPAWN_DEPTH=200,
        SPECIAL_HIT_RADIUS=40,
        TRAIL_SPAWN_CHANCE=0.3,
        TRAIL_LIFETIME=1.0,
        TRAIL_GLYPH="✨",
        TRAIL_SIZE=10,
        CONVERT_TITLE=False,
        TITLE_TEXT="Hello",
        TITLE_LETTER_PITCH=40,
        SESSION_KEY="valentines_state",
        SESSION_DIR="",
    )
    yield
    settings._wrapped = None
