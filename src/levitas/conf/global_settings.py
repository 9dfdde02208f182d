"""Default settings for levitas.

Users can override these in their project's settings.py file.

Example:
    # In your project's settings.py:
    from levitas.conf import global_settings

    SCREEN_WIDTH = 1920
    SPECIAL_TARGETS = [
        *global_settings.SPECIAL_TARGETS,
        ("Guestbook", "guestbook"),
    ]
"""

# Window settings
SCREEN_WIDTH = 1280
"""Initial width of the window in pixels."""

SCREEN_HEIGHT = 720
"""Initial height of the window in pixels."""

WINDOW_TITLE = "Levitas"
"""Title displayed in the window title bar."""

BACKGROUND_COLOR = (255, 240, 245, 255)
"""RGBA background color of every page."""

# Floating field
FLOATING_COUNT = 20
"""Number of floating particles spawned when there is no saved state."""

FLOATING_GLYPHS = ["❤️", "🌹", "🌸", "✨", "💖", "💌"]
"""Palette the floating particles draw their glyph from."""

FLOATING_SPAWN_DEPTH = 500
"""Floating particles start up to this many pixels below the viewport."""

# Special particles
SPECIAL_GLYPH = "❤️"
"""Glyph drawn for every special particle."""

SPECIAL_TARGETS = [
    ("My Letter", "letter"),
    ("Photos", "photos"),
    ("Song", "playlist"),
    ("My Question to You", "question"),
]
"""(label, target) pairs. One special particle floats on the home page per pair."""

SPECIAL_SPAWN_DEPTH = 200
"""Special particles start up to this many pixels below the viewport."""

SPECIAL_HIT_RADIUS = 40
"""A click within this distance of a special particle activates it."""

SPECIAL_LABEL_OFFSET = 45
"""Distance in pixels between a special particle's glyph and its label, below it."""

# Pointer trail
TRAIL_SPAWN_CHANCE = 0.3
"""Probability that a pointer move on the home page leaves a trail particle."""

TRAIL_LIFETIME = 1.0
"""Seconds before a trail particle removes itself."""

TRAIL_GLYPH = "✨"
"""Glyph used for trail particles."""

TRAIL_SIZE = 10
"""Font size of trail particles."""

# Title
CONVERT_TITLE = False
"""Break the home page title into individually releasable letters."""

TITLE_TEXT = "Will you be my Valentine?"
"""Text of the home page title."""

TITLE_LETTER_PITCH = 40
"""Horizontal distance in pixels between title letters."""

# Persistence
SESSION_KEY = "valentines_state"
"""Key the particle snapshot is stored under."""

SESSION_DIR = ""
"""Directory for the file-backed session store (empty string keeps state in memory)."""

# Logging
LOG_LEVEL = "INFO"
"""Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
