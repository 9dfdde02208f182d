"""Exceptions raised by levitas.

Neither of these is fatal. Callers at the simulation boundary catch them and
degrade to a safe default.
"""


class DecodeError(ValueError):
    """Persisted particle state is absent, malformed or of an unknown shape.

    Treated exactly like "no prior state": the simulation spawns a fresh
    population instead.
    """


class MissingAnchorError(LookupError):
    """Title conversion was requested without a usable anchor or text."""
