"""Persistence for the particle population.

The codec turns a population into snapshot records and back; session stores
keep the encoded snapshot between pages.
"""

from levitas.saves.codec import PersistenceCodec
from levitas.saves.store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = ["FileSessionStore", "MemorySessionStore", "PersistenceCodec", "SessionStore"]
