"""
Persistence Layer

Session-scoped storage for the most recently viewed result.
"""

from .session_store import (
    SessionStore,
    MemorySessionStore,
    FileSessionStore,
    RedisSessionStore,
    create_session_store,
)
from .results_cache import ResultsCache, RESULTS_KEY

__all__ = [
    "SessionStore",
    "MemorySessionStore",
    "FileSessionStore",
    "RedisSessionStore",
    "create_session_store",
    "ResultsCache",
    "RESULTS_KEY",
]
