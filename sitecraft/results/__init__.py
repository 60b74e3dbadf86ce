"""Results screen controller: polling, caching and report tier actions."""

from .session import ResultsSession, ResultsStatus, NOT_FOUND_MESSAGE

__all__ = [
    "ResultsSession",
    "ResultsStatus",
    "NOT_FOUND_MESSAGE",
]
