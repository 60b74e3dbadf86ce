"""
Results Cache

Holds the single most recently viewed analysis or report in a session store.
The record is replaced in full on every save; there is no merging.
"""

import json
import logging
from typing import Optional, Union

from pydantic import ValidationError

from sitecraft.models import Analysis, Report
from .session_store import SessionStore

logger = logging.getLogger(__name__)

RESULTS_KEY = "analysisResult"

CachedResult = Union[Analysis, Report]


class ResultsCache:
    """Serialises the cached result under one session key."""

    def __init__(self, store: SessionStore, key: str = RESULTS_KEY):
        self.store = store
        self.key = key

    async def save(self, result: CachedResult) -> bool:
        kind = "analysis" if isinstance(result, Analysis) else "report"
        payload = json.dumps({"kind": kind, "data": result.to_wire()})
        try:
            saved = await self.store.set(self.key, payload)
        except OSError as e:
            logger.warning(f"Session store write failed: {e}")
            saved = False
        if not saved:
            logger.warning(f"Failed to cache {kind} in session store")
        return saved

    async def load(self) -> Optional[CachedResult]:
        """
        Load the cached result.

        Returns None when nothing is cached or the cached value is malformed.
        """
        try:
            raw = await self.store.get(self.key)
            if raw is None:
                return None
            payload = json.loads(raw)
        except (OSError, ValueError) as e:
            # ValueError covers undecodable bytes as well as bad JSON
            logger.warning(f"Cached results are unreadable: {e}")
            return None

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            logger.warning("Cached results have an unexpected shape")
            return None

        try:
            if payload.get("kind") == "analysis":
                return Analysis.model_validate(payload["data"])
            return Report.model_validate(payload["data"])
        except ValidationError as e:
            logger.warning(f"Cached results failed validation: {e}")
            return None

    async def clear(self) -> bool:
        """Remove the cached result. Other session keys are left alone."""
        return await self.store.delete(self.key)
