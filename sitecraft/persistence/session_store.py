"""
Session Stores

Key-value stores for session-scoped client state. Values are strings
(serialised JSON); callers own the serialisation.

Backends:
- MemorySessionStore: per-process dict, the default
- FileSessionStore: one file per key, survives between CLI invocations
- RedisSessionStore: namespaced keys with a TTL, shared between processes
"""

import logging
import os
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Abstract base class for session stores."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Get value by key, None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> bool:
        """Store value under key. Returns True on success."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a single key. Returns True if it existed."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every key in this session. Returns count removed."""
        pass

    async def close(self):
        """Release backend resources."""
        pass


class MemorySessionStore(SessionStore):
    """In-process store. Lost when the process exits."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self._data[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def clear(self) -> int:
        count = len(self._data)
        self._data.clear()
        return count


class FileSessionStore(SessionStore):
    """
    File system session store.

    Each key is a file under ``base_path``. Keys are sanitised so they cannot
    escape the directory.
    """

    SUFFIX = ".session"

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize file store.

        Args:
            base_path: Directory for session files.
                      Defaults to ~/.sitecraft/session/
        """
        if base_path is None:
            base_path = os.getenv(
                "SESSION_STORE_PATH",
                str(Path.home() / ".sitecraft" / "session")
            )

        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"FileSessionStore initialized at {self.base_path}")

    def _get_path(self, key: str) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", key).strip(".") or "_"
        return self.base_path / f"{safe_key}{self.SUFFIX}"

    async def get(self, key: str) -> Optional[str]:
        path = self._get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    async def set(self, key: str, value: str) -> bool:
        path = self._get_path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
        return True

    async def delete(self, key: str) -> bool:
        path = self._get_path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    async def clear(self) -> int:
        count = 0
        for path in self.base_path.glob(f"*{self.SUFFIX}"):
            path.unlink()
            count += 1
        return count


class RedisSessionStore(SessionStore):
    """
    Redis-backed session store.

    Keys are namespaced as ``<namespace>:session:<session_id>:<key>`` and
    expire after ``ttl`` seconds. Redis failures degrade to a miss on read and
    False on write.
    """

    def __init__(
        self,
        redis: Optional[Redis] = None,
        redis_url: str = "redis://localhost:6379/0",
        namespace: str = "sitecraft",
        session_id: str = "default",
        ttl: Optional[int] = 86400,
    ):
        self._redis = redis or Redis.from_url(redis_url, decode_responses=True)
        self._owns_client = redis is None
        self.prefix = f"{namespace}:session:{session_id}"
        self.ttl = ttl

    def _make_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self._redis.get(self._make_key(key))
        except RedisError as e:
            logger.warning(f"Redis unavailable, session get for {key} missed: {e}")
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> bool:
        try:
            if self.ttl:
                await self._redis.setex(self._make_key(key), self.ttl, value)
            else:
                await self._redis.set(self._make_key(key), value)
            return True
        except RedisError as e:
            logger.error(f"Session set error for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            return await self._redis.delete(self._make_key(key)) > 0
        except RedisError as e:
            logger.error(f"Session delete error for {key}: {e}")
            return False

    async def clear(self) -> int:
        try:
            keys = [key async for key in self._redis.scan_iter(match=f"{self.prefix}:*", count=100)]
            if not keys:
                return 0
            deleted = await self._redis.delete(*keys)
            logger.info(f"Cleared {deleted} session keys under {self.prefix}")
            return deleted
        except RedisError as e:
            logger.error(f"Session clear error for {self.prefix}: {e}")
            return 0

    async def close(self):
        if self._owns_client:
            await self._redis.aclose()


def create_session_store(settings, session_id: str = "default") -> SessionStore:
    """Build the session store selected by ``settings.SESSION_STORE``."""
    backend = settings.SESSION_STORE.lower()
    if backend == "memory":
        return MemorySessionStore()
    if backend == "file":
        return FileSessionStore(settings.SESSION_STORE_PATH)
    if backend == "redis":
        return RedisSessionStore(
            redis_url=settings.REDIS_URL,
            namespace=settings.SESSION_NAMESPACE,
            session_id=session_id,
            ttl=settings.SESSION_TTL,
        )
    raise ValueError(f"Unknown session store backend: {settings.SESSION_STORE}")
