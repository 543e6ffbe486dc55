"""
Form progress storage using Redis.

Keeps one FormProgress document per form session so navigation state
survives page reloads. Entries expire when the draft is abandoned.
"""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import get_settings
from app.core.exceptions import FormStoreUnavailableError
from app.schemas.form import FormProgress

settings = get_settings()
logger = logging.getLogger(__name__)


class FormProgressStore:
    """Redis-backed storage of per-session form progress."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ):
        """
        Initialize the store.

        Args:
            redis_url: Redis connection URL
            ttl_seconds: Session expiry time in seconds, refreshed on save
        """
        self.redis_url = redis_url or settings.redis_url
        self.ttl_seconds = ttl_seconds or settings.form_progress_ttl_seconds
        self._redis: Optional[redis.Redis] = None

    async def _get_redis(self) -> redis.Redis:
        """Get or create Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    def _get_key(self, session_id: str) -> str:
        return f"form:progress:{session_id}"

    async def get(self, session_id: str) -> FormProgress:
        """
        Load progress for a session.

        Unknown or expired sessions start from the first step. A stored
        document that no longer parses is discarded the same way.
        """
        key = self._get_key(session_id)
        try:
            r = await self._get_redis()
            data = await r.get(key)
        except RedisError as e:
            logger.error(f"Failed to load form progress for {session_id}: {e}")
            raise FormStoreUnavailableError(str(e)) from e

        if not data:
            return FormProgress()

        try:
            return FormProgress.model_validate_json(data)
        except ValueError as e:
            logger.warning(f"Discarding unreadable form progress for {session_id}: {e}")
            return FormProgress()

    async def save(self, session_id: str, progress: FormProgress) -> None:
        """Store progress and refresh its TTL."""
        key = self._get_key(session_id)
        try:
            r = await self._get_redis()
            await r.set(key, progress.model_dump_json(by_alias=True), ex=self.ttl_seconds)
        except RedisError as e:
            logger.error(f"Failed to save form progress for {session_id}: {e}")
            raise FormStoreUnavailableError(str(e)) from e

        logger.debug(f"Saved form progress for {session_id}: step {progress.current_step.name}")

    async def delete(self, session_id: str) -> bool:
        """
        Remove a session's progress.

        Returns:
            True if the session existed
        """
        try:
            r = await self._get_redis()
            deleted = await r.delete(self._get_key(session_id))
        except RedisError as e:
            logger.error(f"Failed to delete form progress for {session_id}: {e}")
            raise FormStoreUnavailableError(str(e)) from e

        logger.info(f"Reset form session {session_id}: {'success' if deleted else 'not found'}")
        return bool(deleted)

    async def exists(self, session_id: str) -> bool:
        try:
            r = await self._get_redis()
            return bool(await r.exists(self._get_key(session_id)))
        except RedisError as e:
            raise FormStoreUnavailableError(str(e)) from e

    async def close(self):
        """Close Redis connection."""
        if self._redis:
            await self._redis.close()
            self._redis = None


# Singleton instance
_store: Optional[FormProgressStore] = None


def get_form_store() -> FormProgressStore:
    """Get or create the form progress store singleton."""
    global _store
    if _store is None:
        _store = FormProgressStore()
    return _store
