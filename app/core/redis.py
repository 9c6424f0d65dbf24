import json
from datetime import timedelta
from redis import asyncio as aioredis
from app.core.config import settings

SESSION_EXPIRY = timedelta(hours=settings.SESSION_TTL_HOURS)


class RedisManager:
    def __init__(self):
        self.redis = None

    async def connect(self):
        """Connect to Redis (called on FastAPI startup)."""
        self.redis = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True
        )

    async def close(self):
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()

    async def set_session(self, session_id: str, staff_id: str, data: dict):
        """Store a staff session and index it under its owner for bulk revocation."""
        json_data = json.dumps(data)
        ttl = int(SESSION_EXPIRY.total_seconds())
        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.setex(f"session:{session_id}", ttl, json_data)
            pipe.sadd(f"staff_sessions:{staff_id}", session_id)
            pipe.expire(f"staff_sessions:{staff_id}", ttl)
            await pipe.execute()

    async def get_session(self, session_id: str) -> dict | None:
        """Retrieve a live session, or None once expired or revoked."""
        data = await self.redis.get(f"session:{session_id}")
        return json.loads(data) if data else None

    async def delete_session(self, session_id: str):
        """Delete one session (logout)."""
        await self.redis.delete(f"session:{session_id}")

    async def revoke_staff_sessions(self, staff_id: str) -> int:
        """Delete every session belonging to one staff member."""
        key = f"staff_sessions:{staff_id}"
        session_ids = await self.redis.smembers(key)
        if not session_ids:
            return 0
        await self.redis.delete(*[f"session:{sid}" for sid in session_ids], key)
        return len(session_ids)


redis_manager = RedisManager()


def get_session_store() -> RedisManager:
    return redis_manager
