import json
from datetime import datetime
from typing import Any

from redis.asyncio import Redis

# Global Redis client instance
redis_client: Redis | None = None


async def get_redis() -> Redis:
    """
    Get the Redis client instance.

    Raises:
        RuntimeError: If Redis client is not initialized
    """
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized")
    return redis_client


async def store_refresh_token(token_hash: str, user_id: str, ttl_seconds: int) -> None:
    """
    Store a refresh token in Redis with TTL.

    Args:
        token_hash: SHA-256 hash of the refresh token
        user_id: UUID of the user
        ttl_seconds: Time to live in seconds
    """
    client = await get_redis()
    key = f"refresh_token:{token_hash}"
    value = json.dumps({"user_id": user_id, "created_at": datetime.utcnow().isoformat()})
    await client.setex(key, ttl_seconds, value)


async def get_refresh_token(token_hash: str) -> dict[Any, Any] | None:
    """
    Retrieve refresh token data from Redis.

    Returns:
        Dictionary with user_id and created_at, or None if not found or revoked
    """
    client = await get_redis()
    data = await client.get(f"refresh_token:{token_hash}")
    if data:
        result: dict[Any, Any] = json.loads(data)
        return result
    return None


async def revoke_refresh_token(token_hash: str) -> None:
    """Revoke (delete) a refresh token. Used on logout and on token rotation."""
    client = await get_redis()
    await client.delete(f"refresh_token:{token_hash}")
