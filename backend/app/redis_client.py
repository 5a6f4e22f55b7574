"""Redis client backing the session store."""

import redis
from redis.exceptions import RedisError
from app.config import settings
from app.logger import session_logger


class RedisClient:
    """Redis client wrapper that degrades to a no-op store when Redis is down."""

    def __init__(self, url: str | None = None):
        """Initialize Redis client from the configured URL."""
        self._url = url or settings.redis_url
        self._client = None
        self._connect()

    def _connect(self):
        """
        Connect to Redis (redis:// or rediss://).

        The client is kept even when the first ping fails; redis-py opens
        connections on demand, so later calls succeed once Redis is back.
        """
        self._client = redis.from_url(
            self._url,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )

        try:
            self._client.ping()
            session_logger.info(f"Redis connected successfully ({settings.environment})")
        except RedisError as e:
            session_logger.error(f"Redis connection failed: {e}")
            session_logger.warning("Sessions will not persist until Redis is reachable")

    @property
    def client(self):
        """Get Redis client instance."""
        return self._client

    def get(self, key: str) -> str | None:
        """Get value from Redis."""
        if not self._client:
            return None

        try:
            return self._client.get(key)
        except RedisError as e:
            session_logger.debug(f"Redis GET error: {e}")
            return None

    def set(self, key: str, value: str, expire: int | None = None) -> bool:
        """
        Set value in Redis.

        Args:
            key: Session key
            value: Value to store
            expire: Expiration time in seconds (optional)

        Returns:
            True if successful, False otherwise
        """
        if not self._client:
            return False

        try:
            if expire:
                return bool(self._client.setex(key, expire, value))
            return bool(self._client.set(key, value))
        except RedisError as e:
            session_logger.debug(f"Redis SET error: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from Redis."""
        if not self._client:
            return False

        try:
            return self._client.delete(key) > 0
        except RedisError as e:
            session_logger.debug(f"Redis DELETE error: {e}")
            return False

    def ping(self) -> bool:
        """Check whether Redis answers."""
        if not self._client:
            return False

        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    def close(self):
        """Close Redis connection."""
        if self._client:
            self._client.close()


_redis_client: RedisClient | None = None


def get_redis() -> RedisClient:
    """Dependency for getting the shared Redis client, connecting on first use."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
