from redis import Redis

from .config import settings

# Connection is opened lazily on first command
redis_client = Redis.from_url(settings.redis_url, socket_timeout=2.0)


# Dependency for FastAPI
def get_redis() -> Redis | None:
    return redis_client
