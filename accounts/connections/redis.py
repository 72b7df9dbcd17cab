import logging
import redis
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from fastapi import FastAPI

from accounts.utils.config import settings


logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    assert _redis_client is not None, "Redis not initialized"
    return _redis_client


def init_redis() -> None:
    global _redis_client
    _redis_client = redis.Redis(
        db=settings.redis_db,
        port=settings.redis_port,
        host=settings.redis_host,
        password=settings.redis_password,
        decode_responses=True,
        socket_timeout=2.0,
    )


def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        try:
            _redis_client.close()
        finally:
            _redis_client = None


@asynccontextmanager
async def redis_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the redis client only when something needs it (the token denylist)."""
    if not settings.token_denylist_enabled:
        yield
        return

    init_redis()
    logger.info("Token denylist enabled, using redis on %s:%s", settings.redis_host, settings.redis_port)
    try:
        yield
    finally:
        close_redis()
