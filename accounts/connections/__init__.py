from accounts.connections.mongo import mongo_lifespan
from accounts.connections.redis import redis_lifespan

__all__ = ["mongo_lifespan", "redis_lifespan"]
