from __future__ import annotations

import time

from accounts.connections.redis import get_redis


KEY_PREFIX = "denylist:"


def _key(payload: dict) -> str:
    return f"{KEY_PREFIX}{payload.get('jti') or payload.get('sub')}:{payload.get('iat')}"


def revoke(payload: dict) -> bool:
    """Deny a token until it would have expired anyway.

    Returns False when the token is already past its expiry, there is nothing
    to store then.
    """
    ttl = int(payload.get("exp", 0)) - int(time.time())
    if ttl <= 0:
        return False
    client = get_redis()
    return bool(client.setex(name=_key(payload), time=ttl, value="1"))


def is_revoked(payload: dict) -> bool:
    client = get_redis()
    return bool(client.exists(_key(payload)))
