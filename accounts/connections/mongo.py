import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import certifi
from fastapi import FastAPI
from mongoengine import connect, disconnect

from accounts.utils.config import settings


logger = logging.getLogger(__name__)


def init_mongo() -> None:
    kwargs = {}
    if settings.mongo_tls:
        kwargs["tlsCAFile"] = certifi.where()
    connect(host=settings.mongo_uri, alias="default", tz_aware=True, **kwargs)
    logger.info("Connected to mongo database %s on %s", settings.mongo_db, settings.mongo_host)


def close_mongo() -> None:
    disconnect(alias="default")


@asynccontextmanager
async def mongo_lifespan(app: FastAPI) -> AsyncIterator[None]:
    init_mongo()
    try:
        yield
    finally:
        close_mongo()
