import logging
from contextlib import AsyncExitStack

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.connections import mongo_lifespan, redis_lifespan
from accounts.api.user import router as user_router
from accounts.services.avatars import AVATARS_URL_PREFIX, ensure_storage_dirs
from accounts.services.validation import first_error_message
from accounts.utils.config import settings
from accounts.utils.config.log import setup_logging


logger = logging.getLogger(__name__)


async def combined_lifespan(app: FastAPI):
    setup_logging()
    ensure_storage_dirs()
    async with AsyncExitStack() as stack:
        await stack.enter_async_context(mongo_lifespan(app))
        await stack.enter_async_context(redis_lifespan(app))

        yield


app = FastAPI(title="User Accounts (Mongo)", version="0.1.0", lifespan=combined_lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": first_error_message(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(user_router, prefix="/users")
app.mount(
    f"/{AVATARS_URL_PREFIX}",
    StaticFiles(directory=settings.avatars_dir, check_dir=False),
    name="avatars",
)
