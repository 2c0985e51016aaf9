# app/main.py

"""Blog Posts Backend - FastAPI service for blog posts, media and reactions."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.responses import Response
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.db import transaction
from app.errors import (
    BaseAppError,
    BlogError,
    DatabaseError,
    UploadError,
    UserAuthenticationError,
    auth_exception_handler,
    blog_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import get_logger
from app.routes import blog_router
from app.utils.helpers import today_str

logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog posts API: listing, media uploads, reactions and author feeds",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Honour X-Forwarded-* only from the configured reverse proxies
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=settings.TRUSTED_HOSTS)

app.include_router(blog_router)

if settings.STORAGE_PROVIDER == "local":
    app.mount(
        "/uploads",
        StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
        name="uploads",
    )

errors = [
    (BlogError, blog_exception_handler),
    (UploadError, upload_exception_handler),
    (DatabaseError, database_exception_handler),
    (UserAuthenticationError, auth_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 12:00:00",
                        "database": "ok",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint with database status.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Service version, timestamp and database reachability.
    """
    database = "ok"
    try:
        async with transaction() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "unavailable"

    return ORJSONResponse(
        {
            "version": app.version,
            "status": "ok" if database == "ok" else "degraded",
            "timestamp": today_str(),
            "database": database,
        },
        status_code=200 if database == "ok" else HTTP_503_SERVICE_UNAVAILABLE,
    )


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    operation_id="root_access",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def root(request: Request, response: Response) -> dict[str, str]:
    """
    Root endpoint.

    Returns
    -------
    dict[str, str]
        Welcome message payload.
    """
    return {"message": f"Welcome to {settings.APP_NAME}"}
