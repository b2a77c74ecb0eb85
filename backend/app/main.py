"""
Users CRUD API - FastAPI Application

A minimal CRUD service for a single User resource stored in MongoDB,
gated by a static bearer token.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.core.exceptions import UsersAPIError
from app.core.logging import setup_logging
from app.database.connections import get_mongo_client, close_connections
from app.database.databases import users_db
from app.routers import health, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Open the MongoDB client
    - Create indexes (unique email)
    - Publish the database handle on app.state for request dependencies

    Shutdown:
    - Close the MongoDB client
    """
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting up Users CRUD API...")

    try:
        client = await get_mongo_client()
        db = client[settings.mongo_db_name]
        await users_db.create_indexes(db)
    except Exception:
        logger.exception("Database initialization failed")
        await close_connections()
        raise

    app.state.db = db
    logger.info("Database '%s' ready, indexes created", settings.mongo_db_name)

    yield

    logger.info("Shutting down Users CRUD API...")
    app.state.db = None
    await close_connections()
    logger.info("Database connections closed")


def format_validation_errors(errors) -> str:
    """Flatten FastAPI validation errors into one readable message."""
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


# Create FastAPI application
app = FastAPI(
    title="Users CRUD API",
    description="""
## Users CRUD API

Create, list, read, update and delete users stored in MongoDB.

### Authentication
Every `/users` endpoint requires the shared static token in the
`Authorization` header:
```
Authorization: Bearer <token>
```

### Errors
All errors are returned as `{"error": "<message>"}`.
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Exception Handlers ====================


@app.exception_handler(UsersAPIError)
async def users_api_error_handler(request: Request, exc: UsersAPIError):
    """Render application errors as {"error": message}."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s %s",
            request.method,
            request.url.path,
            exc.message,
            exc.context,
        )
    else:
        logger.info(
            "%s %s -> %d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and query parameters are a 400, not FastAPI's 422."""
    return JSONResponse(
        status_code=400,
        content={"error": format_validation_errors(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep routing errors (unknown path, wrong method) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: never leak a traceback to the client."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include routers
app.include_router(health.router)
app.include_router(users.router)


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Users CRUD API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
