from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from blogcms.core.config import settings
from blogcms.core.database import engine, Base
from blogcms.core.errors import register_exception_handlers
from blogcms.core.logging_config import (
    setup_logging,
    CorrelationIdMiddleware,
    log_security_event,
)
from blogcms.core.rate_limit import limiter
from blogcms.api.endpoints import auth, posts, categories, stats
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import blogcms.models  # noqa: F401  registers tables on Base.metadata
import logging

security_logger = setup_logging(logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if settings.ENABLE_HSTS and settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.HSTS_MAX_AGE}; includeSubDomains"
            )

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # JSON API only; nothing here should ever be framed or run scripts
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none';"
        )

        return response


def include_routers(app: FastAPI, prefix: str = settings.API_PREFIX) -> None:
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
    app.include_router(posts.router, prefix=f"{prefix}/posts", tags=["posts"])
    app.include_router(categories.router, prefix=f"{prefix}/categories", tags=["categories"])
    app.include_router(stats.router, prefix=f"{prefix}/stats", tags=["stats"])


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting BlogCMS API...")

    if not settings.is_production:
        logger.warning(
            "Running with DEBUG on or the default SECRET_KEY. "
            "Set SECRET_KEY and DEBUG=false before exposing this API."
        )

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    yield

    logger.info("Shutting down BlogCMS API...")
    engine.dispose()


app = FastAPI(
    title="BlogCMS",
    description="Headless blog content-management API",
    version="1.0.0",
    lifespan=lifespan,
)

# Correlation IDs first, so all logs carry them
app.add_middleware(CorrelationIdMiddleware)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(SecurityHeadersMiddleware)

register_exception_handlers(app)

log_security_event(
    event_type="app.startup",
    message=f"BlogCMS starting (production={settings.is_production})",
    event_category="system",
    production=settings.is_production,
    debug=settings.DEBUG,
    registration_open=settings.REGISTRATION_OPEN,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

include_routers(app)


@app.get("/")
def root():
    return {
        "name": "BlogCMS",
        "version": "1.0.0",
        "description": "Headless blog content-management API",
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
