# app/main.py

import sys
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_factory
from app.core.exceptions import register_exception_handlers
from app.core.rate_limit import FixedWindowRateLimiter
from app.core.redis import build_redis_client

logger = logging.getLogger("badgefinder")


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s:%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger.setLevel(level)

    # Set uvicorn and FastAPI loggers to same level
    for name in ("uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(level)

    logger.info(f"Logging configured at {logging.getLevelName(level)} level")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    # --- Routers ---
    from app.api.authentication import router as auth_router
    from app.api.users          import router as users_router
    from app.api.badges         import router as badges_router
    from app.api.requirements   import router as requirements_router

    app = FastAPI(
        title       = "BadgeFinder API",
        version     = "1.0.0",
        description = "Scout badge catalog and per-member badge progress",
    )

    engine = build_engine(settings.database_url)
    redis_client = build_redis_client(settings.redis_url)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.redis = redis_client
    app.state.rate_limiter = FixedWindowRateLimiter(
        redis_client,
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        logger.info(f"📥 Incoming request: {request.method} {request.url.path}")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Headers: {dict(request.headers)}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"✅ Request completed in {process_time:.3f}s with status {response.status_code}")
        return response

    register_exception_handlers(app, production=settings.is_production)

    # --- CORS (frontend origins with cookies) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins     = settings.cors_origins,
        allow_credentials = True,
        allow_methods     = ["*"],
        allow_headers     = ["*"],
    )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(badges_router)
    app.include_router(requirements_router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("🚀 Starting BadgeFinder API")
        env_ok = {
            "DATABASE_URL":   bool(settings.database_url),
            "JWT_SECRET_KEY": bool(settings.jwt_secret_key),
            "SESSION_SECRET": bool(settings.session_secret),
        }
        logger.info(f"📋 Env configuration: {env_ok}")

        try:
            await redis_client.ping()
            logger.info("✅ Redis connection OK")
        except Exception as e:
            logger.warning(f"⚠️  Redis connection failed: {e} - rate limiting disabled until it recovers")

    @app.on_event("shutdown")
    async def shutdown_event():
        await redis_client.aclose()
        engine.dispose()

    # --- Root & health endpoints ---
    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": "Welcome to BadgeFinder API",
            "status":  "online",
            "version": app.version,
            "docs":    "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    return app


def __getattr__(name: str):
    # `uvicorn app.main:app` builds the app from the environment on first access
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
