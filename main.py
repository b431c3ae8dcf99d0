"""
FastAPI Application Entry Point

Integrates:
  - Company info webhook handler
  - Health checks
  - Middleware for logging & error handling

Run: python main.py   (HTTP on $PORT, else HTTPS on $SSLPORT)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from infra.bootstrap import AppContext, bootstrap_context
from infra.config import AppConfig, get_config
from transport.watsonwork.errors import StartupError
from transport.watsonwork.webhook import router as companyinfo_router

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    context: Optional[AppContext] = None,
    config: Optional[AppConfig] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        context: Pre-built context (tests); otherwise bootstrapped on startup
        config: Configuration used when bootstrapping
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan: the OAuth token must exist before serving.
        """
        # Startup
        owned = app.state.context is None
        if owned:
            app.state.context = await bootstrap_context(config)
        elif not app.state.context.tokens.acquired:
            await app.state.context.start()
        logger.info("Company info app started")

        yield

        # Shutdown
        logger.info("Company info app shutting down...")
        if owned:
            await app.state.context.close()
            app.state.context = None

    app = FastAPI(
        title="Company Info App",
        description="Posts information about companies mentioned in chat messages",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Middleware for logging
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        logger.debug(f"{request.method} {request.url.path}")
        try:
            response = await call_next(request)
            return response
        except Exception as e:
            logger.error(f"Request error: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"},
            )

    app.include_router(companyinfo_router)

    # Health check endpoints
    @app.get("/health/live")
    async def health_live():
        """Live health check (Kubernetes liveness probe)."""
        return {"status": "alive"}

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """Readiness: the app only serves webhooks with a token."""
        context = request.app.state.context
        if context is None or not context.tokens.acquired:
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "reason": "OAuth token not acquired"},
            )
        return {"status": "ready"}

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Company Info App",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "companyinfo_webhook": "POST /companyinfo",
                "health_live": "GET /health/live",
                "health_ready": "GET /health/ready",
            },
        }

    return app


def server_options(config: AppConfig) -> dict:
    """
    uvicorn options for the configured mode.

    In a hosting environment HTTPS is handled by a reverse proxy and PORT is
    set; otherwise serve HTTPS directly with the configured certificate.
    """
    if config.port:
        return {"host": "0.0.0.0", "port": config.port}

    if not (config.ssl_cert and config.ssl_key):
        raise StartupError("PORT not set and SSLCERT/SSLKEY not configured")

    return {
        "host": "0.0.0.0",
        "port": config.ssl_port,
        "ssl_certfile": config.ssl_cert,
        "ssl_keyfile": config.ssl_key,
    }


def main() -> None:
    import uvicorn

    config = get_config()
    setup_logging(config.log_level)

    options = server_options(config)
    logger.info(
        f"{'HTTPS' if 'ssl_certfile' in options else 'HTTP'} server listening on port {options['port']}"
    )
    uvicorn.run(create_app(config=config), log_level=config.log_level.lower(), **options)


if __name__ == "__main__":
    main()
