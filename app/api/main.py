"""
FastAPI Application

HTTP API server for job-board application intake.
"""

import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.api import integration as integration_api
from app.api import resume as resume_api
from app.api import webhook as webhook_api
from app.config import Config, get_config
from app.services.container import ServiceContainer
from app.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(config: Optional[Config] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Configuration; read from the environment when omitted
        container: Prebuilt services; built from config when omitted
    """
    if container is not None:
        config = container.config
    config = config or get_config()
    container = container or ServiceContainer.from_config(config)

    app = FastAPI(
        title="Applicant Intake API",
        description="Receives job-board application webhooks and hands them to matching",
        version="1.0.0",
    )
    app.state.config = config
    app.state.container = container

    # CORS for the operator dashboard; the job board posts server-to-server
    cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    if config.server.frontend_url:
        cors_origins.append(config.server.frontend_url.rstrip("/"))
    for origin in os.getenv("CORS_ORIGINS", "").split(","):
        origin = origin.strip().rstrip("/")
        if origin and origin not in cors_origins:
            cors_origins.append(origin)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        """Liveness probe: returns 200 if the process is running."""
        return {"status": "ok"}

    @app.get("/ready")
    async def ready():
        """Readiness probe: returns 200 if Supabase answers."""
        try:
            container.supabase.table(container.webhook_log_service.TABLE).select("id").limit(1).execute()
            return {"status": "ready"}
        except Exception as e:
            logger.warning(f"[API] Readiness check failed: {e}")
            raise HTTPException(status_code=503, detail="Service not ready")

    app.include_router(webhook_api.router)
    app.include_router(resume_api.router)
    app.include_router(integration_api.router)

    if not config.webhook.secret:
        logger.warning("[API] No webhook secret configured; signatures will not be verified")
    return app
