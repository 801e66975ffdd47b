"""FastAPI application entry point — serves the validation engine to the wizard UI.

Usage:
    python -m sii_offerte.main

Checks the rule table for conflicts at startup, then serves the API.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sii_offerte.api.web import router as api_router
from sii_offerte.config import settings
from sii_offerte.rules import RULE_SET, check_rule_set

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting SII Offerte API (env=%s)", settings.environment)

    if settings.rules.self_check_on_startup:
        checked = check_rule_set(RULE_SET)
        logger.info("Rule set consistent: %d rules checked", checked)
    else:
        logger.warning("RULES_SELF_CHECK_ON_STARTUP disabled, rule conflicts surface only at validation time")

    yield

    logger.info("SII Offerte API shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="SII Offerte API",
    description="Conditional validation and XML export for SII Trasmissione Offerte v4.5",
    version="0.1.0",
    lifespan=lifespan,
)

if settings.api.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "sii_offerte.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
