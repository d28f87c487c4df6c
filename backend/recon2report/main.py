"""
Recon2Report FastAPI application entry point.

Creates and configures the FastAPI app with:
- CORS middleware
- Security headers middleware
- API v1 router
- Health check endpoint
- The rule engine and the assessment store on ``app.state``
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from recon2report import __version__
from recon2report.api.v1.router import router as v1_router
from recon2report.config import get_settings
from recon2report.core.logging import configure_logging, get_logger
from recon2report.engine.evaluation import RuleEngine
from recon2report.rules.loader import default_rules_dir, load_corpus
from recon2report.store.base import AssessmentStore
from recon2report.store.memory import InMemoryStore

# ── Constants ────────────────────────────────────────────────────────────────

_HEALTH_CHECK_PATH: str = "/health"

_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), camera=(), microphone=()",
}


# ── Security Headers Middleware ──────────────────────────────────────────────

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that injects security-related HTTP response headers.

    Every outgoing response receives the headers defined in
    ``_SECURITY_HEADERS``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response: Response = await call_next(request)
        for header_name, header_value in _SECURITY_HEADERS.items():
            response.headers[header_name] = header_value
        return response


# ── Application Factory ─────────────────────────────────────────────────────

def create_app(
    rules_dir: Optional[Path] = None,
    store: Optional[AssessmentStore] = None,
) -> FastAPI:
    """Build and return the configured FastAPI application instance.

    The rule corpus is loaded here, once, and wrapped in a
    :class:`~recon2report.engine.evaluation.RuleEngine`.  Documents that
    fail to load are logged and skipped, so the application starts even
    with a partially broken corpus.

    Args:
        rules_dir: Corpus directory.  Defaults to ``RULES_DIR`` and then to
            the corpus bundled with the package.
        store: Assessment store.  Defaults to a fresh
            :class:`~recon2report.store.memory.InMemoryStore`.

    Returns:
        A fully configured ``FastAPI`` app ready to serve requests.
    """
    settings = get_settings()
    configure_logging()
    logger = get_logger(__name__)

    application = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Attack surface rule engine -- nmap parsing, phase-aware attack "
            "vector suggestions and ready-to-run commands."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json",
    )

    # ── Middleware (order matters: outermost first) ───────────────────────

    application.add_middleware(SecurityHeadersMiddleware)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )

    # ── Shared state ─────────────────────────────────────────────────────

    corpus_dir = rules_dir or settings.RULES_DIR or default_rules_dir()
    application.state.rule_engine = RuleEngine(load_corpus(corpus_dir))
    application.state.store = store if store is not None else InMemoryStore()

    # ── Routers ──────────────────────────────────────────────────────────

    application.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    # ── Health Check ─────────────────────────────────────────────────────

    @application.get(
        _HEALTH_CHECK_PATH,
        tags=["health"],
        summary="Application health check",
        response_class=JSONResponse,
    )
    async def health_check() -> dict[str, Any]:
        """Return the current health status of the application.

        Returns:
            A JSON object with ``status``, ``app``, ``rule_sets`` and
            ``timestamp`` fields.
        """
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": __version__,
            "rule_sets": len(application.state.rule_engine.services),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    logger.info(
        "Application created with %d rule set(s)",
        len(application.state.rule_engine.services),
        extra={"action": "startup", "target": str(corpus_dir)},
    )
    return application


# ── Module-Level App Instance ────────────────────────────────────────────────

app: FastAPI = create_app()
