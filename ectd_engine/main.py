from __future__ import annotations

import logging
import re

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import router
from .config import get_settings
from .core.errors import EctdException
from .core.metrics import metrics
from .core.schemas import ProblemDetails
from .logging_setup import setup_logging

PROBLEM_BASE_URI = "https://ectd-engine.dev/problems"


def _problem_type(exc: EctdException) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", exc.title.lower()).strip("-")
    return f"{PROBLEM_BASE_URI}/{slug}"


def create_app() -> FastAPI:
    setup_logging()
    logger = logging.getLogger(__name__)
    settings = get_settings()
    metrics.set_service_info(service=settings.SERVICE_NAME, version=__version__)

    app = FastAPI(
        title="eCTD 4.0 Submission Generator",
        description="""
        ## eCTD 4.0 Submission Package Generator

        Builds regulatory submission packages from a declarative configuration.

        ### Each package contains:
        - **submissionunit.xml**: HL7 v3 RPS manifest (FDA and ICH eCTD v4.0 implementation guides)
        - **sha256.txt**: digest of every content file
        - **m1..m5**: module directories with the submitted or placeholder documents

        Errors are reported as RFC 7807 problem documents listing every
        violation as a `{location, message}` pair.
        """,
        version=__version__,
        tags_metadata=[
            {"name": "health", "description": "Health check endpoints"},
            {"name": "configuration", "description": "Configuration schema, sample and validation"},
            {"name": "generation", "description": "Submission package generation"},
            {"name": "metrics", "description": "Prometheus metrics for monitoring"},
        ],
    )

    @app.exception_handler(EctdException)
    async def ectd_error_handler(request: Request, exc: EctdException):
        detail = exc.error_detail
        log = logger.warning if exc.status_code < 500 else logger.error
        log("Request failed", extra={"path": request.url.path, "error": detail.to_dict()})

        problem = ProblemDetails(
            type=_problem_type(exc),
            title=exc.title,
            status=exc.status_code,
            detail=detail.message,
            instance=request.url.path,
            errorCode=exc.code.value,
            errors=exc.issues,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=problem.model_dump(),
            headers={"Content-Type": "application/problem+json"},
        )

    app.include_router(router)
    logger.info("Application created", extra={"service": settings.SERVICE_NAME, "version": __version__})
    return app


app = create_app()
