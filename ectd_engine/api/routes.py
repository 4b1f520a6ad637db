from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import FileResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.background import BackgroundTask

from ..config import get_settings
from ..core.config_loader import default_config, load_config, load_schema, validate_config
from ..core.generator import archive_name, generate_submission
from ..core.metrics import metrics
from ..core.schemas import GenerateRequest, ProblemDetails, SubmissionConfig, ValidationReport
from ..core.staging import StagingArea, package_zip
from ..logging_setup import request_id
from .deps import get_staging_area

logger = logging.getLogger(__name__)

router = APIRouter()

ZIP_MEDIA_TYPE = "application/zip"

_problem_responses = {
    400: {"model": ProblemDetails, "description": "Configuration failed validation"},
    422: {"model": ProblemDetails, "description": "Unresolved keyword reference or unknown keyword type"},
    500: {"model": ProblemDetails, "description": "Filesystem failure while building the package"},
}
_zip_response = {
    200: {
        "description": "ZIP archive of the sequence directory",
        "content": {ZIP_MEDIA_TYPE: {}},
    }
}


@router.get(
    "/health",
    tags=["health"],
    summary="Health Check",
    responses={200: {"content": {"application/json": {"example": {"status": "healthy"}}}}},
)
def health() -> dict:
    """Health check endpoint to verify service availability."""
    return {"status": "healthy"}


@router.get(
    "/schema",
    tags=["configuration"],
    summary="Configuration JSON Schema",
    description="The JSON Schema (Draft 2020-12) every submission configuration must satisfy.",
)
def schema() -> dict:
    return {"success": True, "schema": load_schema()}


@router.get(
    "/config/default",
    tags=["configuration"],
    summary="Default Configuration",
    description="Sample configuration for an original NDA: forms, cover letter, quality and clinical documents.",
)
def config_default() -> Dict[str, Any]:
    return default_config()


@router.post(
    "/validate",
    response_model=ValidationReport,
    tags=["configuration"],
    summary="Validate Configuration",
    description="""
    Validate a submission configuration without generating anything.

    Every violation is reported as a `{location, message}` pair, where
    `location` is a JSON pointer into the submitted document. As with
    `/generate/custom`, documents may not name a server-side `filePath`.
    """,
)
def validate(config: Any = Body(...)) -> ValidationReport:
    issues = validate_config(config, allow_source_files=False)
    return ValidationReport(valid=not issues, errors=issues)


def _build_zip(config: SubmissionConfig, staging: StagingArea, generate_placeholders: bool) -> FileResponse:
    rid = request_id()
    staging_dir = staging.create()
    logger.info(
        "Package request accepted",
        extra={"request_id": rid, "staging_dir": str(staging_dir), "application_type": config.application.type},
    )
    try:
        result = generate_submission(config, staging_dir / "output", generate_placeholders)
        zip_name = archive_name(config)
        zip_path = package_zip(result.sequenceDir, staging_dir / zip_name)
    except Exception:
        staging.cleanup(staging_dir)
        raise

    logger.info("Package ready", extra={"request_id": rid, "archive": zip_name})
    return FileResponse(
        zip_path,
        media_type=ZIP_MEDIA_TYPE,
        filename=zip_name,
        background=BackgroundTask(staging.cleanup, staging_dir),
    )


@router.post(
    "/generate/default",
    tags=["generation"],
    summary="Generate Default Submission",
    description="Build the default sample submission and return it as a ZIP archive.",
    response_class=FileResponse,
    responses={**_zip_response, 500: _problem_responses[500]},
)
def generate_default(staging: StagingArea = Depends(get_staging_area)) -> FileResponse:
    config = load_config(default_config(), source="default")
    return _build_zip(config, staging, get_settings().ECTD_GENERATE_PLACEHOLDERS)


@router.post(
    "/generate/custom",
    tags=["generation"],
    summary="Generate Custom Submission",
    description="""
    Build a submission from the supplied configuration and return it as a
    ZIP archive named `<applicationNumber>_seq<sequenceNumber>.zip`.

    ### Errors:
    - **400** configuration invalid, with every violation listed; a
      document `filePath` is always rejected, content is generated
    - **422** keyword reference or keyword type cannot be resolved
    - **500** filesystem failure while building the package
    """,
    response_class=FileResponse,
    responses={**_zip_response, **_problem_responses},
)
def generate_custom(
    request: GenerateRequest,
    staging: StagingArea = Depends(get_staging_area),
) -> FileResponse:
    config = load_config(request.config, source="request", allow_source_files=False)
    return _build_zip(config, staging, request.options.generatePDFs)


@router.get(
    "/metrics",
    tags=["metrics"],
    summary="Prometheus Metrics",
    response_description="Prometheus metrics in text format",
)
def prometheus_metrics() -> Response:
    data = generate_latest(metrics.registry)
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
