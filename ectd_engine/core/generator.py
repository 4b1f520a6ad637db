"""
Package assembly: turn one configuration into a complete submission tree.

Order of work: identifiers, reference checks, directories, content files,
manifest, digest manifest. Reference errors surface before the first
directory is created; anything written before a later failure stays on
disk for the caller to clean up.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from ..config import Settings, get_settings
from .config_loader import default_config, load_config
from .directories import (
    SubmissionPaths,
    create_submission_structure,
    document_path,
    relative_posix_path,
    unique_path,
)
from .errors import EctdException
from .hashing import (
    MANIFEST_FILENAME,
    directory_hashes,
    file_sha256,
    write_digest_manifest,
)
from .identifiers import IdentifierSet, generate_identifiers
from .manifest_builder import ContentFile, ManifestBuilder
from .metrics import metrics
from .placeholders import copy_source_file, write_placeholder
from .schemas import SubmissionConfig
from .serializer import write_xml

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    success: bool = True
    outputDir: Path
    applicationDir: Path
    sequenceDir: Path
    moduleDirs: Dict[str, Path]
    manifestPath: Path
    digestManifestPath: Path
    generatedFiles: int
    identifiers: IdentifierSet


def archive_name(config: SubmissionConfig) -> str:
    return f"{config.application.number}_seq{config.submission.sequenceNumber}.zip"


def write_content_files(
    config: SubmissionConfig,
    paths: SubmissionPaths,
    generate_placeholders: bool = True,
    chunk_size: int = 65536,
) -> Dict[int, ContentFile]:
    """
    Write one content file per active document and digest it.

    Source files given by ``filePath`` are copied under their own name;
    other documents get a placeholder when ``generate_placeholders`` is on.
    Deleted documents never get content.
    """
    app = config.application
    seq = config.submission.sequenceNumber
    files: Dict[int, ContentFile] = {}

    for index, document in enumerate(config.documents):
        if not document.is_active:
            continue
        if document.filePath:
            target = unique_path(paths, document.module, Path(document.filePath).name)
            copy_source_file(document.filePath, target)
        elif generate_placeholders:
            target = document_path(paths, document, app, seq)
            write_placeholder(target, document, app, seq)
        else:
            continue

        files[index] = ContentFile(
            document_index=index,
            path=target,
            relative_path=relative_posix_path(target, paths.sequence),
            sha256=file_sha256(target, chunk_size),
        )
    return files


def generate_submission(
    config: SubmissionConfig,
    output_dir: Union[str, Path],
    generate_placeholders: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    """Build the full output tree for an already validated configuration."""
    settings = settings or get_settings()
    if generate_placeholders is None:
        generate_placeholders = settings.ECTD_GENERATE_PLACEHOLDERS

    app = config.application
    sub = config.submission
    log_ctx = {
        "application_type": app.type,
        "application_number": app.number,
        "sequence_number": sub.sequenceNumber,
        "documents": len(config.documents),
    }
    logger.info("Submission generation started", extra=log_ctx)

    try:
        with metrics.time_generation(app.type):
            identifiers = generate_identifiers(config)
            builder = ManifestBuilder(config, identifiers)

            paths = create_submission_structure(output_dir, app, sub.sequenceNumber)
            content_files = write_content_files(
                config, paths, generate_placeholders, settings.ECTD_HASH_CHUNK_SIZE
            )

            manifest = builder.build(content_files)
            manifest_path = write_xml(manifest, paths.sequence / MANIFEST_FILENAME)

            digests = directory_hashes(
                paths.sequence,
                max_workers=settings.ECTD_HASH_WORKERS,
                chunk_size=settings.ECTD_HASH_CHUNK_SIZE,
            )
            digest_path = write_digest_manifest(paths.sequence, digests)
    except EctdException as exc:
        metrics.record_structured_error(exc.category.value, exc.code.value, exc.severity.value)
        metrics.record_submission(app.type, sub.type, success=False)
        logger.warning("Submission generation failed", extra={**log_ctx, "error": exc.error_detail.to_dict()})
        raise

    for document in config.documents:
        metrics.record_document(document.operation)
    metrics.record_submission(app.type, sub.type, success=True)
    logger.info(
        "Submission generation finished",
        extra={**log_ctx, "content_files": len(content_files), "sequence_dir": str(paths.sequence)},
    )

    return GenerationResult(
        outputDir=paths.base,
        applicationDir=paths.application,
        sequenceDir=paths.sequence,
        moduleDirs=paths.modules,
        manifestPath=manifest_path,
        digestManifestPath=digest_path,
        generatedFiles=len(content_files),
        identifiers=identifiers,
    )


def generate_ectd_submission(
    raw_config: Any,
    output_dir: Union[str, Path],
    generate_placeholders: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    """Validate a raw configuration, then generate it."""
    config = raw_config if isinstance(raw_config, SubmissionConfig) else load_config(raw_config)
    return generate_submission(config, output_dir, generate_placeholders, settings)


def generate_default_submission(
    output_dir: Union[str, Path],
    generate_placeholders: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> GenerationResult:
    return generate_ectd_submission(default_config(), output_dir, generate_placeholders, settings)
