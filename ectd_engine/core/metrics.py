"""
Domain-specific metrics for the eCTD submission generator.

Tracks:
- Generated submissions and their outcome
- Generation duration
- Documents by lifecycle operation
- CTD section fallbacks
- Structured errors and staging cleanup failures
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, Info


class EctdMetrics:
    """
    Metrics collector on its own registry so tests and embedding
    applications never collide with the default process registry.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.submissions_total = Counter(
            "ectd_submissions_generated_total",
            "Submission packages generated",
            labelnames=["application_type", "submission_type", "outcome"],
            registry=self.registry
        )

        self.generation_duration = Histogram(
            "ectd_generation_duration_seconds",
            "Time spent building one submission package",
            labelnames=["application_type"],
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
            registry=self.registry
        )

        self.documents_total = Counter(
            "ectd_documents_total",
            "Documents placed in generated manifests",
            labelnames=["operation"],
            registry=self.registry
        )

        self.section_fallbacks = Counter(
            "ectd_section_fallbacks_total",
            "Documents whose type had no CTD section mapping",
            labelnames=["document_type"],
            registry=self.registry
        )

        self.structured_errors = Counter(
            "ectd_structured_errors_total",
            "Structured errors by category and code",
            labelnames=["category", "error_code", "severity"],
            registry=self.registry
        )

        self.cleanup_failures = Counter(
            "ectd_staging_cleanup_failures_total",
            "Staging directories that could not be removed",
            registry=self.registry
        )

        self.service_info = Info(
            "ectd_service_info",
            "eCTD engine service information",
            registry=self.registry
        )

    def record_submission(
        self,
        application_type: str,
        submission_type: str,
        success: bool
    ):
        """Record a finished generation run."""
        outcome = "success" if success else "failure"
        self.submissions_total.labels(
            application_type=application_type,
            submission_type=submission_type,
            outcome=outcome
        ).inc()

    def record_document(self, operation: str):
        self.documents_total.labels(operation=operation).inc()

    def record_section_fallback(self, document_type: str):
        self.section_fallbacks.labels(document_type=document_type).inc()

    def record_structured_error(
        self,
        category: str,
        error_code: str,
        severity: str
    ):
        """Record structured error occurrence."""
        self.structured_errors.labels(
            category=category,
            error_code=error_code,
            severity=severity
        ).inc()

    def record_cleanup_failure(self):
        self.cleanup_failures.inc()

    def set_service_info(self, **info_labels: str):
        """Set service information labels."""
        self.service_info.info(info_labels)

    @contextmanager
    def time_generation(self, application_type: str) -> Generator[float, None, None]:
        """Context manager to time one generation run."""
        start_time = time.time()
        try:
            yield start_time
        finally:
            duration = time.time() - start_time
            self.generation_duration.labels(application_type=application_type).observe(duration)


# Global metrics instance
metrics = EctdMetrics()
