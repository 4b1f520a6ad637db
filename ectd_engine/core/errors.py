"""
Structured error taxonomy for the eCTD submission generator.

Every failure a generation run can raise carries an error code, a severity
and enough context (configuration location, filesystem path, operation) to
diagnose it without re-running the build.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """High-level error categories."""
    CONFIG = "CONFIG"
    BUILD = "BUILD"
    FS = "FS"
    SYSTEM = "SYSTEM"


class ErrorSeverity(str, Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class EctdErrorCode(str, Enum):
    """
    Structured error codes.

    Format: {CATEGORY}_{NNN}
    """

    # Configuration errors (CONFIG_xx)
    CONFIG_INVALID = "CONFIG_001"
    CONFIG_FILE_NOT_FOUND = "CONFIG_002"
    CONFIG_PARSE_FAILED = "CONFIG_003"

    # Manifest build errors (BUILD_xx)
    BUILD_UNRESOLVED_KEYWORD_REFERENCE = "BUILD_001"
    BUILD_UNKNOWN_KEYWORD_TYPE = "BUILD_002"
    BUILD_UNRESOLVED_SECTION = "BUILD_003"
    BUILD_MISSING_CONTENT = "BUILD_004"

    # Filesystem errors (FS_xx)
    FS_DIRECTORY_CREATE_FAILED = "FS_001"
    FS_WRITE_FAILED = "FS_002"
    FS_READ_FAILED = "FS_003"
    FS_CLEANUP_FAILED = "FS_004"

    # System errors (SYSTEM_xx)
    SYSTEM_UNEXPECTED = "SYSTEM_001"


class ValidationIssue(BaseModel):
    """One configuration violation: where it is and what is wrong."""
    location: str
    message: str


class EctdErrorDetail(BaseModel):
    """
    Structured error detail.

    Provides actionable information for error triage and resolution.
    """
    code: EctdErrorCode
    severity: ErrorSeverity
    message: str
    details: Optional[str] = None
    path: Optional[str] = None
    context: Dict[str, Any] = {}

    @property
    def category(self) -> ErrorCategory:
        """Extract error category from code."""
        return ErrorCategory(self.code.value.split("_")[0])

    def to_problem_issue(self) -> Dict[str, Any]:
        """Convert to a ``{location, message}`` issue for problem responses."""
        message = f"[{self.code.value}] {self.message}"
        if self.details:
            message += f" - {self.details}"
        return {"location": self.path or "/", "message": message}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and API responses."""
        result = {
            "error_code": self.code.value,
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details
        if self.path:
            result["path"] = self.path
        if self.context:
            result["context"] = self.context

        return result


class EctdException(Exception):
    """
    Base exception class with structured error information.

    ``status_code`` is the HTTP status the API surface answers with.
    """

    status_code: int = 500
    title: str = "Submission Generation Error"

    def __init__(
        self,
        error_detail: EctdErrorDetail,
        cause: Optional[Exception] = None
    ):
        self.error_detail = error_detail
        self.cause = cause
        super().__init__(error_detail.message)

    @property
    def code(self) -> EctdErrorCode:
        return self.error_detail.code

    @property
    def category(self) -> ErrorCategory:
        return self.error_detail.category

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_detail.severity

    @property
    def issues(self) -> List[ValidationIssue]:
        return [ValidationIssue(**self.error_detail.to_problem_issue())]


class ConfigurationInvalidError(EctdException):
    """Configuration failed structural or type validation."""

    status_code = 400
    title = "Configuration Validation Error"

    def __init__(self, error_detail: EctdErrorDetail, issues: List[ValidationIssue]):
        super().__init__(error_detail)
        self._issues = list(issues)

    @property
    def issues(self) -> List[ValidationIssue]:
        return self._issues


class UnresolvedKeywordReferenceError(EctdException):
    """A document references a keyword code that is never defined."""

    status_code = 422
    title = "Unresolved Keyword Reference"


class UnknownKeywordTypeError(EctdException):
    """A keyword declares a type with no registered code."""

    status_code = 422
    title = "Unknown Keyword Type"


class FileSystemError(EctdException):
    """Directory or file creation, read or write failed."""

    status_code = 500
    title = "Filesystem Failure"


# Convenience functions for creating common errors

def create_configuration_error(
    issues: List[ValidationIssue],
    source: Optional[str] = None
) -> ConfigurationInvalidError:
    """Create a configuration error carrying every violation found."""
    context: Dict[str, Any] = {"issue_count": len(issues)}
    if source:
        context["source"] = source
    return ConfigurationInvalidError(
        EctdErrorDetail(
            code=EctdErrorCode.CONFIG_INVALID,
            severity=ErrorSeverity.ERROR,
            message="Configuration validation failed",
            details=f"{len(issues)} violation(s)",
            context=context,
        ),
        issues,
    )


def create_parse_error(source: str, reason: str) -> ConfigurationInvalidError:
    """Create an error for a configuration file that is not valid JSON/YAML."""
    issue = ValidationIssue(location="/", message=f"Cannot parse {source}: {reason}")
    return ConfigurationInvalidError(
        EctdErrorDetail(
            code=EctdErrorCode.CONFIG_PARSE_FAILED,
            severity=ErrorSeverity.ERROR,
            message="Configuration could not be parsed",
            details=reason,
            context={"source": source},
        ),
        [issue],
    )


def create_unresolved_reference_error(
    keyword_code: str,
    document_index: int
) -> UnresolvedKeywordReferenceError:
    """Create an error for a keywordRefs entry with no matching keyword."""
    return UnresolvedKeywordReferenceError(EctdErrorDetail(
        code=EctdErrorCode.BUILD_UNRESOLVED_KEYWORD_REFERENCE,
        severity=ErrorSeverity.ERROR,
        message=f'Keyword reference "{keyword_code}" not found in keyword definitions',
        path=f"/documents/{document_index}/keywordRefs",
        context={"keyword_code": keyword_code, "document_index": document_index},
    ))


def create_unknown_keyword_type_error(
    keyword_type: str,
    keyword_index: int
) -> UnknownKeywordTypeError:
    """Create an error for a keyword whose type has no code-system entry."""
    return UnknownKeywordTypeError(EctdErrorDetail(
        code=EctdErrorCode.BUILD_UNKNOWN_KEYWORD_TYPE,
        severity=ErrorSeverity.ERROR,
        message=f"Unknown keyword type: {keyword_type}",
        path=f"/keywords/{keyword_index}/type",
        context={"keyword_type": keyword_type},
    ))


def create_filesystem_error(
    code: EctdErrorCode,
    operation: str,
    path: str,
    cause: Optional[Exception] = None
) -> FileSystemError:
    """Create a filesystem error naming the offending path and operation."""
    return FileSystemError(
        EctdErrorDetail(
            code=code,
            severity=ErrorSeverity.ERROR,
            message=f"Failed to {operation}: {path}",
            details=str(cause) if cause else None,
            context={"operation": operation, "path": path},
        ),
        cause=cause,
    )
