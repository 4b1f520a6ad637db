from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .errors import ValidationIssue


ApplicationType = Literal["NDA", "ANDA", "BLA", "IND", "DMF"]
SubmissionType = Literal["original", "amendment", "supplement", "annual_report"]
ModuleName = Literal["m1", "m2", "m3", "m4", "m5"]
Operation = Literal["new", "replace", "append", "delete"]
KeywordType = Literal["studyId", "productName", "manufacturer", "materialId", "issueDate"]
Status = Literal["active", "suspended"]

MODULES: tuple[str, ...] = ("m1", "m2", "m3", "m4", "m5")

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
OID_PATTERN = r"^[0-9.]+$"
UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"


class Application(BaseModel):
    type: ApplicationType = Field(description="Application type")
    number: str = Field(pattern=r"^[0-9]{6}$", description="Six-digit application number", examples=["123456"])
    sponsor: str = Field(min_length=1, description="Sponsor organization name")


class Submission(BaseModel):
    type: SubmissionType = Field(description="Submission type")
    sequenceNumber: int = Field(ge=1, description="Sequence number (positive integer)")
    title: str = Field(min_length=1, description="Submission title")


class Contact(BaseModel):
    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    middleName: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    mobile: Optional[str] = None
    organization: Optional[str] = None


class Contacts(BaseModel):
    regulatory: Optional[Contact] = None
    technical: Optional[Contact] = None


class Document(BaseModel):
    """
    One document of the submission.

    ``replacesId`` names the context-of-use a ``replace`` operation supersedes.
    Without ``filePath`` placeholder content is generated.
    """
    module: ModuleName = Field(description="CTD module")
    type: str = Field(description="Document type (e.g., 356h, cover, bioavailability)")
    title: str = Field(min_length=1, description="Document title")
    operation: Operation = Field("new", description="Lifecycle operation")
    replacesId: Optional[str] = Field(
        None,
        pattern=UUID_PATTERN,
        description="UUID of contextOfUse being replaced (required for replace operation)",
    )
    filePath: Optional[str] = Field(None, description="Path to existing file")
    keywordRefs: List[str] = Field(default_factory=list, description="References to keyword codes")

    @model_validator(mode="after")
    def _replace_requires_target(self) -> "Document":
        if self.operation == "replace" and not self.replacesId:
            raise ValueError("replacesId is required when operation is 'replace'")
        return self

    @property
    def status(self) -> Status:
        return "suspended" if self.operation == "delete" else "active"

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class Keyword(BaseModel):
    type: KeywordType = Field(description="Keyword type")
    code: str = Field(min_length=1, description="Keyword code (sender-defined)")
    codeSystem: str = Field(pattern=OID_PATTERN, description="Code system OID")
    displayName: str = Field(min_length=1, description="Human-readable display name")


class SubmissionConfig(BaseModel):
    """
    Complete input for one generation run.

    Immutable for the duration of the run; documents are ordered and that
    order drives manifest ordering and priority numbers.
    """
    application: Application
    submission: Submission
    contacts: Contacts = Field(default_factory=Contacts)
    documents: List[Document] = Field(default_factory=list)
    keywords: List[Keyword] = Field(default_factory=list)

    @field_validator("contacts", mode="before")
    @classmethod
    def _contacts_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("keywords")
    @classmethod
    def _unique_keyword_codes(cls, keywords: List[Keyword]) -> List[Keyword]:
        counts = Counter(kw.code for kw in keywords)
        duplicates = sorted(code for code, n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"Duplicate keyword code(s): {', '.join(duplicates)}")
        return keywords


class ValidationReport(BaseModel):
    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)


class GenerateOptions(BaseModel):
    generatePDFs: bool = Field(True, description="Render placeholder PDFs for documents without filePath")


class GenerateRequest(BaseModel):
    config: Dict[str, Any] = Field(description="Submission configuration (validated by the generator)")
    options: GenerateOptions = Field(default_factory=GenerateOptions)


class ProblemDetails(BaseModel):
    """
    RFC 7807 Problem Details for HTTP APIs.
    """
    type: Optional[str] = Field(
        "about:blank",
        description="A URI reference that identifies the problem type"
    )
    title: Optional[str] = Field(
        None,
        description="A short, human-readable summary of the problem type"
    )
    status: Optional[int] = Field(
        None,
        description="The HTTP status code"
    )
    detail: Optional[str] = Field(
        None,
        description="A human-readable explanation specific to this occurrence"
    )
    instance: Optional[str] = Field(
        None,
        description="A URI reference that identifies the specific occurrence"
    )
    errorCode: Optional[str] = Field(
        None,
        description="Structured error code, e.g. BUILD_001"
    )
    errors: List[ValidationIssue] = Field(
        default_factory=list,
        description="Every violation found, as location/message pairs"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "type": "https://ectd-engine.dev/problems/configuration-invalid",
                    "title": "Configuration Validation Error",
                    "status": 400,
                    "detail": "Configuration validation failed",
                    "errorCode": "CONFIG_001",
                    "errors": [
                        {"location": "/application/number", "message": "'12345' does not match '^[0-9]{6}$'"}
                    ]
                }
            ]
        }
    }
