from __future__ import annotations

import json
import logging
from collections import Counter
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml
from jsonschema import Draft202012Validator
from pydantic import ValidationError

from .errors import (
    EctdErrorCode,
    ValidationIssue,
    create_configuration_error,
    create_filesystem_error,
    create_parse_error,
)
from .metrics import metrics
from .schemas import SubmissionConfig
from .serializer import XML_ILLEGAL_CHARS

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "submission.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(load_schema())


def _pointer(parts: Any) -> str:
    return "/" + "/".join(str(p) for p in parts)


def _schema_issues(data: Any) -> List[ValidationIssue]:
    errors = sorted(
        _validator().iter_errors(data),
        key=lambda e: ([str(p) for p in e.absolute_path], e.message),
    )
    return [ValidationIssue(location=_pointer(e.absolute_path), message=e.message) for e in errors]


def _model_issues(exc: ValidationError) -> List[ValidationIssue]:
    return [
        ValidationIssue(location=_pointer(err["loc"]), message=err["msg"])
        for err in exc.errors()
    ]


def _xml_text_issues(value: Any, path: Tuple[Any, ...] = ()) -> List[ValidationIssue]:
    """Strings anywhere in the configuration must be representable in XML 1.0."""
    if isinstance(value, str):
        if XML_ILLEGAL_CHARS.search(value):
            return [ValidationIssue(location=_pointer(path), message="contains a character not allowed in XML")]
        return []
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, list):
        items = enumerate(value)
    else:
        return []
    return [issue for key, item in items for issue in _xml_text_issues(item, path + (key,))]


def _duplicate_keyword_issues(data: Any) -> List[ValidationIssue]:
    keywords = data.get("keywords") if isinstance(data, dict) else None
    if not isinstance(keywords, list):
        return []
    counts = Counter(kw["code"] for kw in keywords if isinstance(kw, dict) and isinstance(kw.get("code"), str))
    duplicates = sorted(code for code, n in counts.items() if n > 1)
    if not duplicates:
        return []
    return [ValidationIssue(location="/keywords", message=f"Duplicate keyword code(s): {', '.join(duplicates)}")]


def _source_file_issues(data: Any) -> List[ValidationIssue]:
    documents = data.get("documents") if isinstance(data, dict) else None
    if not isinstance(documents, list):
        return []
    return [
        ValidationIssue(
            location=f"/documents/{index}/filePath",
            message="filePath is not accepted here; content is generated",
        )
        for index, document in enumerate(documents)
        if isinstance(document, dict) and document.get("filePath") is not None
    ]


def validate_config(data: Any, allow_source_files: bool = True) -> List[ValidationIssue]:
    """
    Validate a raw configuration and return every violation found.

    Structural checks come from the published JSON Schema. Text that XML
    cannot carry, duplicate keyword codes and (with ``allow_source_files``
    off) ``filePath`` entries are reported alongside them. Once all of that
    passes, the typed model runs for the remaining cross-field rules. An
    empty list means the configuration is valid.
    """
    issues = _schema_issues(data) + _xml_text_issues(data) + _duplicate_keyword_issues(data)
    if not allow_source_files:
        issues += _source_file_issues(data)
    if issues:
        return issues
    try:
        SubmissionConfig.model_validate(data)
    except ValidationError as exc:
        return _model_issues(exc)
    return []


def load_config(data: Any, source: str = "<config>", allow_source_files: bool = True) -> SubmissionConfig:
    """
    Validate ``data`` and return the typed configuration.

    Callers acting for remote clients pass ``allow_source_files=False`` so a
    configuration cannot pull server-side files into the package.
    """
    issues = validate_config(data, allow_source_files)
    if issues:
        error = create_configuration_error(issues, source)
        metrics.record_structured_error(error.category.value, error.code.value, error.severity.value)
        logger.info("Configuration rejected", extra={"source": source, "issue_count": len(issues)})
        raise error
    return SubmissionConfig.model_validate(data)


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a JSON or YAML configuration file without validating it."""
    p = Path(path)
    if not p.is_file():
        raise create_filesystem_error(EctdErrorCode.FS_READ_FAILED, "read configuration file", str(p))
    try:
        with p.open("r", encoding="utf-8") as f:
            if p.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        raise create_filesystem_error(EctdErrorCode.FS_READ_FAILED, "read configuration file", str(p), exc) from exc
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise create_parse_error(str(p), str(exc)) from exc
    return data


def load_config_file(path: Union[str, Path]) -> SubmissionConfig:
    return load_config(read_config_file(path), source=str(path))


def default_config() -> Dict[str, Any]:
    """Sample configuration: an original NDA with forms, cover, quality and clinical documents."""
    return {
        "application": {
            "type": "NDA",
            "number": "123456",
            "sponsor": "Sample Pharmaceuticals Inc",
        },
        "submission": {
            "type": "original",
            "sequenceNumber": 1,
            "title": "Original Application",
        },
        "contacts": {
            "regulatory": {
                "firstName": "Jane",
                "lastName": "Smith",
                "email": "jane.smith@sample.com",
                "phone": "+1(555)123-4567",
                "organization": "Sample Pharmaceuticals Inc",
            },
            "technical": {
                "firstName": "John",
                "lastName": "Doe",
                "email": "john.doe@sample.com",
                "phone": "+1(555)987-6543",
                "organization": "Sample Pharmaceuticals Inc",
            },
        },
        "documents": [
            {"module": "m1", "type": "356h", "title": "Form FDA 356h"},
            {"module": "m1", "type": "cover", "title": "Cover Letter"},
            {
                "module": "m3",
                "type": "product_info",
                "title": "Product Information",
                "keywordRefs": ["MANU_001", "PROD_NAME_001"],
            },
            {
                "module": "m5",
                "type": "bioavailability",
                "title": "Bioavailability Study Report",
                "keywordRefs": ["STUDY_001"],
            },
        ],
        "keywords": [
            {
                "type": "studyId",
                "code": "STUDY_001",
                "codeSystem": "2.16.840.1.113883.9999.1",
                "displayName": "Pivotal BA Study",
            },
            {
                "type": "manufacturer",
                "code": "MANU_001",
                "codeSystem": "2.16.840.1.113883.9999.2",
                "displayName": "Sample Pharmaceuticals Manufacturing Site",
            },
            {
                "type": "productName",
                "code": "PROD_NAME_001",
                "codeSystem": "2.16.840.1.113883.9999.1",
                "displayName": "Sample Drug Product XYZ",
            },
        ],
    }
