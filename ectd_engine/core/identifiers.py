from __future__ import annotations

import re
import uuid
from typing import Callable, Dict, List, Optional, Set

from pydantic import BaseModel, Field

from .schemas import SubmissionConfig

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)

IdentifierFactory = Callable[[], str]


def generate_uuid() -> str:
    """Random (v4) UUID in lowercase hyphenated form."""
    return str(uuid.uuid4())


def is_valid_uuid(value: str) -> bool:
    return bool(UUID_RE.match(value or ""))


class IdentifierSet(BaseModel):
    """
    Every identifier one generation run needs, assigned before any XML is built.

    ``documents`` and ``contextsOfUse`` are indexed by the document's position
    in the configuration.
    """
    submissionUnit: str
    submission: str
    documents: List[str] = Field(default_factory=list)
    contextsOfUse: List[str] = Field(default_factory=list)
    contacts: Dict[str, str] = Field(default_factory=dict)

    def all(self) -> List[str]:
        return [
            self.submissionUnit,
            self.submission,
            *self.documents,
            *self.contextsOfUse,
            *self.contacts.values(),
        ]


class _Allocator:
    def __init__(self, factory: IdentifierFactory, max_attempts: int = 16) -> None:
        self.factory = factory
        self.max_attempts = max_attempts
        self.issued: Set[str] = set()

    def next(self) -> str:
        for _ in range(self.max_attempts):
            candidate = self.factory()
            if candidate not in self.issued:
                self.issued.add(candidate)
                return candidate
        raise RuntimeError(f"Identifier factory produced {self.max_attempts} duplicate identifiers in a row")


def generate_identifiers(
    config: SubmissionConfig,
    factory: Optional[IdentifierFactory] = None,
) -> IdentifierSet:
    """Assign a distinct identifier to every addressable entity of ``config``."""
    allocator = _Allocator(factory or generate_uuid)
    submission_unit = allocator.next()
    submission = allocator.next()

    documents: List[str] = []
    contexts: List[str] = []
    for _ in config.documents:
        documents.append(allocator.next())
        contexts.append(allocator.next())

    contacts: Dict[str, str] = {}
    for role in ("regulatory", "technical"):
        if getattr(config.contacts, role) is not None:
            contacts[role] = allocator.next()

    return IdentifierSet(
        submissionUnit=submission_unit,
        submission=submission,
        documents=documents,
        contextsOfUse=contexts,
        contacts=contacts,
    )
