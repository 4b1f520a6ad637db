"""
Build the submissionunit.xml node tree from a validated configuration.

All cross-references are checked when the builder is constructed, before
the caller has written anything to disk: an unknown keyword type or an
unresolved keyword reference aborts the run there. ``build`` itself only
warns (unmapped CTD section, active document without content).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from . import code_systems
from .identifiers import IdentifierSet
from .keywords import KeywordCatalog
from .manifest_templates import (
    ROOT_TAG,
    coded,
    contact_party,
    context_of_use_component,
    document_component,
    keyword_reference,
    message_header,
    root_attributes,
    status_code,
)
from .metrics import metrics
from .schemas import Document, SubmissionConfig
from .xml_tree import XmlNode, node

logger = logging.getLogger(__name__)

PRIORITY_STEP = 1000
CONTACT_ROLES = ("regulatory", "technical")


@dataclass(frozen=True)
class ContentFile:
    """A content file written for one document of the configuration."""
    document_index: int
    path: Path
    relative_path: str  # forward slashes, relative to the sequence directory
    sha256: str


def priority_number(document_index: int) -> int:
    return (document_index + 1) * PRIORITY_STEP


class ManifestBuilder:
    def __init__(self, config: SubmissionConfig, identifiers: IdentifierSet):
        self.config = config
        self.identifiers = identifiers
        self.keywords = KeywordCatalog(config.keywords)
        self.keywords.check_documents(config.documents)

    def section_for(self, document: Document, index: int) -> code_systems.CodedValue:
        section = code_systems.section_code(document.type)
        if section is None:
            logger.warning(
                "No CTD section for document type, using default",
                extra={
                    "document_index": index,
                    "document_type": document.type,
                    "default_section": code_systems.DEFAULT_SECTION.code,
                },
            )
            metrics.record_section_fallback(document.type)
            return code_systems.DEFAULT_SECTION
        return section

    def keyword_refs_for(self, document: Document, index: int) -> List[XmlNode]:
        refs = self.keywords.references(document.keywordRefs, index)
        if document.type == code_systems.APPLICATION_FORM_DOCUMENT_TYPE:
            refs.append(keyword_reference(code_systems.form_type_code(document.type)))
        return refs

    def context_of_use(self, document: Document, index: int, has_content: bool) -> XmlNode:
        return context_of_use_component(
            context_id=self.identifiers.contextsOfUse[index],
            section=self.section_for(document, index),
            status=document.status,
            priority_number=priority_number(index),
            document_id=self.identifiers.documents[index] if has_content else None,
            replaces_id=document.replacesId if document.operation == "replace" else None,
            keyword_refs=self.keyword_refs_for(document, index),
        )

    def contact_parties(self) -> List[XmlNode]:
        parties = []
        for role in CONTACT_ROLES:
            contact = getattr(self.config.contacts, role)
            if contact is None:
                continue
            parties.append(contact_party(contact, self.identifiers.contacts[role], code_systems.contact_type_code(role)))
        return parties

    def application(self, document_components: List[XmlNode]) -> XmlNode:
        app = self.config.application
        sponsor = node(
            "holder",
            None,
            node(
                "applicant",
                None,
                node("sponsorOrganization", None, node("name", None, node("part", {"value": app.sponsor}))),
            ),
        )
        application = node(
            "application",
            None,
            node(
                "id",
                None,
                node("item", {"root": code_systems.CodeSystems.US_APPLICATION_NUMBER, "extension": app.number}),
            ),
            coded("code", code_systems.application_type_code(app.type)),
            sponsor,
            node("subject", None, node("reviewProcedure", None, node("code"))),
        )
        application.extend(document_components)
        application.extend(self.keywords.definitions())
        return application

    def submission(self, document_components: List[XmlNode]) -> XmlNode:
        sub = self.config.submission
        submission = node(
            "submission",
            None,
            node("id", {"xsi:type": "DSET_II"}, node("item", {"root": self.identifiers.submission})),
            coded("code", code_systems.submission_type_code(sub.type)),
        )
        submission.extend(self.contact_parties())
        submission.append(node("componentOf", None, self.application(document_components)))
        return submission

    def build(self, content_files: Optional[Mapping[int, ContentFile]] = None) -> XmlNode:
        """
        Assemble the full message.

        ``content_files`` maps document index to the file written for it.
        Documents without an entry get no document body and no
        ``derivedFrom`` link.
        """
        files = content_files or {}
        sub = self.config.submission

        context_components: List[XmlNode] = []
        document_components: List[XmlNode] = []
        for index, document in enumerate(self.config.documents):
            content = files.get(index) if document.is_active else None
            if document.is_active and content is None:
                logger.warning(
                    "Active document has no content file",
                    extra={"document_index": index, "document_type": document.type},
                )
            context_components.append(self.context_of_use(document, index, content is not None))
            if content is not None:
                document_components.append(
                    document_component(
                        self.identifiers.documents[index],
                        document.title,
                        content.relative_path,
                        content.sha256,
                    )
                )

        unit = node(
            "submissionUnit",
            None,
            node("id", {"root": self.identifiers.submissionUnit}),
            coded("code", code_systems.submission_unit_type_code(sub.sequenceNumber)),
            node("title", {"value": sub.title}),
            status_code("active"),
        )
        unit.extend(context_components)
        unit.append(
            node(
                "componentOf1",
                None,
                node("sequenceNumber", {"value": sub.sequenceNumber}),
                self.submission(document_components),
            )
        )

        control_act = node(
            "controlActProcess",
            {"classCode": "ACTN", "moodCode": "EVN"},
            node("subject", {"typeCode": "SUBJ"}, unit),
        )
        root = node(ROOT_TAG, root_attributes(), *message_header())
        root.append(control_act)

        unused = self.keywords.unreferenced(self.config.documents)
        logger.debug(
            "Manifest built",
            extra={
                "contexts_of_use": len(context_components),
                "documents": len(document_components),
                "keywords": len(self.keywords),
                "unreferenced_keywords": unused,
            },
        )
        return root


def build_manifest(
    config: SubmissionConfig,
    identifiers: IdentifierSet,
    content_files: Optional[Mapping[int, ContentFile]] = None,
) -> XmlNode:
    return ManifestBuilder(config, identifiers).build(content_files)
