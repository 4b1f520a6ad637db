"""
XML fragments of the eCTD 4.0 submissionunit.xml (HL7 v3 RPS message).

Each function returns an ``XmlNode`` subtree; the manifest builder only
decides which fragments to emit and in which order.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .code_systems import IMPLEMENTATION_GUIDES, CodedValue
from .schemas import Contact, Status
from .xml_tree import XmlNode, node

ROOT_TAG = "PORP_IN000001UV"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
HL7_NAMESPACE = "urn:hl7-org:v3"

INTEGRITY_CHECK_ALGORITHM = "SHA256"
DEFAULT_ORGANIZATION_NAME = "Organization"


def root_attributes() -> Dict[str, str]:
    return {
        "ITSVersion": "XML_1.0",
        "xmlns": HL7_NAMESPACE,
        "xmlns:xsi": XSI_NAMESPACE,
        "xsi:schemaLocation": f"{HL7_NAMESPACE} {ROOT_TAG}.xsd",
    }


def coded(tag: str, value: CodedValue) -> XmlNode:
    """``<tag code=".." codeSystem=".."/>``"""
    return node(tag, {"code": value.code, "codeSystem": value.codeSystem})


def status_code(status: Status) -> XmlNode:
    return node("statusCode", {"code": status})


def message_header() -> List[XmlNode]:
    """
    Transmission wrapper children preceding ``controlActProcess``.

    The header identifiers are left empty; the receiver device lists the
    ICH and FDA implementation guides the manifest conforms to.
    """
    receiver_ids = node("id").extend(
        node("item", {"root": ig.root, "identifierName": ig.name}) for ig in IMPLEMENTATION_GUIDES
    )
    device_attrs = {"classCode": "DEV", "determinerCode": "INSTANCE"}
    return [
        node("id"),
        node("creationTime"),
        node("interactionId"),
        node("processingCode"),
        node("processingModeCode"),
        node("acceptAckCode"),
        node("receiver", {"typeCode": "RCV"}, node("device", device_attrs, receiver_ids)),
        node("sender", {"typeCode": "SND"}, node("device", device_attrs, node("id"))),
    ]


def _name(*parts: XmlNode) -> XmlNode:
    return node("name", None, *parts)


def _telecom_items(contact: Contact) -> List[XmlNode]:
    items = []
    if contact.phone:
        items.append(node("item", {"value": f"tel:{contact.phone}", "use": "WP", "capabilities": "voice"}))
    if contact.mobile:
        items.append(node("item", {"value": f"tel:{contact.mobile}", "use": "MC", "capabilities": "voice"}))
    if contact.fax:
        items.append(node("item", {"value": f"tel:{contact.fax}", "use": "WP", "capabilities": "fax"}))
    if contact.email:
        items.append(node("item", {"value": f"mailto:{contact.email}"}))
    return items


def contact_party(contact: Contact, contact_id: str, contact_type: CodedValue) -> XmlNode:
    """``callBackContact`` wrapping one ``contactParty``."""
    name_parts = [node("part", {"type": "GIV", "value": contact.firstName})]
    if contact.middleName:
        name_parts.append(node("part", {"type": "GIV", "value": contact.middleName, "qualifier": "MID"}))
    name_parts.append(node("part", {"type": "FAM", "value": contact.lastName}))

    organization = contact.organization or DEFAULT_ORGANIZATION_NAME
    person = node(
        "contactPerson",
        None,
        _name(*name_parts),
        node("telecom", {"xsi:type": "BAG_TEL"}, *_telecom_items(contact)),
        node(
            "asAgent",
            None,
            node("representedOrganization", None, _name(node("part", {"value": organization}))),
        ),
    )
    party = node(
        "contactParty",
        None,
        node("id", {"root": contact_id}),
        coded("code", contact_type),
        status_code("active"),
        person,
    )
    return node("callBackContact", None, party)


def document_component(document_id: str, title: str, relative_path: str, digest: str) -> XmlNode:
    """Application ``component`` carrying one document body and its integrity check."""
    text = node(
        "text",
        {"integrityCheckAlgorithm": INTEGRITY_CHECK_ALGORITHM},
        node("reference", {"value": relative_path}),
        node("integrityCheck", text=digest),
    )
    document = node(
        "document",
        None,
        node("id", {"root": document_id}),
        node("title", {"value": title}),
        text,
    )
    return node("component", None, document)


def keyword_reference(value: CodedValue) -> XmlNode:
    """``referencedBy`` entry pointing a context of use at a keyword code."""
    return node("referencedBy", {"typeCode": "REFR"}, node("keyword", None, coded("code", value)))


def keyword_definition(
    type_code: CodedValue,
    code: str,
    code_system: str,
    display_name: str,
) -> XmlNode:
    """Application-level ``referencedBy`` declaring one sender-defined keyword."""
    item = node(
        "item",
        {"code": code, "codeSystem": code_system},
        node("displayName", {"value": display_name}),
    )
    definition = node(
        "keywordDefinition",
        None,
        coded("code", type_code),
        status_code("active"),
        node("value", None, item),
    )
    return node("referencedBy", None, definition)


def context_of_use_component(
    context_id: str,
    section: CodedValue,
    status: Status,
    priority_number: int,
    document_id: Optional[str] = None,
    replaces_id: Optional[str] = None,
    keyword_refs: Optional[List[XmlNode]] = None,
) -> XmlNode:
    """
    Submission-unit ``component`` holding a priority number and one context of use.

    ``replacementOf`` is emitted when ``replaces_id`` is given; ``derivedFrom``
    only for active entries that have a document.
    """
    context = node(
        "contextOfUse",
        None,
        node("id", {"root": context_id}),
        coded("code", section),
        status_code(status),
    )
    if replaces_id:
        context.append(
            node(
                "replacementOf",
                {"typeCode": "RPLC"},
                node("relatedContextOfUse", None, node("id", {"root": replaces_id})),
            )
        )
    if status == "active" and document_id:
        context.append(node("derivedFrom", None, node("documentReference", None, node("id", {"root": document_id}))))
    context.extend(keyword_refs or [])

    return node("component", None, node("priorityNumber", {"value": priority_number}), context)
