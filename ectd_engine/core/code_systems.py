"""
eCTD 4.0 code systems: FDA and ICH OIDs and code values.

Based on the ICH eCTD v4.0 IG v1.5 and the USFDA eCTD v4.0 IG v1.5.1. Every
lookup returns a ``CodedValue`` (code + code-system OID) ready to be written
as a ``code``/``codeSystem`` attribute pair.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel


class CodedValue(BaseModel):
    model_config = {"frozen": True}

    code: str
    codeSystem: str
    name: Optional[str] = None


class ImplementationGuide(BaseModel):
    model_config = {"frozen": True}

    root: str
    name: str


# Implementation guide identifiers (receiver device ids)
ICH_ECTD_V4_IG = ImplementationGuide(root="2.16.840.1.113883.3.989.2.2.1.11.4", name="ICH eCTD v4.0 IG v1.5")
USFDA_ECTD_V4_IG = ImplementationGuide(root="2.16.840.1.113883.3.989.5.1.2.2.1.18.6", name="USFDA eCTD v4.0 IG v1.5.1")
IMPLEMENTATION_GUIDES = (ICH_ECTD_V4_IG, USFDA_ECTD_V4_IG)


class CodeSystems:
    # ICH
    ICH_CTD_SECTIONS = "2.16.840.1.113883.3.989.2.2.1.1.4"
    ICH_DOCUMENT_TYPES = "2.16.840.1.113883.3.989.2.2.1.3.3"
    ICH_KEYWORD_TYPES = "2.16.840.1.113883.3.989.2.2.1.5.3"

    # US FDA
    US_APPLICATION_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.1.3"
    US_CTD_SECTIONS = "2.16.840.1.113883.3.989.5.1.2.2.1.2.5"
    US_KEYWORD_DEFINITION_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.3.2"
    US_FORM_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.5.5"
    US_SUBMISSION_CONTACT_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.11.2"
    US_SUBMISSION_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.12.4"
    US_SUBMISSION_UNIT_TYPES = "2.16.840.1.113883.3.989.5.1.2.2.1.13.1"
    US_APPLICATION_NUMBER = "2.16.840.1.113883.3.989.5.1.2.2.1.16.1"


def _coded(code: str, code_system: str, name: Optional[str] = None) -> CodedValue:
    return CodedValue(code=code, codeSystem=code_system, name=name)


APPLICATION_TYPES: Dict[str, CodedValue] = {
    "NDA": _coded("us_application_type_1", CodeSystems.US_APPLICATION_TYPES),
    "ANDA": _coded("us_application_type_2", CodeSystems.US_APPLICATION_TYPES),
    "BLA": _coded("us_application_type_3", CodeSystems.US_APPLICATION_TYPES),
    "IND": _coded("us_application_type_4", CodeSystems.US_APPLICATION_TYPES),
    "DMF": _coded("us_application_type_5", CodeSystems.US_APPLICATION_TYPES),
}

SUBMISSION_TYPES: Dict[str, CodedValue] = {
    "original": _coded("us_submission_type_1", CodeSystems.US_SUBMISSION_TYPES),
    "amendment": _coded("us_submission_type_2", CodeSystems.US_SUBMISSION_TYPES),
    "supplement": _coded("us_submission_type_3", CodeSystems.US_SUBMISSION_TYPES),
    "annual_report": _coded("us_submission_type_4", CodeSystems.US_SUBMISSION_TYPES),
}

SUBMISSION_UNIT_TYPES: Dict[str, CodedValue] = {
    "initial": _coded("us_submission_unit_type_3", CodeSystems.US_SUBMISSION_UNIT_TYPES),
    "amendment": _coded("us_submission_unit_type_4", CodeSystems.US_SUBMISSION_UNIT_TYPES),
}

CONTACT_TYPES: Dict[str, CodedValue] = {
    "regulatory": _coded("us_submission_contact_type_1", CodeSystems.US_SUBMISSION_CONTACT_TYPES),
    "technical": _coded("us_submission_contact_type_2", CodeSystems.US_SUBMISSION_CONTACT_TYPES),
}

FORM_TYPES: Dict[str, CodedValue] = {
    "356h": _coded("us_form_type_2", CodeSystems.US_FORM_TYPES),
    "2253": _coded("us_form_type_1", CodeSystems.US_FORM_TYPES),
}

# Application form whose context-of-use always references its form-type code
APPLICATION_FORM_DOCUMENT_TYPE = "356h"

# ICH keyword types (keywordDefinition codes)
KEYWORD_TYPES: Dict[str, CodedValue] = {
    "manufacturer": _coded("ich_keyword_type_3", CodeSystems.ICH_KEYWORD_TYPES),
    "productName": _coded("ich_keyword_type_4", CodeSystems.ICH_KEYWORD_TYPES),
    "studyId": _coded("ich_keyword_type_8", CodeSystems.ICH_KEYWORD_TYPES),
}

# US keyword definition types (promotional materials)
US_KEYWORD_DEFINITION_TYPES: Dict[str, CodedValue] = {
    "materialId": _coded("us_keyword_definition_type_1", CodeSystems.US_KEYWORD_DEFINITION_TYPES),
    "issueDate": _coded("us_keyword_definition_type_2", CodeSystems.US_KEYWORD_DEFINITION_TYPES),
}

# Module 1 (US regional)
US_CTD_SECTIONS: Dict[str, CodedValue] = {
    "m1.1": _coded("us_1.1", CodeSystems.US_CTD_SECTIONS, "Forms"),
    "m1.2": _coded("us_1.2", CodeSystems.US_CTD_SECTIONS, "Cover Letter"),
    "m1.3": _coded("us_1.3", CodeSystems.US_CTD_SECTIONS, "Administrative Information"),
    "m1.4": _coded("us_1.4", CodeSystems.US_CTD_SECTIONS, "References"),
    "m1.14": _coded("us_1.14", CodeSystems.US_CTD_SECTIONS, "Labeling"),
    "m1.15": _coded("us_1.15", CodeSystems.US_CTD_SECTIONS, "Patent Information"),
}

# Modules 2-5 (ICH harmonized)
ICH_CTD_SECTIONS: Dict[str, CodedValue] = {
    # Module 2 - CTD summaries
    "m2.2": _coded("ich_2.2", CodeSystems.ICH_CTD_SECTIONS, "Introduction"),
    "m2.3": _coded("ich_2.3", CodeSystems.ICH_CTD_SECTIONS, "Quality Overall Summary"),
    "m2.4": _coded("ich_2.4", CodeSystems.ICH_CTD_SECTIONS, "Nonclinical Overview"),
    "m2.5": _coded("ich_2.5", CodeSystems.ICH_CTD_SECTIONS, "Clinical Overview"),
    "m2.6": _coded("ich_2.6", CodeSystems.ICH_CTD_SECTIONS, "Nonclinical Written and Tabulated Summaries"),
    "m2.7": _coded("ich_2.7", CodeSystems.ICH_CTD_SECTIONS, "Clinical Summary"),
    # Module 3 - Quality
    "m3.2.s": _coded("ich_3.2.s", CodeSystems.ICH_CTD_SECTIONS, "Drug Substance"),
    "m3.2.p": _coded("ich_3.2.p", CodeSystems.ICH_CTD_SECTIONS, "Drug Product"),
    "m3.2.p.2.2": _coded("ich_3.2.p.2.2", CodeSystems.ICH_CTD_SECTIONS, "Drug Product Description and Composition"),
    "m3.2.a": _coded("ich_3.2.a", CodeSystems.ICH_CTD_SECTIONS, "Appendices"),
    "m3.2.r": _coded("ich_3.2.r", CodeSystems.ICH_CTD_SECTIONS, "Regional Information"),
    "m3.3": _coded("ich_3.3", CodeSystems.ICH_CTD_SECTIONS, "Literature References"),
    # Module 4 - Nonclinical study reports
    "m4.2.1": _coded("ich_4.2.1", CodeSystems.ICH_CTD_SECTIONS, "Pharmacology"),
    "m4.2.2": _coded("ich_4.2.2", CodeSystems.ICH_CTD_SECTIONS, "Pharmacokinetics"),
    "m4.2.3": _coded("ich_4.2.3", CodeSystems.ICH_CTD_SECTIONS, "Toxicology"),
    # Module 5 - Clinical study reports
    "m5.2": _coded("ich_5.2", CodeSystems.ICH_CTD_SECTIONS, "Tabular Listing of All Clinical Studies"),
    "m5.3.1.1": _coded("ich_5.3.1.1", CodeSystems.ICH_CTD_SECTIONS, "BA/BE Studies"),
    "m5.3.1.2": _coded("ich_5.3.1.2", CodeSystems.ICH_CTD_SECTIONS, "Comparative BA/BE Studies"),
    "m5.3.3.1": _coded("ich_5.3.3.1", CodeSystems.ICH_CTD_SECTIONS, "Controlled Clinical Studies"),
    "m5.3.5.1": _coded("ich_5.3.5.1", CodeSystems.ICH_CTD_SECTIONS, "Efficacy and Safety Studies"),
    "m5.3.5.3": _coded("ich_5.3.5.3", CodeSystems.ICH_CTD_SECTIONS, "Reports of Analyses of Data"),
}

DOCUMENT_TYPE_TO_SECTION: Dict[str, str] = {
    # Module 1
    "356h": "m1.1",
    "cover": "m1.2",
    "2253": "m1.3",
    "labeling": "m1.14",
    # Module 3
    "product_info": "m3.2.p.2.2",
    "drug_substance": "m3.2.s",
    "drug_product": "m3.2.p",
    # Module 5
    "bioavailability": "m5.3.1.1",
    "bioequivalence": "m5.3.1.2",
    "clinical_study": "m5.3.5.1",
    "study_data": "m5.3.1.1",
}

# Used when a document type has no section mapping
DEFAULT_SECTION = US_CTD_SECTIONS["m1.2"]


def application_type_code(application_type: str) -> CodedValue:
    return APPLICATION_TYPES[application_type]


def submission_type_code(submission_type: str) -> CodedValue:
    return SUBMISSION_TYPES[submission_type]


def submission_unit_type_code(sequence_number: int) -> CodedValue:
    """The first sequence is the initial unit; every later one is an amendment unit."""
    if sequence_number == 1:
        return SUBMISSION_UNIT_TYPES["initial"]
    return SUBMISSION_UNIT_TYPES["amendment"]


def contact_type_code(role: str) -> CodedValue:
    return CONTACT_TYPES[role]


def form_type_code(document_type: str = APPLICATION_FORM_DOCUMENT_TYPE) -> CodedValue:
    return FORM_TYPES[document_type]


def keyword_type_code(keyword_type: str) -> Optional[CodedValue]:
    """
    Resolve a keyword type to its definition code.

    ICH keyword types are checked before the US promotional-material family.
    Returns None for an unknown type; callers must treat that as fatal.
    """
    return KEYWORD_TYPES.get(keyword_type) or US_KEYWORD_DEFINITION_TYPES.get(keyword_type)


def section_code(document_type: str) -> Optional[CodedValue]:
    """Get the CTD section for a document type, or None when it has no mapping."""
    section_key = DOCUMENT_TYPE_TO_SECTION.get(document_type)
    if not section_key:
        return None
    # US regional sections (module 1) take precedence over ICH ones
    return US_CTD_SECTIONS.get(section_key) or ICH_CTD_SECTIONS.get(section_key)
