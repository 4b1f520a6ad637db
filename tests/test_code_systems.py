import pytest

from ectd_engine.core import code_systems
from ectd_engine.core.code_systems import CodeSystems


def test_submission_unit_type_initial_for_first_sequence():
    unit = code_systems.submission_unit_type_code(1)
    assert unit.code == "us_submission_unit_type_3"
    assert unit.codeSystem == CodeSystems.US_SUBMISSION_UNIT_TYPES


@pytest.mark.parametrize("sequence", [2, 3, 42])
def test_submission_unit_type_amendment_for_later_sequences(sequence):
    assert code_systems.submission_unit_type_code(sequence).code == "us_submission_unit_type_4"


def test_application_and_submission_types():
    assert code_systems.application_type_code("NDA").code == "us_application_type_1"
    assert code_systems.application_type_code("BLA").code == "us_application_type_3"
    assert code_systems.submission_type_code("annual_report").code == "us_submission_type_4"
    assert code_systems.submission_type_code("original").codeSystem == CodeSystems.US_SUBMISSION_TYPES


def test_contact_and_form_types():
    assert code_systems.contact_type_code("regulatory").code == "us_submission_contact_type_1"
    assert code_systems.contact_type_code("technical").code == "us_submission_contact_type_2"
    form = code_systems.form_type_code()
    assert form.code == "us_form_type_2"
    assert form.codeSystem == CodeSystems.US_FORM_TYPES


def test_keyword_types_cover_ich_and_promotional_families():
    assert code_systems.keyword_type_code("studyId").code == "ich_keyword_type_8"
    assert code_systems.keyword_type_code("manufacturer").codeSystem == CodeSystems.ICH_KEYWORD_TYPES
    material = code_systems.keyword_type_code("materialId")
    assert material.code == "us_keyword_definition_type_1"
    assert material.codeSystem == CodeSystems.US_KEYWORD_DEFINITION_TYPES


def test_unknown_keyword_type_has_no_code():
    assert code_systems.keyword_type_code("favouriteColour") is None


def test_section_lookup_prefers_regional_module_one():
    cover = code_systems.section_code("cover")
    assert cover.code == "us_1.2"
    assert cover.codeSystem == CodeSystems.US_CTD_SECTIONS

    ba = code_systems.section_code("bioavailability")
    assert ba.code == "ich_5.3.1.1"
    assert ba.codeSystem == CodeSystems.ICH_CTD_SECTIONS


def test_unmapped_document_type_has_no_section():
    assert code_systems.section_code("meeting_minutes") is None
    assert code_systems.DEFAULT_SECTION.code == "us_1.2"


def test_every_mapped_document_type_resolves():
    for document_type in code_systems.DOCUMENT_TYPE_TO_SECTION:
        assert code_systems.section_code(document_type) is not None, document_type
