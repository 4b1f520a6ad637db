import json

import pytest
import yaml

from ectd_engine.core.config_loader import (
    default_config,
    load_config,
    load_config_file,
    load_schema,
    read_config_file,
    validate_config,
)
from ectd_engine.core.errors import ConfigurationInvalidError, EctdErrorCode, FileSystemError

from conftest import keyword, make_config


def _locations(issues):
    return [i.location for i in issues]


def test_default_config_is_valid():
    assert validate_config(default_config()) == []
    config = load_config(default_config())
    assert config.application.number == "123456"
    assert len(config.documents) == 4
    assert len(config.keywords) == 3


def test_schema_is_draft_2020_12():
    schema = load_schema()
    assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert set(schema["required"]) == {"application", "submission"}


def test_all_violations_reported():
    config = make_config(
        application={"number": "12345", "type": "XYZ"},
        submission={"sequenceNumber": 0},
    )
    locations = _locations(validate_config(config))
    assert "/application/number" in locations
    assert "/application/type" in locations
    assert "/submission/sequenceNumber" in locations


def test_replace_without_target_fails():
    config = make_config(documents=[{"module": "m1", "type": "cover", "title": "Cover", "operation": "replace"}])
    issues = validate_config(config)
    assert issues
    assert issues[0].location == "/documents/0"
    assert "replacesId" in issues[0].message


def test_replace_target_must_be_uuid_shaped():
    doc = {"module": "m1", "type": "cover", "title": "Cover", "operation": "replace", "replacesId": "not-a-uuid"}
    assert _locations(validate_config(make_config(documents=[doc]))) == ["/documents/0/replacesId"]


def test_contact_email_required_and_shaped():
    contacts = {"regulatory": {"firstName": "A", "lastName": "B", "email": "nope"}}
    assert _locations(validate_config(make_config(contacts=contacts))) == ["/contacts/regulatory/email"]


def test_keyword_code_system_must_be_oid():
    issues = validate_config(make_config(keywords=[keyword("K1", code_system="urn:bad")]))
    assert _locations(issues) == ["/keywords/0/codeSystem"]


def test_duplicate_keyword_codes_rejected():
    issues = validate_config(make_config(keywords=[keyword("K1"), keyword("K1", "studyId")]))
    assert _locations(issues) == ["/keywords"]
    assert "K1" in issues[0].message


def test_non_object_rejected():
    issues = validate_config(["not", "a", "config"])
    assert _locations(issues) == ["/"]


def test_load_config_raises_with_every_issue():
    config = make_config(application={"number": "1"}, submission={"title": ""})
    with pytest.raises(ConfigurationInvalidError) as exc_info:
        load_config(config, source="test")
    err = exc_info.value
    assert err.code == EctdErrorCode.CONFIG_INVALID
    assert err.status_code == 400
    assert len(err.issues) == 2
    assert err.error_detail.context["source"] == "test"


def test_read_json_and_yaml(tmp_path):
    json_path = tmp_path / "config.json"
    json_path.write_text(json.dumps(default_config()), encoding="utf-8")
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text(yaml.safe_dump(default_config()), encoding="utf-8")

    assert read_config_file(json_path) == read_config_file(yaml_path) == default_config()
    assert load_config_file(yaml_path).submission.title == "Original Application"


def test_unparsable_file(tmp_path):
    p = tmp_path / "broken.json"
    p.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationInvalidError) as exc_info:
        read_config_file(p)
    assert exc_info.value.code == EctdErrorCode.CONFIG_PARSE_FAILED


def test_missing_file(tmp_path):
    with pytest.raises(FileSystemError) as exc_info:
        read_config_file(tmp_path / "absent.json")
    assert exc_info.value.code == EctdErrorCode.FS_READ_FAILED


def test_duplicate_codes_reported_alongside_schema_violations():
    config = make_config(application={"number": "12"}, keywords=[keyword("K1"), keyword("K1", "studyId")])
    issues = validate_config(config)
    assert set(_locations(issues)) == {"/application/number", "/keywords"}
    assert "K1" in next(i.message for i in issues if i.location == "/keywords")


def test_control_characters_rejected_wherever_they_appear():
    contacts = {"regulatory": {"firstName": "Jane\x0b", "lastName": "Smith", "email": "jane@sample.com"}}
    config = make_config(
        documents=[{"module": "m1", "type": "cover", "title": "bad\x01title"}],
        keywords=[keyword("K1", display_name="Site\x1f")],
        contacts=contacts,
        application={"sponsor": "Acme\x00"},
    )
    assert set(_locations(validate_config(config))) == {
        "/application/sponsor",
        "/contacts/regulatory/firstName",
        "/documents/0/title",
        "/keywords/0/displayName",
    }


def test_tabs_newlines_and_non_latin_text_accepted():
    config = make_config(
        documents=[{"module": "m1", "type": "cover", "title": "Cover\tLetter\nÉtude 試験"}],
    )
    assert validate_config(config) == []


def test_file_paths_rejected_only_when_disallowed():
    config = make_config(documents=[{"module": "m5", "type": "clinical_study", "title": "S", "filePath": "/x.pdf"}])
    assert validate_config(config) == []
    assert _locations(validate_config(config, allow_source_files=False)) == ["/documents/0/filePath"]
    with pytest.raises(ConfigurationInvalidError):
        load_config(config, allow_source_files=False)
