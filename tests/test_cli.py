import json

import pytest
import yaml

from ectd_engine.cli import main
from ectd_engine.core.config_loader import default_config

from conftest import keyword, make_config


def test_print_schema(capsys):
    assert main(["--print-schema"]) == 0
    schema = json.loads(capsys.readouterr().out)
    assert schema["title"] == "eCTD 4.0 submission configuration"


def test_print_default(capsys):
    assert main(["--print-default"]) == 0
    assert json.loads(capsys.readouterr().out) == default_config()


def test_no_input_is_usage_error(capsys):
    assert main([]) == 2
    assert "ectd-generate" in capsys.readouterr().err


def test_default_and_input_conflict(tmp_path, capsys):
    assert main(["--default", "-i", str(tmp_path / "c.json")]) == 2


def test_unknown_flag_exits_with_usage():
    with pytest.raises(SystemExit) as exc_info:
        main(["--bogus"])
    assert exc_info.value.code == 2


def test_generate_default(tmp_path, capsys):
    assert main(["--default", "-o", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "generated successfully" in out
    assert (tmp_path / "NDA123456" / "1" / "submissionunit.xml").is_file()


def test_generate_from_yaml_without_samples(tmp_path):
    cfg = tmp_path / "config.yml"
    cfg.write_text(yaml.safe_dump(make_config(documents=[{"module": "m1", "type": "cover", "title": "C"}])))
    assert main(["-i", str(cfg), "-o", str(tmp_path / "out"), "--no-samples"]) == 0
    seq = tmp_path / "out" / "NDA123456" / "1"
    assert (seq / "sha256.txt").read_text() == ""
    assert list((seq / "m1").iterdir()) == []


def test_validate_only(tmp_path, capsys):
    good = tmp_path / "good.json"
    good.write_text(json.dumps(default_config()))
    assert main(["-i", str(good), "--validate-only"]) == 0
    assert "Configuration is valid." in capsys.readouterr().out

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps(make_config(application={"number": "x"})))
    assert main(["-i", str(bad), "--validate-only"]) == 1
    assert "/application/number:" in capsys.readouterr().err


def test_build_error_exit_code(tmp_path, capsys):
    cfg = tmp_path / "config.json"
    docs = [{"module": "m1", "type": "cover", "title": "C", "keywordRefs": ["NOPE"]}]
    cfg.write_text(json.dumps(make_config(documents=docs, keywords=[keyword("K1")])))
    assert main(["-i", str(cfg), "-o", str(tmp_path / "out")]) == 1
    assert "BUILD_001" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_missing_input_file(tmp_path, capsys):
    assert main(["-i", str(tmp_path / "absent.json")]) == 1
    assert "FS_003" in capsys.readouterr().err
