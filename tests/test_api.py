import io
import zipfile
from pathlib import Path

from fastapi.testclient import TestClient

from ectd_engine.config import get_settings

from conftest import keyword, make_config


def _staging_entries():
    base = get_settings().staging_path()
    return list(base.iterdir()) if base.exists() else []


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_schema_and_default_config(client: TestClient):
    r = client.get("/schema")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert "application" in body["schema"]["properties"]

    d = client.get("/config/default")
    assert d.status_code == 200
    assert d.json()["application"]["number"] == "123456"


def test_validate_endpoint(client: TestClient, sample_config):
    ok = client.post("/validate", json=sample_config)
    assert ok.status_code == 200
    assert ok.json() == {"valid": True, "errors": []}

    sample_config["application"]["number"] = "12"
    sample_config["submission"]["sequenceNumber"] = -1
    bad = client.post("/validate", json=sample_config)
    assert bad.status_code == 200
    body = bad.json()
    assert body["valid"] is False
    assert {e["location"] for e in body["errors"]} == {"/application/number", "/submission/sequenceNumber"}


def test_generate_default_returns_zip(client: TestClient):
    r = client.post("/generate/default")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/zip"
    assert 'filename="123456_seq1.zip"' in r.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(r.content)) as archive:
        names = archive.namelist()
    assert "submissionunit.xml" in names
    assert "m5/bioavailability_study_report.pdf" in names
    assert _staging_entries() == []


def test_generate_custom_without_pdfs(client: TestClient):
    config = make_config(
        submission={"sequenceNumber": 2},
        documents=[{"module": "m1", "type": "cover", "title": "Cover"}],
    )
    r = client.post("/generate/custom", json={"config": config, "options": {"generatePDFs": False}})
    assert r.status_code == 200
    assert 'filename="123456_seq2.zip"' in r.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(r.content)) as archive:
        assert not any(name.endswith(".pdf") for name in archive.namelist())
        assert archive.read("sha256.txt") == b""
        assert b"us_submission_unit_type_4" in archive.read("submissionunit.xml")


def test_generate_custom_invalid_config_is_problem(client: TestClient):
    config = make_config(application={"number": "1"}, submission={"type": "unknown"})
    r = client.post("/generate/custom", json={"config": config})
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("application/problem+json")
    body = r.json()
    assert body["errorCode"] == "CONFIG_001"
    assert body["status"] == 400
    assert {e["location"] for e in body["errors"]} == {"/application/number", "/submission/type"}
    assert _staging_entries() == []


def test_generate_custom_unresolved_keyword_is_422(client: TestClient):
    config = make_config(
        documents=[{"module": "m3", "type": "drug_product", "title": "Product", "keywordRefs": ["MISSING"]}],
        keywords=[keyword("K1")],
    )
    r = client.post("/generate/custom", json={"config": config})
    assert r.status_code == 422
    body = r.json()
    assert body["errorCode"] == "BUILD_001"
    assert body["errors"][0]["location"] == "/documents/0/keywordRefs"
    assert "MISSING" in body["errors"][0]["message"]
    assert _staging_entries() == []


def test_generate_custom_rejects_server_file_paths(client: TestClient, tmp_path: Path):
    secret = tmp_path / "server_secret.txt"
    secret.write_bytes(b"server-only data")
    config = make_config(
        documents=[
            {"module": "m1", "type": "cover", "title": "Cover"},
            {"module": "m1", "type": "cover", "title": "Leak", "filePath": str(secret)},
        ],
    )
    r = client.post("/generate/custom", json={"config": config})
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("application/problem+json")
    body = r.json()
    assert body["errorCode"] == "CONFIG_001"
    assert [e["location"] for e in body["errors"]] == ["/documents/1/filePath"]
    assert b"server-only data" not in r.content
    assert _staging_entries() == []


def test_validate_endpoint_rejects_file_paths(client: TestClient, sample_config):
    sample_config["documents"][0]["filePath"] = "/etc/hostname"
    r = client.post("/validate", json=sample_config)
    assert r.status_code == 200
    body = r.json()
    assert body["valid"] is False
    assert [e["location"] for e in body["errors"]] == ["/documents/0/filePath"]


def test_metrics_endpoint(client: TestClient):
    client.post("/generate/default")
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "ectd_submissions_generated_total" in r.text
    assert "ectd_documents_total" in r.text
