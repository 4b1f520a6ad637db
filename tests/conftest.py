import copy
import os

import pytest
from fastapi.testclient import TestClient

from ectd_engine.core.config_loader import default_config
from ectd_engine.core.schemas import SubmissionConfig
from ectd_engine.main import create_app


@pytest.fixture(scope="session", autouse=True)
def set_env(tmp_path_factory):
    # Keep the staging pool inside the pytest temp tree
    os.environ["ECTD_STAGING_DIR"] = str(tmp_path_factory.mktemp("staging"))
    os.environ.setdefault("ECTD_HASH_WORKERS", "2")
    os.environ.setdefault("LOG_LEVEL", "INFO")


@pytest.fixture()
def client():
    app = create_app()
    return TestClient(app)


def make_config(documents=None, keywords=None, contacts=None, **sections):
    """Minimal valid configuration dict; pass sections to override application/submission."""
    config = {
        "application": {"type": "NDA", "number": "123456", "sponsor": "Acme Pharma"},
        "submission": {"type": "original", "sequenceNumber": 1, "title": "Original Application"},
        "contacts": contacts if contacts is not None else {},
        "documents": documents if documents is not None else [],
        "keywords": keywords if keywords is not None else [],
    }
    for name, values in sections.items():
        config[name] = {**config[name], **values}
    return config


def keyword(code, type_="manufacturer", code_system="2.16.840.1.113883.9999.2", display_name=None):
    return {
        "type": type_,
        "code": code,
        "codeSystem": code_system,
        "displayName": display_name or f"Keyword {code}",
    }


@pytest.fixture()
def sample_config():
    return copy.deepcopy(default_config())


@pytest.fixture()
def sample_model(sample_config):
    return SubmissionConfig.model_validate(sample_config)
