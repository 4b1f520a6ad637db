import itertools

import pytest

from ectd_engine.core.identifiers import generate_identifiers, generate_uuid, is_valid_uuid
from ectd_engine.core.schemas import SubmissionConfig

from conftest import make_config


def test_uuid_shape():
    value = generate_uuid()
    assert is_valid_uuid(value)
    assert value == value.lower()
    assert len(value) == 36


def test_one_identifier_per_entity(sample_model):
    ids = generate_identifiers(sample_model)
    assert len(ids.documents) == len(sample_model.documents)
    assert len(ids.contextsOfUse) == len(sample_model.documents)
    assert set(ids.contacts) == {"regulatory", "technical"}
    assert all(is_valid_uuid(v) for v in ids.all())


def test_identifiers_unique_even_for_identical_documents():
    doc = {"module": "m2", "type": "clinical_study", "title": "Same"}
    config = SubmissionConfig.model_validate(make_config(documents=[doc, dict(doc), dict(doc)]))
    ids = generate_identifiers(config)
    values = ids.all()
    assert len(values) == len(set(values))


def test_contacts_only_for_present_roles():
    contact = {"firstName": "Ana", "lastName": "Lee", "email": "ana@example.com"}
    config = SubmissionConfig.model_validate(make_config(contacts={"technical": contact}))
    ids = generate_identifiers(config)
    assert list(ids.contacts) == ["technical"]


def test_two_runs_differ(sample_model):
    first = generate_identifiers(sample_model)
    second = generate_identifiers(sample_model)
    assert first.submissionUnit != second.submissionUnit
    assert set(first.all()).isdisjoint(second.all())


def test_duplicate_factory_values_are_skipped():
    values = iter(["a", "a", "b", "c", "c", "d"])
    config = SubmissionConfig.model_validate(make_config())
    ids = generate_identifiers(config, factory=lambda: next(values))
    assert (ids.submissionUnit, ids.submission) == ("a", "b")


def test_stuck_factory_raises():
    config = SubmissionConfig.model_validate(make_config())
    constant = itertools.repeat("same")
    with pytest.raises(RuntimeError):
        generate_identifiers(config, factory=lambda: next(constant))
