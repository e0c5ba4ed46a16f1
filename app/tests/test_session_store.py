import pytest
from pydantic import ValidationError

from app.core.exceptions import NoActiveSessionError, SessionValidationError
from app.schemas.interview import SetupFields, StorageLocation
from app.services.questions.extractor import CLIENT_DEFAULT_QUESTIONS
from app.services.session.store import SessionStore


def test_create_without_questions_uses_client_defaults(setup_fields):
    store = SessionStore()

    session = store.create(setup_fields, None)

    assert session.questions == CLIENT_DEFAULT_QUESTIONS
    assert session.custom_questions is None
    assert session.folder.startswith("interview-")
    assert session.storage_location.form_key == f"{session.folder}/setup.json"
    assert session.storage_location.resume_key == "None"
    assert store.current is session


def test_create_keeps_extracted_questions(setup_fields):
    session = SessionStore().create(setup_fields, ["Q1?", "Q2?"])

    assert session.questions == ("Q1?", "Q2?")
    assert session.custom_questions == ("Q1?", "Q2?")


def test_empty_extraction_means_defaults(setup_fields):
    session = SessionStore().create(setup_fields, [])
    assert session.questions == CLIENT_DEFAULT_QUESTIONS
    assert session.custom_questions is None


def test_create_uses_given_storage_location(setup_fields):
    location = StorageLocation(folder="interview-1", form_key="interview-1/setup.json", resume_key="interview-1/cv.pdf")
    session = SessionStore().create(setup_fields, None, location)
    assert session.storage_location == location


@pytest.mark.parametrize("blank", ["job_description", "company", "position"])
def test_blank_required_fields_are_rejected(setup_fields, blank):
    fields = setup_fields.model_copy(update={blank: "   "})
    store = SessionStore()

    with pytest.raises(SessionValidationError) as excinfo:
        store.create(fields, None)

    assert excinfo.value.details == {"fields": [blank]}
    assert store.current is None


def test_session_is_immutable(setup_fields):
    session = SessionStore().create(setup_fields, None)
    with pytest.raises(ValidationError):
        session.questions = ("changed",)


def test_create_replaces_prior_session(setup_fields):
    store = SessionStore()
    first = store.create(setup_fields, None)
    second = store.create(setup_fields, ["Only question?"])

    assert store.current is second
    assert first.folder != second.folder


def test_clear_discards_session(setup_fields):
    store = SessionStore()
    store.create(setup_fields, None)

    store.clear()

    assert store.current is None
    with pytest.raises(NoActiveSessionError):
        store.require()


def test_session_serializes_with_wire_names(setup_fields):
    session = SessionStore().create(setup_fields, None)
    data = session.model_dump(by_alias=True, mode="json")
    assert data["jobDescription"] == setup_fields.job_description
    assert data["s3Location"]["folder"] == session.folder
    assert data["customQuestions"] is None
    assert data["interviewType"] == {"behavioral": False, "technical": False}


def test_setup_fields_accept_browser_names():
    fields = SetupFields.model_validate({
        "jobDescription": "JD",
        "company": "Acme",
        "position": "Dev",
        "interviewType": {"behavioral": True},
    })
    assert fields.interview_type.behavioral is True
    assert fields.interview_type.technical is False
