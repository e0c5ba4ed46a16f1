"""
Shared fixtures for the mock interview tests.
"""
import json
import logging

import pytest

from app.schemas.interview import SetupFields
from app.services.questions.generator import QuestionService
from app.services.recording.states import RecordingLedger
from app.services.recording.uploads import UploadCoordinator
from app.tests.fakes import FakeCapture, FakeGenerator, FakeSpeech, FakeStorage

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def capture():
    return FakeCapture()


@pytest.fixture
def speech():
    return FakeSpeech()


@pytest.fixture
def ledger():
    return RecordingLedger()


@pytest.fixture
def uploads(ledger, storage):
    coordinator = UploadCoordinator(ledger, storage)
    coordinator.bind("interview-test")
    return coordinator


@pytest.fixture
def setup_fields():
    return SetupFields(
        job_description="Build and operate Python data pipelines.",
        company="Acme",
        position="Data Engineer",
    )


@pytest.fixture
def ai_questions():
    return ["What is an idempotent pipeline?", "How do you backfill data safely?"]


@pytest.fixture
def question_service(ai_questions):
    return QuestionService(FakeGenerator(reply=f"Here you go: {json.dumps(ai_questions)}"))
