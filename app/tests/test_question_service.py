"""
Tests for Gemini question generation and the always-200 process-resume service.
"""
from types import SimpleNamespace

from app.core.config import Settings
from app.core.prompts import generate_interview_questions_prompt
from app.schemas.interview import InterviewType
from app.services.questions.extractor import SERVER_DEFAULT_QUESTIONS
from app.services.questions.generator import QuestionGenerator, QuestionService
from app.tests.fakes import FakeGenerator


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.requests = []

    async def generate_content(self, model, contents):
        self.requests.append((model, contents))
        return SimpleNamespace(text=self.text)


def fake_genai_client(text):
    models = FakeModels(text)
    return SimpleNamespace(aio=SimpleNamespace(models=models)), models


async def test_generator_sends_prompt_to_configured_model():
    client, models = fake_genai_client('["Q1?"]')
    generator = QuestionGenerator(client=client, settings=Settings(GEMINI_MODEL="gemini-test", QUESTION_COUNT=3))

    text = await generator.generate("Backend engineer, Go and Postgres")

    assert text == '["Q1?"]'
    model, prompt = models.requests[0]
    assert model == "gemini-test"
    assert "Backend engineer, Go and Postgres" in prompt
    assert "generate 3 relevant interview questions" in prompt


def test_prompt_mentions_selected_interview_types():
    prompt = generate_interview_questions_prompt("JD", 5, InterviewType(behavioral=True, technical=True))
    assert "Focus on behavioral and technical questions." in prompt
    assert "Focus on" not in generate_interview_questions_prompt("JD", 5, InterviewType())


async def test_process_resume_returns_extracted_questions():
    service = QuestionService(FakeGenerator(reply='Here are the questions: ["What is your name?", "Describe a bug you fixed."]'))

    response = await service.process_resume("Any job")

    assert response.statusCode == 200
    assert response.body.interview_questions == ["What is your name?", "Describe a bug you fixed."]
    assert response.body.error is None


async def test_process_resume_substitutes_defaults_when_ai_rejects():
    service = QuestionService(FakeGenerator(error=RuntimeError("quota exhausted")))

    response = await service.process_resume("Any job")

    assert response.statusCode == 200
    assert response.body.interview_questions == list(SERVER_DEFAULT_QUESTIONS)
    assert response.body.error == "quota exhausted"


async def test_missing_api_key_is_reported_as_error():
    generator = QuestionGenerator(settings=Settings(GEMINI_API_KEY=""))
    service = QuestionService(generator)

    response = await service.process_resume("Any job")

    assert response.body.interview_questions == list(SERVER_DEFAULT_QUESTIONS)
    assert response.body.error == "GEMINI_API_KEY is not configured"


async def test_unparseable_reply_falls_back_to_defaults_without_error():
    service = QuestionService(FakeGenerator(reply="   "))

    response = await service.process_resume("Any job")

    assert response.body.interview_questions == list(SERVER_DEFAULT_QUESTIONS)
    assert response.body.error is None
