import logging
import time
from typing import Any, Callable, Optional

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import AppError
from app.core.llm import create_genai_client
from app.core.prompts import generate_interview_questions_prompt
from app.schemas.interview import InterviewType, ProcessResumeBody, ProcessResumeResponse
from app.services.questions.extractor import QuestionExtractor, SERVER_DEFAULT_QUESTIONS

logger = logging.getLogger(__name__)


class QuestionGenerator:
    """
    Asks Gemini for interview questions and returns the raw reply text.

    The client is created lazily through ``client_factory`` so a missing API key
    surfaces as a call failure instead of an import-time crash.
    """

    def __init__(
        self,
        client: Any = None,
        client_factory: Optional[Callable[[], Any]] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self._client = client
        self._client_factory = client_factory or (lambda: create_genai_client(self.settings))

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    async def generate(self, job_description: str, interview_type: Optional[InterviewType] = None) -> str:
        prompt = generate_interview_questions_prompt(
            job_description,
            self.settings.QUESTION_COUNT,
            interview_type,
        )
        start_time = time.perf_counter()
        logger.info(f"[Question Generation] Gemini call starting ({self.settings.GEMINI_MODEL})")

        response = await self.client.aio.models.generate_content(
            model=self.settings.GEMINI_MODEL,
            contents=prompt,
        )
        text = response.text or ""

        elapsed = time.perf_counter() - start_time
        logger.info(f"[Question Generation] Completed in {elapsed:.2f}s ({len(text)} chars)")
        logger.debug(f"[Question Generation] Response preview: {text[:200]}...")
        return text


class QuestionService:
    """
    Backs POST /api/process-resume.

    Always answers with statusCode 200: any failure swaps in the default
    questions and reports the message in ``body.error``.
    """

    def __init__(self, generator: QuestionGenerator, extractor: Optional[QuestionExtractor] = None):
        self.generator = generator
        self.extractor = extractor or QuestionExtractor(defaults=SERVER_DEFAULT_QUESTIONS)

    @staticmethod
    def fallback(error: Any) -> ProcessResumeResponse:
        message = error.message if isinstance(error, AppError) else str(error)
        return ProcessResumeResponse(
            body=ProcessResumeBody(
                interview_questions=list(SERVER_DEFAULT_QUESTIONS),
                error=message,
            )
        )

    async def process_resume(
        self,
        job_description: str,
        interview_type: Optional[InterviewType] = None,
    ) -> ProcessResumeResponse:
        try:
            text = await self.generator.generate(job_description, interview_type)
        except Exception as e:
            logger.error(f"AI generation error: {e}", exc_info=True)
            return self.fallback(e)

        questions = self.extractor.extract(text)
        logger.info(f"Generated {len(questions)} interview questions")
        return ProcessResumeResponse(body=ProcessResumeBody(interview_questions=questions))
