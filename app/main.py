import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.interview import interview_router
from app.core.config import settings
from app.core.exceptions import AppError, app_error_handler, global_exception_handler, http_exception_handler
from app.core.logger import setup_logger
from app.core.storage import ObjectStorage
from app.services.interview.manager import InterviewManager
from app.services.providers import BrowserCaptureProvider, BrowserSpeechPresenter
from app.services.questions.generator import QuestionGenerator, QuestionService
from app.services.session.store import SessionStore

# Setup logger with fresh log file on startup
setup_logger(clear_log=True, use_json=settings.LOG_JSON, log_level=logging.DEBUG if settings.DEBUG_MODE else logging.INFO)
logger = logging.getLogger(__name__)


def build_storage() -> Optional[ObjectStorage]:
    if not settings.S3_BUCKET:
        logger.warning("S3_BUCKET not configured, interview artifacts will not be stored")
        return None
    return ObjectStorage.from_settings(settings)


def create_app(
    question_service: Optional[QuestionService] = None,
    storage: Optional[ObjectStorage] = None,
    manager: Optional[InterviewManager] = None,
) -> FastAPI:
    """
    Build the application. Collaborators not passed in are created from settings at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup: Mock Interview")
        service = question_service or QuestionService(QuestionGenerator(settings=settings))
        interview_manager = manager or InterviewManager(
            store=SessionStore(),
            question_service=service,
            capture=BrowserCaptureProvider(),
            speech=BrowserSpeechPresenter(),
            storage=storage if storage is not None else build_storage(),
        )
        app.state.question_service = service
        app.state.interview_manager = interview_manager
        yield
        if interview_manager.context is not None:
            interview_manager.context.uploads.cancel_all()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Mock Interview",
        description="Mock interview sessions with generated questions and recorded answers.",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins for simplicity in development
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(interview_router, prefix="/api", tags=["interview"])
    return app


app = create_app()
