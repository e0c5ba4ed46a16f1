from fastapi import Request

from app.core.logger import set_session_id
from app.services.interview.manager import InterviewManager
from app.services.questions.generator import QuestionService


async def get_interview_manager(request: Request) -> InterviewManager:
    """
    Dependency providing the interview manager built for this application instance.

    Tags the request's log records, and any upload task it starts, with the
    folder id of the interview in progress.
    """
    manager: InterviewManager = request.app.state.interview_manager
    set_session_id(manager.context.session.folder if manager.context else None)
    return manager


def get_question_service(request: Request) -> QuestionService:
    """Dependency providing the question service backing /process-resume."""
    return request.app.state.question_service
