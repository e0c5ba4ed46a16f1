import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response

from app.api.deps import get_interview_manager, get_question_service
from app.core.config import settings
from app.core.exceptions import RecordingStateError
from app.schemas.interview import InterviewType, PermissionReport, ProcessResumeRequest, SetupFields
from app.services.interview.manager import InterviewManager
from app.services.interview.resume_validator import UploadedResume
from app.services.questions.generator import QuestionService

logger = logging.getLogger(__name__)

interview_router = APIRouter()


def _snapshot(manager: InterviewManager) -> dict:
    return manager.snapshot().model_dump(by_alias=True, mode="json")


@interview_router.post("/process-resume")
async def process_resume(
    request: Request,
    question_service: QuestionService = Depends(get_question_service),
):
    """
    Generates interview questions for a job description.
    Always answers 200; failures substitute the default questions and echo the error.
    """
    try:
        payload = ProcessResumeRequest.model_validate(await request.json())
    except Exception as e:
        logger.error(f"API error: {e}")
        return question_service.fallback(e).model_dump(exclude_none=True)

    if payload.bucket or payload.key:
        logger.info(f"Processing resume s3://{payload.bucket}/{payload.key}")
    response = await question_service.process_resume(payload.job_description, payload.interview_type)
    return response.model_dump(exclude_none=True)


@interview_router.post("/interview/setup")
async def setup_interview(
    jobDescription: str = Form(""),
    company: str = Form(""),
    position: str = Form(""),
    behavioral: bool = Form(False),
    technical: bool = Form(False),
    resume: Optional[UploadFile] = File(None),
    manager: InterviewManager = Depends(get_interview_manager),
):
    """
    Stores the setup form (and resume) under a new session folder and starts the interview.

    Flow:
    1. Validate fields and resume
    2. Upload setup.json and the resume
    3. Generate custom questions when a resume was provided
    4. Enter the interview stage
    """
    fields = SetupFields(
        job_description=jobDescription,
        company=company,
        position=position,
        interview_type=InterviewType(behavioral=behavioral, technical=technical),
    )

    uploaded = None
    if resume is not None and resume.filename:
        uploaded = UploadedResume(
            filename=resume.filename,
            content=await resume.read(),
            content_type=resume.content_type or "application/octet-stream",
        )

    await manager.start_interview(fields, uploaded)
    return _snapshot(manager)


@interview_router.get("/interview")
async def get_interview(manager: InterviewManager = Depends(get_interview_manager)):
    return _snapshot(manager)


@interview_router.post("/interview/permissions")
async def report_permissions(
    report: PermissionReport,
    manager: InterviewManager = Depends(get_interview_manager),
):
    """Records the browser's camera/microphone permission results."""
    report_to = getattr(manager.capture, "report_permissions", None)
    if report_to is not None:
        report_to(microphone=report.microphone, camera=report.camera)
    await manager.refresh_permissions()
    return _snapshot(manager)


@interview_router.post("/interview/recording/start")
async def start_recording(manager: InterviewManager = Depends(get_interview_manager)):
    if not await manager.start_recording():
        recorder = manager.require_context().recorder
        raise RecordingStateError(
            recorder.warning or f"Recorder is {recorder.state.value}, cannot start a new recording",
            {"recorderState": recorder.state.value},
        )
    return _snapshot(manager)


@interview_router.post("/interview/recording/stop")
async def stop_recording(
    audio: UploadFile = File(...),
    manager: InterviewManager = Depends(get_interview_manager),
):
    """Receives the recorded blob, stops the recorder and starts the upload."""
    context = manager.require_context()
    if not context.recorder.is_recording:
        raise RecordingStateError("No recording is in progress")

    stage = getattr(manager.capture, "stage", None)
    if stage is not None:
        stage(await audio.read())

    await manager.stop_recording()
    return _snapshot(manager)


@interview_router.get("/interview/recordings/{index}")
async def get_recording(index: int, manager: InterviewManager = Depends(get_interview_manager)):
    """Plays back the stored answer for one question."""
    artifact = manager.recording(index)
    if artifact is None:
        raise HTTPException(status_code=404, detail=f"No recording for question {index + 1}")
    return Response(content=artifact, media_type=settings.AUDIO_CONTENT_TYPE)


@interview_router.post("/interview/next")
async def next_question(manager: InterviewManager = Depends(get_interview_manager)):
    if not manager.next_question():
        raise RecordingStateError("Stop the recording before moving to the next question")
    return _snapshot(manager)


@interview_router.post("/interview/back")
async def go_back(manager: InterviewManager = Depends(get_interview_manager)):
    """Returns to setup, discarding the session. In-flight uploads are cancelled."""
    manager.go_back()
    return _snapshot(manager)
