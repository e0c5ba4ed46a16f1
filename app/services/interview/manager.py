"""
Interview orchestration: setup stage -> interview stage -> back to setup.

Setup submission stores the form and resume in a fresh folder, asks the
question service for custom questions when a resume was given, and creates
the Session. Entering the interview stage wires up one ledger, upload
coordinator, recorder and flow controller for that session.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import NoActiveSessionError, StorageError
from app.core.logger import log_async_execution_time, set_session_id
from app.core.storage import ObjectStorage
from app.schemas.interview import (
    InterviewSnapshot,
    RecordingEntryView,
    Session,
    SetupFields,
    StorageLocation,
    UtteranceView,
)
from app.services.interview.flow import InterviewFlowController
from app.services.interview.resume_validator import ResumeValidator, UploadedResume
from app.services.providers import CaptureProvider, SpeechPresenter
from app.services.questions.extractor import CLIENT_DEFAULT_QUESTIONS, QuestionExtractor
from app.services.questions.generator import QuestionService
from app.services.recording.controller import RecordingController
from app.services.recording.states import RecordingLedger
from app.services.recording.uploads import UploadCoordinator
from app.services.session.store import SessionStore

logger = logging.getLogger(__name__)

SETUP_STAGE = "setup"
INTERVIEW_STAGE = "interview"

CAMERA_WARNING = "Camera access denied. Please enable permissions."
SETUP_UPLOAD_ERROR = "Error uploading files to S3. Please try again."


@dataclass
class InterviewContext:
    """Per-session components, discarded together on go-back."""
    session: Session
    ledger: RecordingLedger
    uploads: UploadCoordinator
    recorder: RecordingController
    flow: InterviewFlowController


class InterviewManager:
    """Owns the current stage and the components of the active interview."""

    def __init__(
        self,
        store: SessionStore,
        question_service: QuestionService,
        capture: CaptureProvider,
        speech: SpeechPresenter,
        storage: Optional[ObjectStorage] = None,
        extractor: Optional[QuestionExtractor] = None,
        validator: Optional[ResumeValidator] = None,
    ):
        self.store = store
        self.question_service = question_service
        self.capture = capture
        self.speech = speech
        self.storage = storage
        self.extractor = extractor or QuestionExtractor(defaults=CLIENT_DEFAULT_QUESTIONS)
        self.validator = validator or ResumeValidator(logger=logger)

        self.stage = SETUP_STAGE
        self.loading = False
        self.context: Optional[InterviewContext] = None
        self.camera_enabled = False
        self.camera_error: Optional[str] = None
        self.playback_index: Optional[int] = None

    # ------------------------------------------------------------------
    # Setup stage
    # ------------------------------------------------------------------

    @log_async_execution_time
    async def start_interview(self, fields: SetupFields, resume: Optional[UploadedResume] = None) -> Session:
        self.store.validate_fields(fields)
        if resume is not None:
            self.validator.validate(resume)

        self.loading = True
        try:
            folder = self.store.new_folder_id()
            set_session_id(folder)
            location, custom_questions = await self._prepare_session(folder, fields, resume)
            session = self.store.create(fields, custom_questions, location)
        finally:
            self.loading = False

        await self._enter_interview(session)
        return session

    async def _prepare_session(
        self,
        folder: str,
        fields: SetupFields,
        resume: Optional[UploadedResume],
    ) -> tuple[StorageLocation, list[str]]:
        form_key = f"{folder}/setup.json"
        form_data = fields.model_dump(by_alias=True)
        form_data["resumeFileName"] = resume.filename if resume else "None"

        resume_key = "None"
        try:
            await self._put_json(form_key, form_data)
            if resume is not None:
                resume_key = f"{folder}/{resume.filename}"
                await self._put_object(resume_key, resume.content, resume.content_type)
        except StorageError as e:
            logger.error(f"Upload failed: {e.message}")
            raise StorageError(SETUP_UPLOAD_ERROR, {"folder": folder, **e.details}) from e

        custom_questions: list[str] = []
        if resume is not None:
            custom_questions = await self._custom_questions(fields)

        location = StorageLocation(folder=folder, form_key=form_key, resume_key=resume_key)
        return location, custom_questions

    async def _custom_questions(self, fields: SetupFields) -> list[str]:
        logger.info("Processing resume via question service...")
        try:
            response = await self.question_service.process_resume(
                fields.job_description,
                fields.interview_type,
            )
        except Exception as e:
            logger.error(f"Question service error: {e}", exc_info=True)
            return []

        if response.statusCode != 200:
            return []
        if response.body.error:
            logger.warning(f"Question service fell back to defaults: {response.body.error}")
        return self.extractor.try_extract(response.model_dump())

    async def _put_json(self, key: str, data: dict) -> None:
        if self.storage is None:
            logger.warning(f"No object storage configured, not storing {key}")
            return
        await asyncio.to_thread(self.storage.put_json, key, data)

    async def _put_object(self, key: str, body: bytes, content_type: str) -> None:
        if self.storage is None:
            logger.warning(f"No object storage configured, not storing {key}")
            return
        await asyncio.to_thread(self.storage.put_object, key, body, content_type)

    # ------------------------------------------------------------------
    # Interview stage
    # ------------------------------------------------------------------

    async def _enter_interview(self, session: Session) -> None:
        if self.context is not None:
            self.context.uploads.cancel_all()

        ledger = RecordingLedger()
        uploads = UploadCoordinator(ledger, self.storage)
        uploads.bind(session.folder)
        recorder = RecordingController(self.capture, ledger, uploads, on_playback=self._play)
        flow = InterviewFlowController(session.questions, recorder, self.speech, on_go_back=self._discard)
        self.context = InterviewContext(session, ledger, uploads, recorder, flow)
        self.playback_index = None
        self.stage = INTERVIEW_STAGE

        await self.refresh_permissions()
        flow.begin()

    async def refresh_permissions(self) -> None:
        self.camera_enabled = await self.capture.request_camera()
        self.camera_error = None if self.camera_enabled else CAMERA_WARNING
        if self.context is not None:
            await self.context.recorder.request_permission()

    def require_context(self) -> InterviewContext:
        if self.context is None:
            raise NoActiveSessionError("No interview is in progress")
        return self.context

    async def start_recording(self) -> bool:
        context = self.require_context()
        return await context.recorder.start(context.flow.index)

    async def stop_recording(self) -> Optional[bytes]:
        return await self.require_context().recorder.stop()

    def next_question(self) -> bool:
        return self.require_context().flow.next()

    def recording(self, index: int) -> Optional[bytes]:
        context = self.require_context()
        if not 0 <= index < len(context.session.questions):
            return None
        entry = context.ledger.get(index)
        return entry.artifact if entry else None

    def go_back(self) -> None:
        if self.context is not None:
            self.context.flow.go_back()
        else:
            self._discard()

    def _discard(self) -> None:
        if self.context is not None:
            self.context.uploads.cancel_all()
        self.context = None
        self.store.clear()
        self.stage = SETUP_STAGE
        self.playback_index = None
        set_session_id(None)

    def _play(self, index: int, artifact: bytes) -> None:
        self.playback_index = index
        logger.debug(f"Q{index}: queued {len(artifact)} bytes for playback")

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def snapshot(self) -> InterviewSnapshot:
        snapshot = InterviewSnapshot(
            stage=self.stage,
            loading=self.loading,
            camera_error=self.camera_error,
        )
        if self.context is None:
            return snapshot

        flow = self.context.flow
        recorder = self.context.recorder
        utterance = getattr(self.speech, "current", None)
        snapshot.session = self.context.session
        snapshot.current_index = flow.index
        snapshot.question = flow.question
        snapshot.progress_label = flow.progress_label
        snapshot.next_label = flow.next_label
        snapshot.recorder_state = recorder.state.value
        snapshot.microphone_warning = recorder.warning
        snapshot.playback_index = self.playback_index
        snapshot.recordings = [
            RecordingEntryView(index=entry.index, status=entry.status.value, has_artifact=entry.artifact is not None)
            for entry in self.context.ledger.entries()
        ]
        if utterance is not None:
            snapshot.utterance = UtteranceView(id=utterance.id, text=utterance.text)
        return snapshot
