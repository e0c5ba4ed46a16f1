"""Single-writer holder of the active interview Session."""

import logging
import time
import uuid
from typing import Optional, Sequence

from app.core.exceptions import NoActiveSessionError, SessionValidationError
from app.schemas.interview import Session, SetupFields, StorageLocation
from app.services.questions.extractor import CLIENT_DEFAULT_QUESTIONS

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Holds at most one Session.

    ``create`` replaces whatever session was active; ``clear`` returns to the
    "no active session" state used by the setup screen.
    """

    REQUIRED_FIELDS = ("job_description", "company", "position")

    def __init__(self, default_questions: Sequence[str] = CLIENT_DEFAULT_QUESTIONS):
        self.default_questions = tuple(default_questions)
        self._session: Optional[Session] = None

    @staticmethod
    def new_folder_id() -> str:
        """Timestamp-derived folder name, suffixed so two setups in one millisecond differ."""
        return f"interview-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"

    @property
    def current(self) -> Optional[Session]:
        return self._session

    def require(self) -> Session:
        if self._session is None:
            raise NoActiveSessionError("No interview session is active")
        return self._session

    @classmethod
    def validate_fields(cls, fields: SetupFields) -> None:
        missing = [name for name in cls.REQUIRED_FIELDS if not getattr(fields, name, "").strip()]
        if missing:
            raise SessionValidationError(
                f"Missing required setup fields: {', '.join(missing)}",
                {"fields": missing},
            )

    def create(
        self,
        fields: SetupFields,
        extracted_questions: Optional[Sequence[str]] = None,
        storage_location: Optional[StorageLocation] = None,
    ) -> Session:
        self.validate_fields(fields)

        custom = tuple(extracted_questions) if extracted_questions else None
        if storage_location is None:
            folder = self.new_folder_id()
            storage_location = StorageLocation(folder=folder, form_key=f"{folder}/setup.json")

        if self._session is not None:
            logger.info(f"Replacing active session {self._session.folder}")

        self._session = Session(
            job_description=fields.job_description,
            company=fields.company,
            position=fields.position,
            interview_type=fields.interview_type,
            storage_location=storage_location,
            questions=custom or self.default_questions,
            custom_questions=custom,
        )
        source = "custom" if custom else "default"
        logger.info(f"Session {storage_location.folder} created with {len(self._session.questions)} {source} questions")
        return self._session

    def clear(self) -> None:
        if self._session is not None:
            logger.info(f"Session {self._session.folder} discarded")
        self._session = None
