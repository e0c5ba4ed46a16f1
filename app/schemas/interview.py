from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# --- Shared/Base Models ---

class WireModel(BaseModel):
    """Base model accepting both snake_case names and the browser's camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)


class InterviewType(WireModel):
    """Independent interview focus flags; both may be off."""
    behavioral: bool = Field(default=False, description="Ask behavioral questions.")
    technical: bool = Field(default=False, description="Ask technical questions.")


class StorageLocation(WireModel):
    """Where one session's artifacts live in the bucket."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    folder: str = Field(..., description="Unique folder namespacing every artifact of the session.")
    form_key: str = Field(..., alias="formData", description="Key of the serialized setup fields.")
    resume_key: str = Field(default="None", alias="resume", description="Key of the uploaded resume or 'None'.")


# --- Setup / Session Models ---

class SetupFields(WireModel):
    """Fields submitted from the interview setup form."""
    job_description: str = Field(..., alias="jobDescription")
    company: str
    position: str
    interview_type: InterviewType = Field(default_factory=InterviewType, alias="interviewType")


class Session(WireModel):
    """
    One complete interview configuration.
    Frozen once created; a new setup submission replaces it instead of mutating it.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    job_description: str = Field(..., alias="jobDescription")
    company: str
    position: str
    interview_type: InterviewType = Field(..., alias="interviewType")
    storage_location: StorageLocation = Field(..., alias="s3Location")
    questions: tuple[str, ...] = Field(..., min_length=1)
    custom_questions: Optional[tuple[str, ...]] = Field(default=None, alias="customQuestions")

    @property
    def folder(self) -> str:
        return self.storage_location.folder


# --- Question Generation API Models ---

class ProcessResumeRequest(WireModel):
    """Body of POST /api/process-resume. Bucket and key are accepted for compatibility."""
    job_description: str = Field(..., alias="jobDescription")
    bucket: Optional[str] = None
    key: Optional[str] = None
    interview_type: Optional[InterviewType] = Field(default=None, alias="interviewType")


class ProcessResumeBody(WireModel):
    interview_questions: list[str] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Upstream failure message when defaults were substituted.")


class ProcessResumeResponse(WireModel):
    """Envelope always reporting statusCode 200; failures show up in body.error."""
    statusCode: int = 200
    body: ProcessResumeBody


# --- Frontend/API State Models ---

class PermissionReport(WireModel):
    """Permission results reported by the browser after getUserMedia prompts."""
    microphone: Optional[bool] = None
    camera: Optional[bool] = None


class RecordingEntryView(WireModel):
    index: int
    status: str
    has_artifact: bool = Field(default=False, alias="hasArtifact")


class UtteranceView(WireModel):
    id: int
    text: str


class InterviewSnapshot(WireModel):
    """Everything the interview screen renders."""
    stage: str
    loading: bool = False
    session: Optional[Session] = None
    current_index: Optional[int] = Field(default=None, alias="currentQuestion")
    question: Optional[str] = None
    progress_label: Optional[str] = Field(default=None, alias="progressLabel")
    next_label: Optional[str] = Field(default=None, alias="nextLabel")
    recorder_state: Optional[str] = Field(default=None, alias="recorderState")
    recordings: list[RecordingEntryView] = Field(default_factory=list)
    utterance: Optional[UtteranceView] = None
    microphone_warning: Optional[str] = Field(default=None, alias="microphoneWarning")
    camera_error: Optional[str] = Field(default=None, alias="cameraError")
    playback_index: Optional[int] = Field(default=None, alias="playbackIndex")
