import logging
from typing import Callable, Optional

from app.core.exceptions import CaptureError
from app.services.providers import CaptureProvider
from app.services.recording.states import RecorderState, RecordingLedger
from app.services.recording.uploads import UploadCoordinator

logger = logging.getLogger(__name__)

MICROPHONE_WARNING = "Microphone access required for recording"

PlaybackCallback = Callable[[int, bytes], None]


class RecordingController:
    """
    Single-slot recorder: Idle -> Requesting -> Starting -> Recording -> Stopping -> Idle.

    A start while anything but Idle is rejected rather than queued. Each stop
    yields one artifact bound to the question that was active at start, which
    goes to playback and to the UploadCoordinator.
    """

    def __init__(
        self,
        capture: CaptureProvider,
        ledger: RecordingLedger,
        uploads: UploadCoordinator,
        on_playback: Optional[PlaybackCallback] = None,
    ):
        self.capture = capture
        self.ledger = ledger
        self.uploads = uploads
        self.on_playback = on_playback
        self.state = RecorderState.IDLE
        self.permission_granted = False
        self.warning: Optional[str] = None
        self.active_index: Optional[int] = None

    @property
    def is_recording(self) -> bool:
        return self.state is RecorderState.RECORDING

    async def request_permission(self) -> bool:
        granted = await self.capture.request_microphone()
        self.permission_granted = granted
        if granted:
            self.warning = None
        else:
            self.warning = MICROPHONE_WARNING
            logger.warning("Microphone permission denied")
        return granted

    async def start(self, question_index: int) -> bool:
        if self.state is not RecorderState.IDLE:
            logger.warning(f"Q{question_index}: start rejected, recorder is {self.state.value}")
            return False

        if not self.permission_granted:
            self.state = RecorderState.REQUESTING
            try:
                granted = await self.request_permission()
            finally:
                self.state = RecorderState.IDLE
            if not granted:
                return False

        self.state = RecorderState.STARTING
        try:
            await self.capture.begin()
            self.ledger.begin_take(question_index)
            self.active_index = question_index
            self.state = RecorderState.RECORDING
        finally:
            if self.state is RecorderState.STARTING:
                self.state = RecorderState.IDLE
        logger.info(f"Q{question_index}: recording started")
        return True

    async def stop(self) -> Optional[bytes]:
        if self.state is not RecorderState.RECORDING:
            logger.warning(f"Stop ignored, recorder is {self.state.value}")
            return None

        index = self.active_index
        self.state = RecorderState.STOPPING
        try:
            artifact = await self.capture.finish()
        except Exception as e:
            self.ledger.abandon_take(index)
            if isinstance(e, CaptureError):
                raise
            raise CaptureError(f"Recording for question {index + 1} could not be captured: {e}") from e
        finally:
            self.state = RecorderState.IDLE
            self.active_index = None

        self.ledger.store_take(index, artifact)
        logger.info(f"Q{index}: recording stopped ({len(artifact)} bytes)")

        if self.on_playback is not None:
            self.on_playback(index, artifact)
        self.uploads.upload(index, artifact)
        return artifact
