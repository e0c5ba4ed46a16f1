"""
Capability providers for capture and speech.

The interview logic only talks to these protocols. The browser-backed
implementations keep what the browser reported (permission results, the
recorded blob) and what it should do next (the utterance to speak).
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from app.core.exceptions import CaptureError

logger = logging.getLogger(__name__)


class CaptureProvider(Protocol):
    async def request_microphone(self) -> bool: ...

    async def request_camera(self) -> bool: ...

    async def begin(self) -> None: ...

    async def finish(self) -> bytes: ...


class SpeechPresenter(Protocol):
    def speak(self, text: str) -> None: ...

    def cancel(self) -> None: ...


class BrowserCaptureProvider:
    """
    Capture device living in the browser.

    Permission prompts happen client-side and are reported through
    ``report_permissions``; the recorded blob arrives with the stop request
    and is staged before the controller asks for it.
    """

    def __init__(self):
        self.microphone: Optional[bool] = None
        self.camera: Optional[bool] = None
        self._staged: Optional[bytes] = None

    def report_permissions(self, microphone: Optional[bool] = None, camera: Optional[bool] = None) -> None:
        if microphone is not None:
            self.microphone = microphone
        if camera is not None:
            self.camera = camera

    def stage(self, artifact: bytes) -> None:
        self._staged = artifact

    async def request_microphone(self) -> bool:
        return bool(self.microphone)

    async def request_camera(self) -> bool:
        return bool(self.camera)

    async def begin(self) -> None:
        self._staged = None

    async def finish(self) -> bytes:
        artifact, self._staged = self._staged, None
        if not artifact:
            raise CaptureError("No audio was received for this recording")
        return artifact


@dataclass(frozen=True)
class Utterance:
    id: int
    text: str


class BrowserSpeechPresenter:
    """Keeps the single utterance the browser should be speaking right now."""

    def __init__(self):
        self.current: Optional[Utterance] = None
        self._next_id = 1

    def speak(self, text: str) -> None:
        self.current = Utterance(id=self._next_id, text=text)
        self._next_id += 1

    def cancel(self) -> None:
        self.current = None
