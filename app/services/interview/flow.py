import logging
from typing import Callable, Optional, Sequence

from app.services.providers import SpeechPresenter
from app.services.recording.controller import RecordingController

logger = logging.getLogger(__name__)


class InterviewFlowController:
    """
    Walks the question list for one session.

    ``next`` wraps from the last question back to the first; the last
    question is only distinguished by the button label. Every index change
    supersedes the current utterance with the new question.
    """

    def __init__(
        self,
        questions: Sequence[str],
        recorder: RecordingController,
        speech: SpeechPresenter,
        on_go_back: Optional[Callable[[], None]] = None,
    ):
        if not questions:
            raise ValueError("An interview needs at least one question")
        self.questions = tuple(questions)
        self.recorder = recorder
        self.speech = speech
        self.on_go_back = on_go_back
        self.index = 0

    @property
    def question(self) -> str:
        return self.questions[self.index]

    @property
    def is_last_question(self) -> bool:
        return self.index == len(self.questions) - 1

    @property
    def next_label(self) -> str:
        return "Finish Interview" if self.is_last_question else "Next Question →"

    @property
    def progress_label(self) -> str:
        return f"Question {self.index + 1} of {len(self.questions)}"

    def begin(self) -> None:
        self.index = 0
        self._present()

    def next(self) -> bool:
        if self.recorder.is_recording:
            logger.info("Next question blocked while recording")
            return False
        self.index = (self.index + 1) % len(self.questions)
        self._present()
        return True

    def go_back(self) -> None:
        self.speech.cancel()
        if self.on_go_back is not None:
            self.on_go_back()

    def _present(self) -> None:
        self.speech.cancel()
        self.speech.speak(self.question)
        logger.info(f"Presenting {self.progress_label}")
