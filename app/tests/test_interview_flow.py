import pytest

from app.services.interview.flow import InterviewFlowController
from app.services.recording.controller import RecordingController

QUESTIONS = ("First?", "Second?", "Third?")


@pytest.fixture
def recorder(capture, ledger, uploads):
    return RecordingController(capture, ledger, uploads)


@pytest.fixture
def flow(recorder, speech):
    return InterviewFlowController(QUESTIONS, recorder, speech)


def test_begin_presents_first_question(flow, speech):
    flow.begin()

    assert flow.index == 0
    assert flow.question == "First?"
    assert speech.spoken == ["First?"]
    assert flow.progress_label == "Question 1 of 3"


def test_next_advances_and_wraps(flow, speech):
    flow.begin()

    assert flow.next() is True
    assert flow.next() is True
    assert flow.index == 2
    assert flow.next() is True

    assert flow.index == 0
    assert speech.spoken == ["First?", "Second?", "Third?", "First?"]


def test_every_presentation_cancels_the_previous_utterance(flow, speech):
    flow.begin()
    flow.next()

    assert speech.cancels == 2
    assert speech.current.text == "Second?"


def test_next_label_marks_last_question(flow):
    flow.begin()
    assert flow.next_label == "Next Question →"
    flow.next()
    flow.next()
    assert flow.is_last_question is True
    assert flow.next_label == "Finish Interview"


async def test_next_is_blocked_while_recording(flow, recorder, speech):
    flow.begin()
    await recorder.start(flow.index)

    assert flow.next() is False
    assert flow.index == 0
    assert speech.spoken == ["First?"]

    await recorder.stop()
    await recorder.uploads.drain()
    assert flow.next() is True
    assert flow.index == 1


async def test_go_back_is_unconditional(recorder, speech):
    calls = []
    flow = InterviewFlowController(QUESTIONS, recorder, speech, on_go_back=lambda: calls.append(True))
    flow.begin()
    await recorder.start(0)

    flow.go_back()

    assert calls == [True]
    assert speech.current is None


def test_empty_question_list_is_rejected(recorder, speech):
    with pytest.raises(ValueError):
        InterviewFlowController((), recorder, speech)
