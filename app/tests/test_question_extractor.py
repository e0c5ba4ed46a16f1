"""
Tests for the question extraction chain used on Gemini replies and on
process-resume responses.
"""
import pytest

from app.services.questions.extractor import (
    CLIENT_DEFAULT_QUESTIONS,
    SERVER_DEFAULT_QUESTIONS,
    QuestionExtractor,
    extract_questions,
    from_bracket_json,
    from_bracket_split,
    from_numbered_list,
)


def test_default_lists_have_expected_sizes():
    assert len(SERVER_DEFAULT_QUESTIONS) == 5
    assert len(CLIENT_DEFAULT_QUESTIONS) == 3


def test_array_embedded_in_prose():
    text = 'Here are the questions: ["What is your name?", "Describe a bug you fixed."]'
    assert extract_questions(text) == ["What is your name?", "Describe a bug you fixed."]


def test_code_fenced_array_keeps_order():
    text = '```json\n["Third?", "First?", "Second?"]\n```'
    assert extract_questions(text) == ["Third?", "First?", "Second?"]


def test_list_input_is_returned_unchanged():
    questions = ["  Why Python?", "What is a closure?"]
    assert extract_questions(questions) == questions


def test_process_resume_envelope_is_unwrapped():
    envelope = {"statusCode": 200, "body": {"interview_questions": '["A?", "B?"]'}}
    assert QuestionExtractor().try_extract(envelope) == ["A?", "B?"]


def test_envelope_without_questions_is_empty():
    assert QuestionExtractor().try_extract({"statusCode": 200, "body": {}}) == []


def test_nested_brackets_do_not_end_the_match():
    text = 'Sure: ["What does [1, 2] + [3] evaluate to?", "When would you use a deque?"] Good luck!'
    assert extract_questions(text) == [
        "What does [1, 2] + [3] evaluate to?",
        "When would you use a deque?",
    ]


def test_quoted_commas_survive_the_split_fallback():
    # Trailing comma makes the array invalid JSON
    text = '["Tell me about a time you failed, and what you learned", "Why us?",]'
    assert from_bracket_json(text) is None
    assert from_bracket_split(text) == [
        "Tell me about a time you failed, and what you learned",
        "Why us?",
    ]
    assert extract_questions(text) == [
        "Tell me about a time you failed, and what you learned",
        "Why us?",
    ]


def test_single_quoted_lines_inside_brackets():
    text = "[\n'How do you test async code?'\n'What is backpressure?'\n]"
    assert extract_questions(text) == ["How do you test async code?", "What is backpressure?"]


def test_object_elements_use_their_question_text():
    text = '[{"question": "What is CAP?"}, {"text": "Explain sharding."}, ""]'
    assert extract_questions(text) == ["What is CAP?", "Explain sharding."]


def test_numbered_list_is_split_and_truncated():
    text = "\n".join(f"{n}. Question number {n}?" for n in range(1, 8))
    assert extract_questions(text) == [f"Question number {n}?" for n in range(1, 6)]


def test_numbered_strategy_skips_bracketed_text():
    assert from_numbered_list("1. See [docs]") is None


def test_plain_lines_fall_back_to_newline_split():
    text = "Why this role?\n\nWhat motivates you?\nA\nB\nC\nD"
    result = extract_questions(text)
    assert result == ["Why this role?", "What motivates you?", "A", "B", "C"]
    assert len(result) <= 5


@pytest.mark.parametrize("raw", ["", "   \n  ", None, 42, {"unrelated": True}])
def test_unusable_input_falls_back_to_server_defaults(raw):
    assert extract_questions(raw) == list(SERVER_DEFAULT_QUESTIONS)


def test_try_extract_signals_defaults_with_empty_list():
    assert QuestionExtractor().try_extract("") == []


def test_strategy_failure_triggers_line_recovery():
    def broken(raw):
        raise ValueError("boom")

    extractor = QuestionExtractor(strategies=[broken])
    text = "Here are 2 picks:\nWhat is a race condition?\nList your interview questions\nHow do locks help?"
    assert extractor.extract(text) == ["What is a race condition?", "How do locks help?"]


def test_every_strategy_failing_returns_defaults():
    def broken(raw):
        raise RuntimeError("parser exploded")

    extractor = QuestionExtractor(strategies=[broken, broken], recovery=broken)
    assert extractor.extract('["never parsed"]') == list(SERVER_DEFAULT_QUESTIONS)


def test_returned_defaults_are_a_copy():
    extractor = QuestionExtractor(defaults=CLIENT_DEFAULT_QUESTIONS)
    first = extractor.extract("")
    first.append("mutated")
    assert extractor.extract("") == list(CLIENT_DEFAULT_QUESTIONS)
