"""
Recover an ordered list of interview questions from a model reply.

Replies are free text: sometimes a clean JSON array, sometimes an array buried
in a sentence, sometimes a numbered list. Each strategy below is a pure
function returning a list of questions, or None when it does not apply.
QuestionExtractor runs them in order and keeps the first non-empty result.
"""
import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

Strategy = Callable[[Any], Optional[List[str]]]

SERVER_DEFAULT_QUESTIONS = (
    "Tell me about your background and experience.",
    "Why are you interested in this position?",
    "Describe a challenging situation you faced at work and how you handled it.",
    "What are your greatest professional strengths?",
    "Do you have any questions about the role or company?",
)

CLIENT_DEFAULT_QUESTIONS = (
    "Tell us about yourself.",
    "Why do you want this job?",
    "Describe a challenge you faced and how you handled it.",
)

MAX_FALLBACK_QUESTIONS = 5

# First "[" to last "]" so brackets inside a question do not end the match early
_WIDEST_BRACKETS = re.compile(r"\[([\s\S]*)\]")
# Line breaks, or a closing quote + comma + opening quote of the same kind
_QUOTED_ITEM_DELIMITER = re.compile(r"\n|\"\s*,\s*\"|'\s*,\s*'")
_TOKEN_TRIM = re.compile(r"^[\"'\s,]+|[\"'\s,]+$")
_NUMBERED_OR_BLANK = re.compile(r"\d+\.\s|\n+")


def _coerce_items(items: Sequence[Any]) -> List[str]:
    """Turn JSON array elements into question strings, dropping blanks."""
    questions = []
    for item in items:
        if isinstance(item, Mapping):
            item = item.get("question") or item.get("text")
        if item is None:
            continue
        text = str(item).strip()
        if text:
            questions.append(text)
    return questions


def _clean_tokens(tokens: Sequence[str]) -> List[str]:
    cleaned = (_TOKEN_TRIM.sub("", token) for token in tokens)
    return [token for token in cleaned if token]


# --- Strategies ---

def from_sequence(raw: Any) -> Optional[List[str]]:
    """Already a list of questions: returned as is."""
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        return None
    if all(isinstance(item, str) for item in raw):
        return list(raw)
    return _coerce_items(raw)


def from_json_document(raw: Any) -> Optional[List[str]]:
    """The whole reply is a JSON array."""
    if not isinstance(raw, str):
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None
    return _coerce_items(parsed)


def from_bracket_json(raw: Any) -> Optional[List[str]]:
    """A JSON array embedded in surrounding prose."""
    if not isinstance(raw, str):
        return None
    match = _WIDEST_BRACKETS.search(raw)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None
    return _coerce_items(parsed)


def from_bracket_split(raw: Any) -> Optional[List[str]]:
    """Bracketed but not valid JSON: split the interior on lines or quote delimiters."""
    if not isinstance(raw, str):
        return None
    match = _WIDEST_BRACKETS.search(raw)
    if not match:
        return None
    return _clean_tokens(_QUOTED_ITEM_DELIMITER.split(match.group(1)))


def from_numbered_list(raw: Any, limit: int = MAX_FALLBACK_QUESTIONS) -> Optional[List[str]]:
    """No brackets at all: split on "1. " style numbering or line breaks."""
    if not isinstance(raw, str) or _WIDEST_BRACKETS.search(raw):
        return None
    parts = (part.strip() for part in _NUMBERED_OR_BLANK.split(raw))
    return [part for part in parts if part][:limit]


def from_lines(raw: Any, limit: int = MAX_FALLBACK_QUESTIONS) -> Optional[List[str]]:
    """Recovery after a strategy blew up: plain lines minus the model's preamble."""
    if not isinstance(raw, str):
        raw = str(raw)
    lines = (line.strip() for line in raw.split("\n"))
    return [
        line for line in lines
        if line and not line.startswith("Here are") and "questions" not in line
    ][:limit]


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    from_sequence,
    from_json_document,
    from_bracket_json,
    from_bracket_split,
    from_numbered_list,
)


def unwrap_envelope(raw: Any) -> Any:
    """
    Peel a process-resume response down to its question payload.

    Accepts ``{"statusCode": 200, "body": {"interview_questions": ...}}``,
    ``{"body": {...}}`` or ``{"interview_questions": ...}``. Mappings without
    either key unwrap to None.
    """
    while isinstance(raw, Mapping):
        if "body" in raw:
            raw = raw["body"]
        elif "interview_questions" in raw:
            raw = raw["interview_questions"]
        else:
            return None
    return raw


class QuestionExtractor:
    """
    Ordered chain of extraction strategies with a default list as the floor.

    ``try_extract`` may return an empty list (the caller picks defaults);
    ``extract`` always returns at least the defaults. Neither raises.
    """

    def __init__(
        self,
        defaults: Sequence[str] = SERVER_DEFAULT_QUESTIONS,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        recovery: Optional[Strategy] = from_lines,
    ):
        self.defaults = tuple(defaults)
        self.strategies = tuple(strategies)
        self.recovery = recovery

    def try_extract(self, raw: Any) -> List[str]:
        try:
            payload = unwrap_envelope(raw)
        except Exception as e:
            logger.warning(f"Could not unwrap question payload: {e}")
            return []
        if payload is None:
            return []
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8", errors="replace")

        failed = False
        for strategy in self.strategies:
            try:
                questions = strategy(payload)
            except Exception as e:
                logger.warning(f"Question extraction strategy {strategy.__name__} failed: {e}")
                failed = True
                continue
            if questions:
                logger.debug(f"Extracted {len(questions)} questions via {strategy.__name__}")
                return questions

        if failed and self.recovery is not None:
            try:
                questions = self.recovery(payload)
            except Exception as e:
                logger.error(f"Question extraction recovery failed: {e}")
                return []
            if questions:
                logger.info(f"Recovered {len(questions)} questions by line splitting")
                return questions

        return []

    def extract(self, raw: Any) -> List[str]:
        questions = self.try_extract(raw)
        if not questions:
            logger.info("No questions extracted, using default list")
            return list(self.defaults)
        return questions


_server_extractor = QuestionExtractor()


def extract_questions(raw: Any) -> List[str]:
    """Extract questions from a model reply, falling back to the five server defaults."""
    return _server_extractor.extract(raw)
