"""
Question sourcing.

- extractor.py: strategy chain turning model replies into question lists
- generator.py: Gemini call and the always-200 process-resume service
"""

from .extractor import (
    CLIENT_DEFAULT_QUESTIONS,
    SERVER_DEFAULT_QUESTIONS,
    QuestionExtractor,
    extract_questions,
)
from .generator import QuestionGenerator, QuestionService

__all__ = [
    'CLIENT_DEFAULT_QUESTIONS',
    'SERVER_DEFAULT_QUESTIONS',
    'QuestionExtractor',
    'extract_questions',
    'QuestionGenerator',
    'QuestionService',
]
