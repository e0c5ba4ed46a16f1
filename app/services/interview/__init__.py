"""
Interview stage orchestration.

- flow.py: question index progression and question presentation
- manager.py: setup -> interview -> setup lifecycle
- resume_validator.py: resume upload checks
"""

from .flow import InterviewFlowController
from .manager import InterviewContext, InterviewManager
from .resume_validator import ResumeValidator, UploadedResume

__all__ = [
    'InterviewFlowController',
    'InterviewContext',
    'InterviewManager',
    'ResumeValidator',
    'UploadedResume',
]
