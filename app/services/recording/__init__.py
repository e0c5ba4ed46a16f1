"""
Answer recording.

- states.py: recorder/entry enums and the per-question ledger
- controller.py: single-slot recording state machine
- uploads.py: per-question uploads to object storage
"""

from .states import EntryStatus, RecorderState, RecordingEntry, RecordingLedger
from .uploads import UploadCoordinator
from .controller import RecordingController

__all__ = [
    'EntryStatus',
    'RecorderState',
    'RecordingEntry',
    'RecordingLedger',
    'UploadCoordinator',
    'RecordingController',
]
