"""
Recording states and the per-question recording ledger.

Every question index owns one RecordingEntry. Entries only move along the
edges listed in ENTRY_TRANSITIONS; anything else raises
InvalidTransitionError.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from app.core.exceptions import InvalidTransitionError

logger = logging.getLogger(__name__)


class RecorderState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    STARTING = "starting"
    RECORDING = "recording"
    STOPPING = "stopping"


class EntryStatus(str, Enum):
    NONE = "none"
    RECORDING = "recording"
    RECORDED = "recorded"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


# Re-recording is allowed once a take exists, including while its upload is in flight
ENTRY_TRANSITIONS: Dict[EntryStatus, frozenset] = {
    EntryStatus.NONE: frozenset({EntryStatus.RECORDING}),
    EntryStatus.RECORDING: frozenset({EntryStatus.RECORDED, EntryStatus.NONE}),
    EntryStatus.RECORDED: frozenset({EntryStatus.UPLOADING, EntryStatus.RECORDING}),
    EntryStatus.UPLOADING: frozenset({EntryStatus.SUCCESS, EntryStatus.ERROR, EntryStatus.RECORDING}),
    EntryStatus.SUCCESS: frozenset({EntryStatus.RECORDING}),
    EntryStatus.ERROR: frozenset({EntryStatus.RECORDING}),
}


@dataclass
class RecordingEntry:
    index: int
    status: EntryStatus = EntryStatus.NONE
    artifact: Optional[bytes] = None
    attempt: int = 0  # bumped on every new take so stale upload results can be told apart


class RecordingLedger:
    """Per-question recording entries with a single active recording slot."""

    def __init__(self):
        self._entries: Dict[int, RecordingEntry] = {}

    def entry(self, index: int) -> RecordingEntry:
        if index not in self._entries:
            self._entries[index] = RecordingEntry(index=index)
        return self._entries[index]

    def get(self, index: int) -> Optional[RecordingEntry]:
        return self._entries.get(index)

    def status(self, index: int) -> EntryStatus:
        entry = self._entries.get(index)
        return entry.status if entry else EntryStatus.NONE

    def entries(self) -> List[RecordingEntry]:
        return [self._entries[i] for i in sorted(self._entries)]

    def active_recording(self) -> Optional[int]:
        for entry in self._entries.values():
            if entry.status is EntryStatus.RECORDING:
                return entry.index
        return None

    def transition(self, index: int, target: EntryStatus) -> RecordingEntry:
        entry = self.entry(index)
        if target not in ENTRY_TRANSITIONS[entry.status]:
            raise InvalidTransitionError(
                f"Q{index}: cannot move from {entry.status.value} to {target.value}",
                {"index": index, "from": entry.status.value, "to": target.value},
            )
        if target is EntryStatus.RECORDING:
            active = self.active_recording()
            if active is not None and active != index:
                raise InvalidTransitionError(
                    f"Q{index}: Q{active} is already recording",
                    {"index": index, "active": active},
                )
        logger.debug(f"Q{index}: {entry.status.value} -> {target.value}")
        entry.status = target
        return entry

    def begin_take(self, index: int) -> RecordingEntry:
        """Drop the previous artifact and mark the entry as recording."""
        entry = self.transition(index, EntryStatus.RECORDING)
        entry.artifact = None
        entry.attempt += 1
        return entry

    def store_take(self, index: int, artifact: bytes) -> RecordingEntry:
        entry = self.transition(index, EntryStatus.RECORDED)
        entry.artifact = artifact
        return entry

    def abandon_take(self, index: int) -> RecordingEntry:
        entry = self.transition(index, EntryStatus.NONE)
        entry.artifact = None
        return entry
