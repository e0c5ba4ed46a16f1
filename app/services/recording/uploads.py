"""Per-question uploads of recorded answers to object storage."""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from app.core.config import settings
from app.core.exceptions import InvalidTransitionError
from app.core.storage import ObjectStorage
from app.services.recording.states import EntryStatus, RecordingLedger

logger = logging.getLogger(__name__)


class UploadCoordinator:
    """
    Uploads one artifact per question index, tracking status in the ledger.

    Uploads never block navigation: ``upload`` schedules a task and returns it.
    One attempt per stop event; a failure leaves the entry in ``error``.
    """

    def __init__(
        self,
        ledger: RecordingLedger,
        storage: Optional[ObjectStorage],
        key_template: str = settings.AUDIO_KEY_TEMPLATE,
        content_type: str = settings.AUDIO_CONTENT_TYPE,
    ):
        self.ledger = ledger
        self.storage = storage
        self.key_template = key_template
        self.content_type = content_type
        self.folder: Optional[str] = None
        self._tasks: Dict[int, asyncio.Task] = {}
        # Uploads of earlier takes that are still running
        self._superseded: Set[asyncio.Task] = set()

    def bind(self, folder: Optional[str]) -> None:
        self.folder = folder

    @property
    def pending(self) -> Set[int]:
        return {index for index, task in self._tasks.items() if not task.done()}

    def _in_flight(self) -> List[asyncio.Task]:
        return [task for task in (*self._tasks.values(), *self._superseded) if not task.done()]

    def key_for(self, index: int) -> str:
        return self.key_template.format(folder=self.folder, index=index)

    def upload(self, index: int, artifact: bytes) -> Optional[asyncio.Task]:
        """Start uploading ``artifact`` for question ``index``; no-op without a destination."""
        if not self.folder or self.storage is None:
            logger.debug(f"Q{index}: no storage destination, skipping upload")
            return None

        entry = self.ledger.transition(index, EntryStatus.UPLOADING)
        task = asyncio.create_task(self._transfer(index, entry.attempt, self.key_for(index), artifact))
        previous = self._tasks.get(index)
        if previous is not None and not previous.done():
            self._superseded.add(previous)
            previous.add_done_callback(self._superseded.discard)
        self._tasks[index] = task
        return task

    async def _transfer(self, index: int, attempt: int, key: str, artifact: bytes) -> EntryStatus:
        try:
            await asyncio.to_thread(self.storage.put_object, key, artifact, self.content_type)
            outcome = EntryStatus.SUCCESS
        except asyncio.CancelledError:
            logger.info(f"Q{index}: upload to {key} cancelled")
            raise
        except Exception as e:
            logger.error(f"Q{index}: upload to {key} failed: {e}")
            outcome = EntryStatus.ERROR

        entry = self.ledger.entry(index)
        if entry.attempt != attempt:
            logger.info(f"Q{index}: ignoring upload result for superseded take {attempt}")
            return outcome
        try:
            self.ledger.transition(index, outcome)
        except InvalidTransitionError as e:
            logger.warning(f"Q{index}: upload finished in unexpected state: {e.message}")
            return outcome
        if outcome is EntryStatus.SUCCESS:
            logger.info(f"Q{index}: response saved to {key}")
        return outcome

    async def drain(self) -> Dict[int, EntryStatus]:
        """Wait for every in-flight upload and return the outcome per index."""
        tasks = {index: task for index, task in self._tasks.items() if not task.done()}
        superseded = [task for task in self._superseded if not task.done()]
        results = await asyncio.gather(*tasks.values(), *superseded, return_exceptions=True)
        return {
            index: result for index, result in zip(tasks, results)
            if isinstance(result, EntryStatus)
        }

    def cancel_all(self) -> None:
        """Signal every in-flight upload to stop and forget the destination."""
        pending = self.pending
        in_flight = self._in_flight()
        for task in in_flight:
            task.cancel()
        if in_flight:
            logger.info(f"Cancelled {len(in_flight)} in-flight upload(s) for questions {sorted(pending)}")
        self._tasks.clear()
        self._superseded.clear()
        self.folder = None
