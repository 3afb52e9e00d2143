import asyncio
import logging
from typing import Generic

from link_extractor.constants import COPY_ACK_DELAY_SECONDS
from link_extractor.enums import CopyState, DeleteState
from link_extractor.schemas import FieldsT, Record
from link_extractor.services.clipboard import Clipboard, write_clipboard
from link_extractor.services.errors import RemoteError
from link_extractor.services.history import HistoryCollection
from link_extractor.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class CopyAcknowledgment:
    """Remembers the most recent successful copy until its reset timer fires."""

    def __init__(self, *, delay_seconds: float = COPY_ACK_DELAY_SECONDS) -> None:
        self.delay_seconds = delay_seconds
        self.state = CopyState.idle
        self.copied_key: str | None = None
        self._reset_handle: asyncio.TimerHandle | None = None

    def is_copied(self, key: str) -> bool:
        return self.state == CopyState.copied and self.copied_key == key

    async def copy(self, text: str, key: str, clipboard: Clipboard) -> bool:
        if not await write_clipboard(clipboard, text):
            return False
        self._cancel_reset()
        self.state = CopyState.copied
        self.copied_key = key
        self._reset_handle = asyncio.get_running_loop().call_later(self.delay_seconds, self.reset)
        return True

    def reset(self) -> None:
        self._cancel_reset()
        self.state = CopyState.idle
        self.copied_key = None

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None


class DeleteConfirmation(Generic[FieldsT]):
    """Pending-delete target awaiting the user's confirm or cancel."""

    def __init__(self, store: RecordStore[FieldsT], history: HistoryCollection[FieldsT]) -> None:
        self._store = store
        self._history = history
        self.state = DeleteState.idle
        self.target: Record[FieldsT] | None = None

    def request(self, record: Record[FieldsT]) -> bool:
        if self.state == DeleteState.deleting:
            return False
        self.state = DeleteState.pending
        self.target = record
        return True

    def cancel(self) -> None:
        if self.state == DeleteState.deleting:
            return
        self.state = DeleteState.idle
        self.target = None

    async def confirm(self) -> bool:
        if self.state != DeleteState.pending or self.target is None:
            return False
        record_id = self.target.record_id
        self.state = DeleteState.deleting
        try:
            deleted = await self._store.delete(record_id)
            if deleted:
                self._history.remove_locally(record_id)
            return deleted
        except RemoteError as exc:
            logger.warning("Delete of record %s failed: %s", record_id, exc.message)
            raise
        finally:
            self.state = DeleteState.idle
            self.target = None
