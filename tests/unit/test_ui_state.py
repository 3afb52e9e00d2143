import asyncio

import pytest

from link_extractor.enums import CopyState, DeleteState
from link_extractor.services.clipboard import MemoryClipboard
from link_extractor.services.errors import RemoteError
from link_extractor.services.ui_state import CopyAcknowledgment, DeleteConfirmation
from tests.helpers import BrokenClipboard


@pytest.mark.asyncio
async def test_copy_acknowledgment_expires():
    clipboard = MemoryClipboard()
    ack = CopyAcknowledgment(delay_seconds=0.05)

    assert await ack.copy("https://out.example", "last", clipboard) is True
    assert ack.is_copied("last")
    assert await clipboard.read_text() == "https://out.example"

    await asyncio.sleep(0.1)
    assert ack.state == CopyState.idle
    assert ack.copied_key is None


@pytest.mark.asyncio
async def test_newer_copy_preempts_pending_reset():
    clipboard = MemoryClipboard()
    ack = CopyAcknowledgment(delay_seconds=0.1)

    await ack.copy("https://a.example", "a", clipboard)
    await asyncio.sleep(0.06)
    await ack.copy("https://b.example", "b", clipboard)
    await asyncio.sleep(0.06)

    assert ack.is_copied("b")
    assert not ack.is_copied("a")

    await asyncio.sleep(0.1)
    assert ack.state == CopyState.idle


@pytest.mark.asyncio
async def test_copy_with_unavailable_clipboard_is_silent():
    ack = CopyAcknowledgment(delay_seconds=0.05)
    assert await ack.copy("https://a.example", "a", BrokenClipboard()) is False
    assert ack.state == CopyState.idle


@pytest.mark.asyncio
async def test_cancelled_delete_leaves_collection_unchanged(store, fake_store, history):
    fake_store.seed(eingabe_url="https://one.example")
    await history.refresh()
    confirmation = DeleteConfirmation(store, history)
    target = history.records[0]

    assert confirmation.request(target) is True
    assert confirmation.state == DeleteState.pending
    confirmation.cancel()

    assert confirmation.state == DeleteState.idle
    assert confirmation.target is None
    assert len(history) == 1
    assert [request.method for request in fake_store.requests] == ["GET"]


@pytest.mark.asyncio
async def test_confirmed_delete_removes_remote_and_local(store, fake_store, history):
    keep = fake_store.seed(eingabe_url="https://keep.example")
    drop = fake_store.seed(eingabe_url="https://drop.example")
    await history.refresh()
    confirmation = DeleteConfirmation(store, history)
    confirmation.request(history.get(drop))

    assert await confirmation.confirm() is True

    assert confirmation.state == DeleteState.idle
    assert confirmation.target is None
    assert drop not in fake_store.records
    assert [record.record_id for record in history.records] == [keep]


@pytest.mark.asyncio
async def test_failed_delete_still_returns_to_idle(store, fake_store, history):
    record_id = fake_store.seed(eingabe_url="https://one.example")
    await history.refresh()
    confirmation = DeleteConfirmation(store, history)
    confirmation.request(history.get(record_id))
    fake_store.fail_with = (500, "delete failed")

    with pytest.raises(RemoteError):
        await confirmation.confirm()

    assert confirmation.state == DeleteState.idle
    assert confirmation.target is None
    assert len(history) == 1


class GatedStore:
    def __init__(self, inner):
        self.inner = inner
        self.release = asyncio.Event()

    async def delete(self, record_id):
        await self.release.wait()
        return await self.inner.delete(record_id)


@pytest.mark.asyncio
async def test_request_is_ignored_while_deleting(store, fake_store, history):
    first = fake_store.seed(eingabe_url="https://one.example")
    second = fake_store.seed(eingabe_url="https://two.example")
    await history.refresh()
    gated = GatedStore(store)
    confirmation = DeleteConfirmation(gated, history)
    confirmation.request(history.get(first))

    pending = asyncio.create_task(confirmation.confirm())
    await asyncio.sleep(0)
    assert confirmation.state == DeleteState.deleting
    assert confirmation.request(history.get(second)) is False
    gated.release.set()
    assert await pending is True

    assert confirmation.state == DeleteState.idle
    assert history.get(second) is not None


@pytest.mark.asyncio
async def test_confirm_without_pending_target_does_nothing(store, fake_store, history):
    confirmation = DeleteConfirmation(store, history)
    assert await confirmation.confirm() is False
    assert fake_store.requests == []
