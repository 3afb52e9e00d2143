from dataclasses import dataclass

import httpx

from link_extractor.config import Settings
from link_extractor.schemas import LinkFields
from link_extractor.services.ai.extraction import ExtractionGateway, build_gateway
from link_extractor.services.clipboard import Clipboard, MemoryClipboard
from link_extractor.services.history import HistoryCollection
from link_extractor.services.orchestrator import ExtractionOrchestrator
from link_extractor.services.record_store import RecordStore, build_link_store
from link_extractor.services.ui_state import CopyAcknowledgment, DeleteConfirmation


@dataclass
class Workspace:
    store: RecordStore[LinkFields]
    history: HistoryCollection[LinkFields]
    orchestrator: ExtractionOrchestrator
    copy_ack: CopyAcknowledgment
    delete_confirmation: DeleteConfirmation[LinkFields]
    clipboard: Clipboard


def build_workspace(
    settings: Settings,
    http: httpx.AsyncClient,
    *,
    gateway: ExtractionGateway | None = None,
    clipboard: Clipboard | None = None,
) -> Workspace:
    store = build_link_store(http, settings)
    history = HistoryCollection(store)
    return Workspace(
        store=store,
        history=history,
        orchestrator=ExtractionOrchestrator(gateway or build_gateway(settings), store, history),
        copy_ack=CopyAcknowledgment(),
        delete_confirmation=DeleteConfirmation(store, history),
        clipboard=clipboard or MemoryClipboard(),
    )
