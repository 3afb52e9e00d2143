import logging

from link_extractor.enums import ExtractionState
from link_extractor.schemas import ExtractionResult, LinkFields, LinkRecord
from link_extractor.services.ai.extraction import ExtractionGateway, extract_destination
from link_extractor.services.clipboard import Clipboard, read_clipboard
from link_extractor.services.errors import ExtractionError, ExtractionInProgressError, RemoteError
from link_extractor.services.history import HistoryCollection
from link_extractor.services.record_store import RecordStore
from link_extractor.services.validation import normalize_input

logger = logging.getLogger(__name__)


def resolve_destination(input_url: str, destination: str | None) -> str:
    cleaned = (destination or "").strip()
    return cleaned or input_url


class ExtractionOrchestrator:
    """Runs one extraction at a time: extract, persist, then refresh the history.

    ``succeeded`` and ``failed`` are resting states; only ``extracting`` blocks
    a new invocation.
    """

    def __init__(
        self,
        gateway: ExtractionGateway,
        store: RecordStore[LinkFields],
        history: HistoryCollection[LinkFields],
    ) -> None:
        self._gateway = gateway
        self._store = store
        self._history = history
        self.state = ExtractionState.idle
        self.input_text = ""
        self.error: str | None = None
        self.last_result: ExtractionResult | None = None

    @property
    def busy(self) -> bool:
        return self.state == ExtractionState.extracting

    def set_input(self, text: str) -> None:
        self.input_text = text
        self.error = None

    def clear_input(self) -> None:
        self.input_text = ""
        self.error = None
        self.last_result = None

    async def paste_from_clipboard(self, clipboard: Clipboard) -> bool:
        text = await read_clipboard(clipboard)
        if text is None:
            return False
        self.set_input(text)
        return True

    async def extract(self, text: str | None = None) -> LinkRecord | None:
        if self.busy:
            raise ExtractionInProgressError("An extraction is already in progress")
        raw = self.input_text if text is None else text
        input_url = normalize_input(raw)
        if not input_url:
            return None

        self.input_text = raw
        self.state = ExtractionState.extracting
        self.error = None
        self.last_result = None
        try:
            extraction = await extract_destination(self._gateway, input_url)
            extracted = resolve_destination(input_url, extraction.destination_url)
            self.last_result = ExtractionResult(input=input_url, extracted=extracted)
            record = await self._store.create(LinkFields(input_url=input_url, extracted_url=extracted))
        except (ExtractionError, RemoteError) as exc:
            self.state = ExtractionState.failed
            self.error = str(exc)
            logger.warning("Extraction failed for %s: %s", input_url, exc)
            raise
        except Exception as exc:
            self.state = ExtractionState.failed
            self.error = str(exc) or exc.__class__.__name__
            logger.exception("Unexpected extraction failure for %s", input_url)
            raise
        else:
            self.state = ExtractionState.succeeded
        finally:
            # cancellation
            if self.state == ExtractionState.extracting:
                self.state = ExtractionState.failed
                self.error = "Extraction was cancelled"
        self.input_text = ""
        await self._history.refresh()
        return record
