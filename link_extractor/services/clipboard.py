import logging
from typing import Protocol

from link_extractor.services.errors import ClipboardUnavailableError

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    async def read_text(self) -> str:
        ...

    async def write_text(self, text: str) -> None:
        ...


class MemoryClipboard:
    """Process-local clipboard shared by the API session."""

    def __init__(self, text: str | None = None) -> None:
        self._text = text

    async def read_text(self) -> str:
        if self._text is None:
            raise ClipboardUnavailableError("Clipboard is empty")
        return self._text

    async def write_text(self, text: str) -> None:
        self._text = text


async def read_clipboard(clipboard: Clipboard) -> str | None:
    try:
        return await clipboard.read_text()
    except ClipboardUnavailableError as exc:
        logger.debug("Clipboard read ignored: %s", exc)
        return None


async def write_clipboard(clipboard: Clipboard, text: str) -> bool:
    try:
        await clipboard.write_text(text)
    except ClipboardUnavailableError as exc:
        logger.debug("Clipboard write ignored: %s", exc)
        return False
    return True
