class RemoteError(Exception):
    """Raised for any failed record-store call; the message is the raw response body."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ExtractionError(Exception):
    """Raised when the extraction capability fails or returns an unusable shape."""


class ExtractionInProgressError(RuntimeError):
    pass


class ClipboardUnavailableError(Exception):
    pass
