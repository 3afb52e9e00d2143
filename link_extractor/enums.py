from enum import Enum


class ExtractionState(str, Enum):
    idle = "idle"
    extracting = "extracting"
    succeeded = "succeeded"
    failed = "failed"


class CopyState(str, Enum):
    idle = "idle"
    copied = "copied"


class DeleteState(str, Enum):
    idle = "idle"
    pending = "pending"
    deleting = "deleting"
