from datetime import datetime
from typing import Generic, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from link_extractor.enums import CopyState, DeleteState, ExtractionState


class LinkFields(BaseModel):
    """Link fields keyed on the wire by the store app's field identifiers."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    input_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("eingabe_url", "input_url"),
        serialization_alias="eingabe_url",
    )
    extracted_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("original_link", "extracted_url"),
        serialization_alias="original_link",
    )


FieldsT = TypeVar("FieldsT", bound=BaseModel)


class Record(BaseModel, Generic[FieldsT]):
    record_id: str
    created_at: str = Field(validation_alias=AliasChoices("createdat", "created_at"))
    updated_at: str | None = Field(default=None, validation_alias=AliasChoices("updatedat", "updated_at"))
    fields: FieldsT


LinkRecord = Record[LinkFields]


class DestinationExtraction(BaseModel):
    destination_url: str | None = None


class ExtractionResult(BaseModel):
    input: str
    extracted: str


class ExtractRequest(BaseModel):
    input_url: str | None = None


class InputRequest(BaseModel):
    text: str = ""


class ExtractionStateResponse(BaseModel):
    state: ExtractionState
    input_text: str
    error: str | None = None
    last_result: ExtractionResult | None = None


class ExtractionResponse(BaseModel):
    started: bool
    result: ExtractionResult | None = None
    record: LinkRecord | None = None


class HistoryResponse(BaseModel):
    query: str
    total: int
    items: list[LinkRecord]
    error: str | None = None


class DeleteResponse(BaseModel):
    record_id: str
    deleted: bool


class CopyRequest(BaseModel):
    key: str = Field(min_length=1)
    text: str


class DeleteConfirmationRequest(BaseModel):
    record_id: str = Field(min_length=1)


class UiStateResponse(BaseModel):
    copy_state: CopyState
    copied_key: str | None = None
    delete_state: DeleteState
    delete_target: LinkRecord | None = None


class HealthResponse(BaseModel):
    status: Literal["ok"]
    timestamp: datetime
