from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic

import httpx
import pydantic

from link_extractor.config import Settings
from link_extractor.constants import RECORD_ID_PATTERN
from link_extractor.schemas import FieldsT, LinkFields, Record
from link_extractor.services.errors import RemoteError
from link_extractor.services.validation import require, validate_record_id

logger = logging.getLogger(__name__)


def extract_record_id(url: str | None) -> str | None:
    if not url:
        return None
    match = RECORD_ID_PATTERN.search(url.strip())
    return match.group(1) if match else None


def create_record_url(base_url: str, app_id: str, record_id: str) -> str:
    return f"{base_url.rstrip('/')}/apps/{app_id}/records/{record_id}"


def _parse_record(model: type[Record[FieldsT]], body: Any, *, record_id: str) -> Record[FieldsT]:
    if not isinstance(body, Mapping):
        raise RemoteError(f"Unexpected record payload for {record_id}: {body!r}")
    data = {key: value for key, value in body.items() if key != "id"}
    data["record_id"] = record_id
    if data.get("fields") is None:
        data["fields"] = {}
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise RemoteError(f"Unexpected record payload for {record_id}: {exc}") from exc


def records_from_keyed_mapping(payload: Any, model: type[Record[FieldsT]]) -> list[Record[FieldsT]]:
    """Turn the store's ``{id: body}`` listing into records carrying ``record_id``.

    The listing never embeds the id inside the body, so each key is injected
    explicitly. Mapping order is kept as retrieval order.
    """
    if not isinstance(payload, Mapping):
        raise RemoteError(f"Expected a mapping of records, got {type(payload).__name__}")
    return [_parse_record(model, body, record_id=str(record_id)) for record_id, body in payload.items()]


def _fields_payload(fields: pydantic.BaseModel | Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    if isinstance(fields, pydantic.BaseModel):
        if partial:
            return fields.model_dump(by_alias=True, exclude_unset=True)
        return fields.model_dump(by_alias=True, exclude_none=True)
    return dict(fields)


class RecordStore(ABC, Generic[FieldsT]):
    """CRUD over one record collection of a remote store."""

    @abstractmethod
    async def list(self) -> list[Record[FieldsT]]:
        ...

    @abstractmethod
    async def get(self, record_id: str) -> Record[FieldsT] | None:
        ...

    @abstractmethod
    async def create(self, fields: FieldsT | Mapping[str, Any]) -> Record[FieldsT]:
        ...

    @abstractmethod
    async def update(self, record_id: str, fields: FieldsT | Mapping[str, Any]) -> Record[FieldsT]:
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        ...


class LivingAppsRecordStore(RecordStore[FieldsT]):
    """Record collection ``/apps/{app_id}/records`` of a LivingApps-style REST API.

    Every operation is one round trip on the shared ``httpx.AsyncClient``; the
    client carries the base URL and the session credentials. Nothing is retried.
    """

    def __init__(self, http: httpx.AsyncClient, *, app_id: str, fields_model: type[FieldsT]) -> None:
        require(bool(app_id and app_id.strip()), "app_id is required")
        self._http = http
        self.app_id = app_id
        self.fields_model = fields_model
        self.record_model: type[Record[FieldsT]] = Record[fields_model]  # type: ignore[valid-type]
        self.collection_path = f"/apps/{app_id}/records"

    def _record_path(self, record_id: str) -> str:
        validate_record_id(record_id)
        return f"{self.collection_path}/{record_id}"

    async def _call(self, method: str, path: str, *, payload: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = await self._http.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise RemoteError(f"{exc.__class__.__name__}: {exc}") from exc
        if not response.is_success:
            raise RemoteError(response.text, status_code=response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteError(response.text or "Empty response body", status_code=response.status_code) from exc

    def _record_from_body(self, body: Any, *, fallback_id: str | None = None) -> Record[FieldsT]:
        record_id = None
        if isinstance(body, Mapping):
            record_id = body.get("id") or body.get("record_id")
        record_id = record_id or fallback_id
        if not record_id:
            raise RemoteError(f"Record payload carries no id: {body!r}")
        return _parse_record(self.record_model, body, record_id=str(record_id))

    async def list(self) -> list[Record[FieldsT]]:
        response = await self._call("GET", self.collection_path)
        return records_from_keyed_mapping(self._json(response), self.record_model)

    async def get(self, record_id: str) -> Record[FieldsT] | None:
        try:
            response = await self._call("GET", self._record_path(record_id))
        except RemoteError as exc:
            if exc.status_code == 404:
                return None
            raise
        return self._record_from_body(self._json(response), fallback_id=record_id)

    async def _locate_created(self, sent: dict[str, Any]) -> Record[FieldsT]:
        matches = [
            record
            for record in await self.list()
            if all(record.fields.model_dump(by_alias=True).get(key) == value for key, value in sent.items())
        ]
        if not matches:
            raise RemoteError("Create was acknowledged but the new record could not be found")
        return max(matches, key=lambda record: record.created_at)

    async def create(self, fields: FieldsT | Mapping[str, Any]) -> Record[FieldsT]:
        """POST the fields; a reply without an id is resolved by listing the collection."""
        sent = _fields_payload(fields, partial=False)
        response = await self._call("POST", self.collection_path, payload={"fields": sent})
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, Mapping) and (body.get("id") or body.get("record_id")):
            record = self._record_from_body(body)
        else:
            logger.warning("Create in app %s returned no record id, locating it by its fields", self.app_id)
            record = await self._locate_created(sent)
        logger.info("Created record %s in app %s", record.record_id, self.app_id)
        return record

    async def update(self, record_id: str, fields: FieldsT | Mapping[str, Any]) -> Record[FieldsT]:
        path = self._record_path(record_id)
        response = await self._call("PATCH", path, payload={"fields": _fields_payload(fields, partial=True)})
        return self._record_from_body(self._json(response), fallback_id=record_id)

    async def delete(self, record_id: str) -> bool:
        await self._call("DELETE", self._record_path(record_id))
        logger.info("Deleted record %s from app %s", record_id, self.app_id)
        return True


def build_http_client(settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    headers = {"Content-Type": "application/json"}
    if settings.record_store_session_cookie.strip():
        headers["Cookie"] = settings.record_store_session_cookie.strip()
    return httpx.AsyncClient(
        base_url=settings.record_store_url,
        headers=headers,
        timeout=settings.http_timeout_seconds,
        transport=transport,
    )


def build_link_store(http: httpx.AsyncClient, settings: Settings) -> LivingAppsRecordStore[LinkFields]:
    return LivingAppsRecordStore(http, app_id=settings.record_store_app_id, fields_model=LinkFields)
