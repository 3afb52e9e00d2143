import asyncio
import json
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx

from link_extractor.services.ai.extraction import ExtractionGateway
from link_extractor.services.errors import ClipboardUnavailableError

APP_ID = "699ef71749797b3e287a6ed8"
STORE_URL = "https://store.test/rest"


class FakeRecordStore:
    """In-memory record-store API served through ``httpx.MockTransport``."""

    def __init__(self, app_id: str = APP_ID) -> None:
        self.app_id = app_id
        self.records: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: tuple[int, str] | None = None
        self.fail_methods: set[str] | None = None
        self.echo_create = True
        self._counter = 0
        self._epoch = datetime(2024, 1, 1, tzinfo=UTC)

    @property
    def prefix(self) -> str:
        return f"/rest/apps/{self.app_id}/records"

    def _next_id(self) -> str:
        self._counter += 1
        return f"{self._counter:024x}"

    def _timestamp(self) -> str:
        return (self._epoch + timedelta(minutes=self._counter)).isoformat()

    def seed(self, *, created_at: str | None = None, record_id: str | None = None, **fields: Any) -> str:
        new_id = record_id or self._next_id()
        self.records[new_id] = {
            "createdat": created_at or self._timestamp(),
            "updatedat": None,
            "fields": fields,
        }
        return new_id

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def methods(self) -> list[str]:
        return [request.method for request in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None and (self.fail_methods is None or request.method in self.fail_methods):
            status, body = self.fail_with
            return httpx.Response(status, text=body)

        path = request.url.path
        if path == self.prefix:
            if request.method == "GET":
                return httpx.Response(200, json=self.records)
            if request.method == "POST":
                fields = json.loads(request.content)["fields"]
                record_id = self.seed(**fields)
                if not self.echo_create:
                    return httpx.Response(200, json={"success": True})
                return httpx.Response(200, json={"id": record_id, **self.records[record_id]})
        elif path.startswith(self.prefix + "/"):
            record_id = path[len(self.prefix) + 1 :]
            body = self.records.get(record_id)
            if body is None:
                return httpx.Response(404, text=f"Record {record_id} not found")
            if request.method == "GET":
                return httpx.Response(200, json={"id": record_id, **body})
            if request.method == "PATCH":
                fields = json.loads(request.content)["fields"]
                body["fields"].update(fields)
                body["updatedat"] = self._timestamp()
                return httpx.Response(200, json={"id": record_id, **body})
            if request.method == "DELETE":
                del self.records[record_id]
                return httpx.Response(200)
        return httpx.Response(405, text=f"Unsupported {request.method} {path}")


class StubGateway(ExtractionGateway):
    def __init__(self, payload: dict[str, Any] | None = None, *, error: Exception | None = None) -> None:
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.release: asyncio.Event | None = None

    async def extract(self, raw_text: str, output_schema: str) -> dict[str, Any]:
        self.calls.append((raw_text, output_schema))
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return dict(self.payload)


class BrokenClipboard:
    async def read_text(self) -> str:
        raise ClipboardUnavailableError("permission denied")

    async def write_text(self, text: str) -> None:
        raise ClipboardUnavailableError("permission denied")
