import json
import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import pydantic
from openai import AsyncOpenAI, OpenAIError

from link_extractor.config import Settings
from link_extractor.constants import (
    DESTINATION_SCHEMA,
    MAX_REDIRECT_DEPTH,
    REDIRECT_PARAMS,
    TRACKING_PARAM_PREFIXES,
    TRACKING_PARAMS,
)
from link_extractor.schemas import DestinationExtraction
from link_extractor.services.errors import ExtractionError

logger = logging.getLogger(__name__)


class ExtractionGateway(ABC):
    """Structured extraction of ``raw_text`` into the JSON shape described by ``output_schema``."""

    @abstractmethod
    async def extract(self, raw_text: str, output_schema: str) -> dict[str, Any]:
        ...


def _build_prompt(raw_text: str, output_schema: str) -> str:
    return (
        "Extract structured data from the input below.\n"
        "Return strictly one JSON object matching this shape, with no markdown or prose:\n"
        f"{output_schema}\n"
        "Input:\n"
        f"{raw_text}\n"
    )


def _parse_object(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"Extraction returned invalid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ExtractionError(f"Extraction returned {type(parsed).__name__}, expected a JSON object")
    return parsed


class OpenAIExtractionGateway(ExtractionGateway):
    def __init__(self, client: AsyncOpenAI, *, model: str) -> None:
        self._client = client
        self.model = model

    async def extract(self, raw_text: str, output_schema: str) -> dict[str, Any]:
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "Output valid JSON only."},
                    {"role": "user", "content": _build_prompt(raw_text, output_schema)},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.warning("OpenAI extraction call failed: %s", exc)
            raise ExtractionError(f"{exc.__class__.__name__}: {exc}") from exc
        if not completion.choices:
            raise ExtractionError("Extraction returned no choices")
        raw = completion.choices[0].message.content or ""
        return _parse_object(raw)


def _is_tracking_param(key: str) -> bool:
    lowered = key.lower()
    return lowered in TRACKING_PARAMS or lowered.startswith(TRACKING_PARAM_PREFIXES)


def _unwrap_redirect(url: str) -> str | None:
    parts = urlsplit(url)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key in REDIRECT_PARAMS:
        candidate = params.get(key, "").strip()
        if urlsplit(candidate).scheme in {"http", "https"}:
            return candidate
    return None


def strip_tracking(url: str) -> str:
    parts = urlsplit(url)
    kept = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if not _is_tracking_param(key)]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(kept), parts.fragment))


def clean_url(text: str) -> str | None:
    candidate = text.strip()
    if urlsplit(candidate).scheme not in {"http", "https"}:
        return None
    for _ in range(MAX_REDIRECT_DEPTH):
        inner = _unwrap_redirect(candidate)
        if inner is None:
            break
        candidate = inner
    return strip_tracking(candidate)


class HeuristicExtractionGateway(ExtractionGateway):
    """Offline stand-in for the AI capability, used when ``USE_MOCK_AI`` is set."""

    async def extract(self, raw_text: str, output_schema: str) -> dict[str, Any]:
        try:
            cleaned = clean_url(raw_text)
        except ValueError as exc:
            raise ExtractionError(f"Could not parse URL: {exc}") from exc
        if cleaned is None:
            return {}
        return {"destination_url": cleaned}


async def extract_destination(gateway: ExtractionGateway, raw_text: str) -> DestinationExtraction:
    payload = await gateway.extract(raw_text, DESTINATION_SCHEMA)
    try:
        return DestinationExtraction.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ExtractionError(f"Extraction result does not match the expected shape: {exc}") from exc


def build_gateway(settings: Settings) -> ExtractionGateway:
    if settings.use_mock_ai:
        return HeuristicExtractionGateway()
    client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.openai_timeout_seconds, max_retries=0)
    return OpenAIExtractionGateway(client, model=settings.openai_model)
