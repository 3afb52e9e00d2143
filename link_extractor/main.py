import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import httpx
from fastapi import FastAPI

from link_extractor.api.routes import extractions, health, history, records, ui
from link_extractor.config import get_settings
from link_extractor.services.ai.extraction import ExtractionGateway
from link_extractor.services.clipboard import Clipboard
from link_extractor.services.errors import RemoteError
from link_extractor.services.record_store import build_http_client
from link_extractor.services.workspace import build_workspace

logger = logging.getLogger(__name__)


def create_app(
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
    gateway: ExtractionGateway | None = None,
    clipboard: Clipboard | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        settings = get_settings()
        logging.basicConfig(level=settings.log_level)
        async with build_http_client(settings, transport=http_transport) as http:
            workspace = build_workspace(settings, http, gateway=gateway, clipboard=clipboard)
            try:
                await workspace.history.refresh()
            except RemoteError as exc:
                logger.warning("Initial history load failed: %s", exc.message)
            app.state.workspace = workspace
            yield
            workspace.copy_ack.reset()

    app = FastAPI(
        title="Link Extractor",
        version="0.1.0",
        description="Recover clean destination URLs from tracking and redirect links and keep a history of them.",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(extractions.router)
    app.include_router(history.router)
    app.include_router(records.router)
    app.include_router(ui.router)

    @app.get("/meta")
    def meta() -> dict:
        settings = get_settings()
        return {
            "service": "link-extractor",
            "version": "0.1.0",
            "record_store_app_id": settings.record_store_app_id,
            "mock_ai": settings.use_mock_ai,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_app()
