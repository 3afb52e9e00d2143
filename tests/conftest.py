import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("RECORD_STORE_URL", "https://store.test/rest")
os.environ.setdefault("RECORD_STORE_APP_ID", "699ef71749797b3e287a6ed8")
os.environ.setdefault("RECORD_STORE_SESSION_COOKIE", "session=test-session")
os.environ.setdefault("OPENAI_API_KEY", "test-key")
os.environ.setdefault("USE_MOCK_AI", "true")

from link_extractor.config import get_settings  # noqa: E402
from link_extractor.main import create_app  # noqa: E402
from link_extractor.schemas import LinkFields  # noqa: E402
from link_extractor.services.history import HistoryCollection  # noqa: E402
from link_extractor.services.orchestrator import ExtractionOrchestrator  # noqa: E402
from link_extractor.services.record_store import build_http_client, build_link_store  # noqa: E402
from tests.helpers import FakeRecordStore, StubGateway  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def fake_store():
    return FakeRecordStore()


@pytest.fixture()
def store(fake_store):
    http = build_http_client(get_settings(), transport=fake_store.transport())
    return build_link_store(http, get_settings())


@pytest.fixture()
def history(store) -> HistoryCollection[LinkFields]:
    return HistoryCollection(store)


@pytest.fixture()
def gateway():
    return StubGateway({"destination_url": "https://example.com/page"})


@pytest.fixture()
def orchestrator(gateway, store, history):
    return ExtractionOrchestrator(gateway, store, history)


@pytest.fixture()
def client(fake_store, gateway):
    app = create_app(http_transport=fake_store.transport(), gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client
