"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from infra.bootstrap import AppContext  # noqa: E402
from infra.config import AppConfig  # noqa: E402

API_URL = "https://api.watsonwork.ibm.com"
RECOGNITION_URL = "https://test/entity/recognition"
METADATA_URL = "https://test/entity/%s/metadata"
TEST_TOKEN = "testtoken"


class FakeServices:
    """
    Stand-in for the platform API and the company services.

    Routes requests by URL, records every request it sees.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_body = {"access_token": TEST_TOKEN}
        self.recognition_status = 200
        self.entities: list[dict] = []
        self.metadata: dict[str, tuple[int, dict]] = {}
        self.send_status = 201

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if url == f"{API_URL}/oauth/token":
            return httpx.Response(self.token_status, json=self.token_body)

        if url == RECOGNITION_URL:
            return httpx.Response(
                self.recognition_status,
                json={"result": {"entity": self.entities}},
            )

        if url.startswith(f"{API_URL}/v1/spaces/"):
            return httpx.Response(self.send_status, json={})

        for entity_id, (status_code, body) in self.metadata.items():
            if url == METADATA_URL % entity_id:
                return httpx.Response(status_code, json=body)

        return httpx.Response(404, json={})

    def calls_to(self, prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(prefix)]

    @property
    def sent_messages(self) -> list[dict]:
        return [json.loads(r.content) for r in self.calls_to(f"{API_URL}/v1/spaces/")]


@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig(
        app_id="testappid",
        app_secret="testsecret",
        webhook_secret="testwsecret",
        fr_user_id="testfruserid",
        fr_key="testfrkey",
        recognition_url=RECOGNITION_URL,
        metadata_url=METADATA_URL,
        api_url=API_URL,
    )


@pytest.fixture
def fake_services() -> FakeServices:
    return FakeServices()


@pytest.fixture
def mock_client(fake_services) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_services.handler))


@pytest.fixture
def app_context(app_config, mock_client) -> AppContext:
    return AppContext(app_config, client=mock_client)
