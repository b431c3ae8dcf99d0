"""
Company Metadata Client Tests
"""

import httpx
import pytest

from services.company.metadata import MetadataFetcher, parse_metadata
from transport.watsonwork.errors import ServiceError, TransportError

METADATA_URL = "https://test/entity/%s/metadata"

ACME = {
    "result": {
        "name": "The Acme company",
        "data": {
            "entityMap": {
                "language": [{"name": "English"}],
                "industry": [{"name": "Test industry"}],
                "sector": [{"name": "Test sector"}],
                "segment": [{"name": "Test segment", "code": "TS"}],
            }
        },
    }
}


def fetcher_for(handler) -> MetadataFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MetadataFetcher(client, METADATA_URL, "testfruserid", "testfrkey")


class TestParseMetadata:

    def test_extracts_name_and_categories(self):
        info = parse_metadata(ACME)

        assert info.name == "The Acme company"
        assert [i.name for i in info.languages] == ["English"]
        assert [i.name for i in info.industries] == ["Test industry"]
        assert [s.name for s in info.sectors] == ["Test sector"]
        assert [s.name for s in info.segments] == ["Test segment"]

    @pytest.mark.parametrize("body", [None, {}, {"result": None}, []])
    def test_missing_result_is_no_info(self, body):
        assert parse_metadata(body) is None

    @pytest.mark.parametrize("result", [
        {"name": "Acme"},
        {"name": "Acme", "data": None},
        {"name": "Acme", "data": {}},
        {"name": "Acme", "data": {"entityMap": {"industry": None}}},
    ])
    def test_missing_nested_fields_are_empty_lists(self, result):
        info = parse_metadata({"result": result})

        assert info.name == "Acme"
        assert info.industries == []
        assert info.sectors == []
        assert info.segments == []

    def test_entries_without_string_names_are_dropped(self):
        info = parse_metadata({"result": {
            "name": "Acme",
            "data": {"entityMap": {
                "industry": [{"name": None}, {"code": "X"}, {"name": 7}, {"name": "Toys"}],
            }},
        }})

        assert [i.name for i in info.industries] == ["Toys"]

    def test_non_string_company_name_is_rendered_as_text(self):
        info = parse_metadata({"result": {"name": 123}})

        assert info.name == "123"


class TestMetadataFetcher:

    def test_url_for_entity(self):
        fetcher = fetcher_for(lambda request: httpx.Response(200, json={}))

        assert fetcher.url_for("acme") == "https://test/entity/acme/metadata"

    def test_url_for_keeps_other_percent_sequences(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        fetcher = MetadataFetcher(client, "https://test/entity/%s/metadata?scope=a%2Fb", "u", "k")

        assert fetcher.url_for("acme") == "https://test/entity/acme/metadata?scope=a%2Fb"

    @pytest.mark.asyncio
    async def test_fetches_with_service_credentials(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=ACME)

        info = await fetcher_for(handler).fetch("acme")

        assert info.name == "The Acme company"
        request = seen[0]
        assert request.method == "GET"
        assert str(request.url) == "https://test/entity/acme/metadata"
        assert request.headers["frUserId"] == "testfruserid"
        assert request.headers["authKey"] == "testfrkey"
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_non_200_raises_service_error(self):
        fetcher = fetcher_for(lambda request: httpx.Response(404, json={}))

        with pytest.raises(ServiceError) as exc_info:
            await fetcher.fetch("acme")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_connection_failure_raises_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError):
            await fetcher_for(handler).fetch("acme")
