from typing import Any, Dict, List, Optional

import pytest
import requests

from part_weight.clients import HttpPageFetcher, InMemoryVendorSearch, MouserSearchClient
from part_weight.config import WeightServiceConfig
from part_weight.errors import VendorUnavailable
from part_weight.vendor import VendorRecord

SEARCH_URL = "https://api.example.test/search/partnumber"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[Dict[str, Any]] = []

    def _send(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._send("POST", url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._send("GET", url, **kwargs)


def _client(session: FakeSession) -> MouserSearchClient:
    return MouserSearchClient(api_key="secret", search_url=SEARCH_URL, timeout_seconds=3.0, session=session)


def test_search_posts_part_number_and_parses_records() -> None:
    payload = {
        "Errors": [],
        "SearchResults": {
            "NumberOfResult": 1,
            "Parts": [{"ManufacturerPartNumber": "CRCW08051K00FKEA", "MouserPartNumber": "71-CRCW0805-1K"}],
        },
    }
    session = FakeSession(FakeResponse(200, payload))

    records = _client(session).search("CRCW0805-1K")

    assert [r.vendor_part_number for r in records] == ["71-CRCW0805-1K"]
    sent = session.requests[0]
    assert sent["method"] == "POST"
    assert sent["params"] == {"apiKey": "secret"}
    assert sent["json"]["SearchByPartRequest"]["mouserPartNumber"] == "CRCW0805-1K"
    assert sent["timeout"] == 3.0


def test_search_error_status_is_vendor_unavailable() -> None:
    session = FakeSession(FakeResponse(503, {"Message": "Service Unavailable"}))
    with pytest.raises(VendorUnavailable) as err:
        _client(session).search("X")
    assert err.value.vendor_status == 503
    assert err.value.details == {"Message": "Service Unavailable"}


def test_search_transport_failure_is_vendor_unavailable() -> None:
    for error in (requests.ConnectionError("refused"), requests.Timeout("slow")):
        with pytest.raises(VendorUnavailable):
            _client(FakeSession(error=error)).search("X")


def test_search_invalid_json_is_vendor_unavailable() -> None:
    with pytest.raises(VendorUnavailable) as err:
        _client(FakeSession(FakeResponse(200, None, text="<html>"))).search("X")
    assert err.value.vendor_status == 200


def test_client_built_from_config() -> None:
    config = WeightServiceConfig(mouser_api_key="k", search_url=SEARCH_URL, search_timeout_seconds=4.0)
    client = MouserSearchClient.from_config(config, session=FakeSession())
    assert client.api_key == "k"
    assert client.timeout_seconds == 4.0


def test_page_fetch_sends_browser_headers() -> None:
    session = FakeSession(FakeResponse(200, text="<html>ok</html>"))
    fetcher = HttpPageFetcher(timeout_seconds=2.0, user_agent="Mozilla/5.0 Test", session=session)

    assert fetcher.fetch("https://www.mouser.com/p") == "<html>ok</html>"
    headers = session.requests[0]["headers"]
    assert headers["User-Agent"] == "Mozilla/5.0 Test"
    assert "Accept-Language" in headers
    assert "Accept" in headers


def test_page_fetch_failures_return_none() -> None:
    assert HttpPageFetcher(session=FakeSession(FakeResponse(403, text="Access Denied"))).fetch("u") is None
    assert HttpPageFetcher(session=FakeSession(error=requests.Timeout("slow"))).fetch("u") is None


def test_in_memory_search_is_case_insensitive() -> None:
    record = VendorRecord(manufacturer_part_number="ABC")
    search = InMemoryVendorSearch({"ABC": [record]})
    assert list(search.search("abc ")) == [record]
    assert list(search.search("zzz")) == []
    assert search.calls == ["abc ", "zzz"]
