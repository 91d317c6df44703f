"""Outbound collaborators: vendor part search and product page fetch."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

import requests

from part_weight.config import WeightServiceConfig
from part_weight.errors import VendorUnavailable
from part_weight.vendor import VendorRecord, parse_search_payload

logger = logging.getLogger(__name__)


class VendorSearch(Protocol):
    def search(self, identifier: str) -> Sequence[VendorRecord]:
        ...


class PageFetcher(Protocol):
    def fetch(self, url: str) -> Optional[str]:
        ...


class InMemoryVendorSearch:
    def __init__(self, records: Optional[Dict[str, Sequence[VendorRecord]]] = None) -> None:
        self._records = {k.strip().lower(): list(v) for k, v in (records or {}).items()}
        self.calls: List[str] = []

    def search(self, identifier: str) -> Sequence[VendorRecord]:
        self.calls.append(identifier)
        return list(self._records.get(identifier.strip().lower(), ()))


class InMemoryPageFetcher:
    def __init__(self, pages: Optional[Dict[str, str]] = None) -> None:
        self._pages = dict(pages or {})
        self.calls: List[str] = []

    def fetch(self, url: str) -> Optional[str]:
        self.calls.append(url)
        return self._pages.get(url)


class MouserSearchClient:
    """
    Mouser part number search over HTTP.
      POST {search_url}?apiKey=...
      body: {"SearchByPartRequest": {"mouserPartNumber": ..., "partSearchOptions": ...}}
    Response JSON: {"Errors": [...], "SearchResults": {"NumberOfResult": n, "Parts": [...]}}.
    """

    def __init__(
        self,
        api_key: str,
        search_url: str,
        search_options: str = "None",
        timeout_seconds: float = 10.0,
        session: Optional[Any] = None,
    ) -> None:
        self.api_key = api_key
        self.search_url = search_url
        self.search_options = search_options
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: WeightServiceConfig, session: Optional[Any] = None) -> "MouserSearchClient":
        return cls(
            api_key=config.mouser_api_key,
            search_url=config.search_url,
            search_options=config.search_options,
            timeout_seconds=config.search_timeout_seconds,
            session=session,
        )

    def search(self, identifier: str) -> List[VendorRecord]:
        body = {
            "SearchByPartRequest": {
                "mouserPartNumber": identifier,
                "partSearchOptions": self.search_options,
            }
        }
        try:
            response = self.session.post(
                self.search_url,
                params={"apiKey": self.api_key},
                json=body,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as e:
            raise VendorUnavailable("Vendor search timed out", details=str(e)) from e
        except requests.RequestException as e:
            raise VendorUnavailable("Vendor search request failed", details=str(e)) from e

        if not 200 <= response.status_code < 300:
            raise VendorUnavailable(
                "Vendor search returned an error status",
                vendor_status=response.status_code,
                details=_response_details(response),
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise VendorUnavailable(
                "Vendor search returned invalid JSON",
                vendor_status=response.status_code,
            ) from e

        records = parse_search_payload(payload)
        logger.debug("Vendor search for %r returned %d record(s)", identifier, len(records))
        return records


def _response_details(response: Any) -> Any:
    try:
        return response.json()
    except ValueError:
        return (response.text or "")[:500]


class HttpPageFetcher:
    """GET a product page with browser-like headers. Any failure yields ``None``."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        user_agent: str = "Mozilla/5.0",
        accept: str = "text/html",
        accept_language: str = "en-US,en;q=0.9",
        session: Optional[Any] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.headers = {
            "User-Agent": user_agent,
            "Accept": accept,
            "Accept-Language": accept_language,
        }
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: WeightServiceConfig, session: Optional[Any] = None) -> "HttpPageFetcher":
        return cls(
            timeout_seconds=config.page_timeout_seconds,
            user_agent=config.user_agent,
            accept=config.accept,
            accept_language=config.accept_language,
            session=session,
        )

    def fetch(self, url: str) -> Optional[str]:
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout_seconds)
        except requests.RequestException as e:
            logger.debug("Product page fetch failed for %s: %s", url, e)
            return None
        if response.status_code != 200:
            logger.debug("Product page %s answered HTTP %s", url, response.status_code)
            return None
        return response.text
