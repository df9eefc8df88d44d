"""
Helsinki Service Map client.

Fetches the playground units envelope from `https://api.hel.fi/servicemap/v2/unit/`
with the query configured under `servicemap.params`. The API pages its results; with
`page_size=1000` a single page holds every playground, so `max_pages` defaults to 1.
Larger values follow the `next` link and concatenate `results` (the envelope `count`
stays the server's total).

Failures are translated into `NetworkFailure` / `DecodeFailure`; deciding what to do
about them is the repository's job.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

from kiikkuuko.config.settings import Settings
from kiikkuuko.core.errors import DecodeFailure, NetworkFailure
from kiikkuuko.core.http import get_json, get_json_async
from kiikkuuko.domain.models import UnitsResponse

logger = logging.getLogger(__name__)


def parse_units_response(payload: Any) -> UnitsResponse:
    """Validate a decoded JSON payload against the envelope schema.

    Raises:
        DecodeFailure: If the payload does not match.
    """
    try:
        return UnitsResponse.model_validate(payload)
    except ValidationError as exc:
        raise DecodeFailure(f"Service Map payload does not match the unit schema: {exc}") from exc


def _merge_pages(pages: list[UnitsResponse]) -> UnitsResponse:
    first, last = pages[0], pages[-1]
    if len(pages) == 1:
        return first
    results = [unit for page in pages for unit in page.results]
    return first.model_copy(update={"results": results, "next": last.next})


class ServiceMapClient:
    """Fetches unit envelopes from the Service Map API."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport

    @property
    def url(self) -> str:
        return self._settings.servicemap.base_url

    def _request_args(self, first: bool) -> dict[str, Any]:
        # `next` links already carry the full query string.
        return {
            "params": dict(self._settings.servicemap.params) if first else None,
            "timeout_seconds": self._settings.app.http_timeout_seconds,
        }

    def _next_url(self, current: str, page: UnitsResponse) -> str | None:
        # The API normally returns absolute links; relative ones resolve against the page URL.
        return urljoin(current, page.next) if page.next else None

    async def fetch_units(self) -> UnitsResponse:
        """Fetch the current dataset.

        Raises:
            NetworkFailure: On transport errors, timeouts, non-2xx responses and unusable `next` links.
            DecodeFailure: If a body is not JSON or does not match the schema.
        """
        pages: list[UnitsResponse] = []
        url: str | None = self.url
        while url and len(pages) < self._settings.servicemap.max_pages:
            logger.info("Fetching units from %s", url)
            try:
                payload = await get_json_async(url, transport=self._transport, **self._request_args(not pages))
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise NetworkFailure(f"Service Map request failed: {exc}") from exc
            except ValueError as exc:
                raise DecodeFailure(f"Service Map response is not JSON: {exc}") from exc
            page = parse_units_response(payload)
            pages.append(page)
            url = self._next_url(url, page)
        return _merge_pages(pages)

    def fetch_units_sync(self) -> UnitsResponse:
        """Blocking variant used by the `snapshot-update` command."""
        pages: list[UnitsResponse] = []
        url: str | None = self.url
        while url and len(pages) < self._settings.servicemap.max_pages:
            logger.info("Fetching units from %s", url)
            try:
                payload = get_json(url, transport=self._transport, **self._request_args(not pages))
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise NetworkFailure(f"Service Map request failed: {exc}") from exc
            except ValueError as exc:
                raise DecodeFailure(f"Service Map response is not JSON: {exc}") from exc
            page = parse_units_response(payload)
            pages.append(page)
            url = self._next_url(url, page)
        return _merge_pages(pages)
