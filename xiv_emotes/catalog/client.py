"""Async client for the XIVAPI Emote sheet.

429 responses wait out ``Retry-After`` without using up a retry. Timeouts,
transport failures and 5xx responses back off exponentially up to
``MAX_RETRIES`` times. Any other non-200 response raises ``CatalogAPIError``
with XIVAPI's ``Message`` when the body carries one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator

import httpx

from xiv_emotes.catalog.logger import logger
from xiv_emotes.errors import CatalogAPIError


MAX_RETRIES = 5
MAX_RATE_LIMIT_RETRIES = 30
INITIAL_BACKOFF = 1.0
MAX_BACKOFF = 64.0

# Emote sheet columns needed to build and validate catalog entries
EMOTE_COLUMNS = (
    "ID",
    "Name",
    "TextCommand.Command_en",
    "LogMessageTargeted.Text_en",
    "LogMessageTargeted.Text_ja",
    "LogMessageUntargeted.Text_en",
    "LogMessageUntargeted.Text_ja",
)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("Message", response.text)
    except (ValueError, AttributeError):
        return response.text


@dataclass
class XivApiClient:
    """Use as ``async with XivApiClient(...) as client``."""

    base_url: str = "https://xivapi.com"
    private_key: str | None = None
    user_agent: str = "xiv-emotes"

    def __post_init__(self) -> None:
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "XivApiClient":
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            timeout=30.0,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use async with.")

        query = {**(params or {})}
        if self.private_key:
            query["private_key"] = self.private_key

        attempt = 0
        backoff = INITIAL_BACKOFF
        rate_limited = 0

        async def back_off(reason: str) -> bool:
            nonlocal attempt, backoff
            if attempt >= MAX_RETRIES:
                return False
            attempt += 1
            logger.retry(attempt, MAX_RETRIES, backoff, reason)
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, MAX_BACKOFF)
            return True

        while True:
            try:
                response = await self._client.request(method, path, params=query)
            except httpx.TimeoutException:
                if await back_off("timeout"):
                    continue
                raise
            except httpx.TransportError as e:
                if await back_off(str(e)):
                    continue
                raise

            status = response.status_code
            if status == 200:
                return response.json()

            if status == 429:
                rate_limited += 1
                if rate_limited > MAX_RATE_LIMIT_RETRIES:
                    raise CatalogAPIError(429, "Max rate limit retries exceeded")
                retry_after = float(response.headers.get("Retry-After", 1.0))
                logger.rate_limit(retry_after)
                await asyncio.sleep(retry_after)
                continue

            if status >= 500 and await back_off(f"HTTP {status}"):
                continue

            raise CatalogAPIError(status, _error_message(response))

    # Emote sheet

    async def get_emote_page(self, page: int = 1) -> dict[str, Any]:
        """Fetch one page of the Emote sheet."""
        return await self._request(
            "GET",
            "/Emote",
            params={"columns": ",".join(EMOTE_COLUMNS), "page": page},
        )

    async def iter_emote_pages(
        self,
    ) -> AsyncIterator[tuple[int, int | None, list[dict[str, Any]]]]:
        """Yield (page, total_pages, rows) for every page of the Emote sheet."""
        page: int | None = 1
        while page is not None:
            data = await self.get_emote_page(page)
            pagination = data.get("Pagination") or {}
            yield page, pagination.get("PageTotal"), data.get("Results") or []
            page = pagination.get("PageNext")
