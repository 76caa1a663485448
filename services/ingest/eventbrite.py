"""
Eventbrite Attendees Client
Pulls attendee records for a fixed set of events via the Eventbrite v3 API
"""

import asyncio
from typing import AsyncIterator, Iterable, Optional

import httpx
import structlog

from shared.errors import SourceFetchError

logger = structlog.get_logger()


class EventbriteClient:
    """
    Client for the Eventbrite attendees endpoint

    Pagination:
    1. GET /events/{id}/attendees/?page=1
    2. Keep requesting page N+1 while pagination.has_more_items is true
    Events are fetched concurrently; pages of one event are sequential
    because the next page is only known from the previous response.
    """

    def __init__(
        self,
        token: str,
        api_url: str = "https://www.eventbriteapi.com/v3",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._token = token
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "EventbriteClient":
        self._ensure_client()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._token}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def _get_page(self, event_id: str, page: int) -> dict:
        """Request one attendees page"""
        client = self._ensure_client()
        url = f"{self.api_url}/events/{event_id}/attendees/"
        try:
            response = await client.get(url, params={"page": page})
        except httpx.HTTPError as e:
            logger.error("Eventbrite request failed", event_id=event_id, page=page, error=str(e))
            raise SourceFetchError(
                f"Eventbrite API request failed: {e}", event_id=event_id
            ) from e

        if not response.is_success:
            logger.error(
                "Eventbrite API error",
                event_id=event_id,
                page=page,
                status=response.status_code,
            )
            raise SourceFetchError(
                f"Eventbrite API error: {response.status_code} {response.reason_phrase}",
                event_id=event_id,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SourceFetchError(
                f"Eventbrite API returned invalid JSON for event {event_id}", event_id=event_id
            ) from e
        return data if isinstance(data, dict) else {}

    async def iter_attendee_pages(self, event_id: str) -> AsyncIterator[list[dict]]:
        """
        Yield attendee lists page by page for one event.

        Stops after the first response whose pagination does not report more items.
        """
        page = 1
        while True:
            data = await self._get_page(event_id, page)
            attendees = data.get("attendees") or []
            yield [a for a in attendees if isinstance(a, dict)]

            pagination = data.get("pagination") or {}
            if not pagination.get("has_more_items"):
                break
            page += 1

    async def fetch_event_attendees(self, event_id: str) -> list[dict]:
        """Fetch every attendee of one event"""
        attendees: list[dict] = []
        pages = 0
        async for batch in self.iter_attendee_pages(event_id):
            attendees.extend(batch)
            pages += 1
        logger.info("Fetched attendees", event_id=event_id, pages=pages, count=len(attendees))
        return attendees

    async def fetch_attendees(self, event_ids: Iterable[str]) -> list[dict]:
        """
        Fetch attendees for all events concurrently.

        Args:
            event_ids: Event identifiers to poll

        Returns:
            Flat list of raw attendee dicts, in event order

        Raises:
            SourceFetchError: For the first failed event, in event order
        """
        event_ids = list(event_ids)
        # Every event runs to completion before a failure is raised
        results = await asyncio.gather(
            *(self.fetch_event_attendees(event_id) for event_id in event_ids),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        all_attendees = [attendee for batch in results for attendee in batch]
        logger.info("Fetched all attendees", events=len(event_ids), total=len(all_attendees))
        return all_attendees

    async def check_health(self) -> bool:
        """Check if the API accepts the configured token"""
        try:
            client = self._ensure_client()
            response = await client.get(f"{self.api_url}/users/me/")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning("Eventbrite health check failed", error=str(e))
            return False

    async def close(self):
        """Close the underlying HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None
