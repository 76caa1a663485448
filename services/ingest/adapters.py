"""
Source Adapters
Fetch records from each source and normalize them to NormalizedTicket.

The primary adapter propagates SourceFetchError; the secondary adapter never
fails the pipeline and degrades to an empty list.
"""

from typing import Iterable, Optional

import httpx
import structlog

from services.ingest.eventbrite import EventbriteClient
from services.ingest.sheets import SheetsClient
from services.normalize.normalizer import AttendeeNormalizer, SheetRowNormalizer
from shared.config import EngineConfig
from shared.schemas.ticket import NormalizedTicket

logger = structlog.get_logger()


class PrimaryAdapter:
    """Eventbrite attendees -> primary tickets"""

    def __init__(
        self,
        token: str,
        event_ids: Iterable[str],
        api_url: str = "https://www.eventbriteapi.com/v3",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        normalizer: Optional[AttendeeNormalizer] = None,
    ):
        self.token = token
        self.event_ids = tuple(event_ids)
        self.api_url = api_url
        self.timeout = timeout
        self.normalizer = normalizer or AttendeeNormalizer()
        self._transport = transport

    @classmethod
    def from_config(cls, config: EngineConfig, **kwargs) -> "PrimaryAdapter":
        """Build from config; raises ConfigurationError if the token is missing"""
        return cls(
            token=config.require_token(),
            event_ids=config.event_ids,
            api_url=config.api_url,
            timeout=config.http_timeout,
            **kwargs,
        )

    async def fetch(self) -> list[NormalizedTicket]:
        """
        Fetch and normalize attendees of every configured event.

        Raises:
            SourceFetchError: If any Eventbrite request fails
        """
        async with EventbriteClient(
            self.token, api_url=self.api_url, timeout=self.timeout, transport=self._transport
        ) as client:
            attendees = await client.fetch_attendees(self.event_ids)

        tickets = self.normalizer.normalize_many(attendees)
        logger.info("Normalized primary tickets", attendees=len(attendees), tickets=len(tickets))
        return tickets


class SecondaryAdapter:
    """Google Sheets rows -> secondary tickets (optional source)"""

    def __init__(
        self,
        client: Optional[SheetsClient] = None,
        normalizer: Optional[SheetRowNormalizer] = None,
    ):
        self.client = client
        self.normalizer = normalizer or SheetRowNormalizer()

    @classmethod
    def from_config(cls, config: EngineConfig) -> "SecondaryAdapter":
        """Disabled (client=None) unless both sheet id and service account are set"""
        if not config.sheets_configured:
            return cls(client=None)
        return cls(
            client=SheetsClient(
                config.sheets_id,
                credentials_info=config.service_account,
                cell_range=config.sheets_range,
            )
        )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def fetch(self) -> list[NormalizedTicket]:
        """Fetch and normalize sheet rows; any failure yields an empty list"""
        if not self.enabled:
            logger.info("Google Sheets not configured, skipping")
            return []

        try:
            rows = await self.client.fetch_rows()
            tickets = self.normalizer.normalize_rows(rows)
        except Exception as e:
            logger.warning("Error fetching Google Sheets data", error=str(e))
            return []

        logger.info("Fetched tickets from Google Sheets", count=len(tickets))
        return tickets
