# o2cm_couples/scrapers/entries_scraper.py

from typing import List, Optional

import httpx
from loguru import logger

from o2cm_couples.config.settings import AppSettings, settings as default_settings
from o2cm_couples.parsing.competitor_parser import parse_competitor_ids
from .base_scraper import BaseScraper

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class EntriesScraper(BaseScraper):
    """Fetches competition entry pages from entries.o2cm.com."""

    source_name: str = "O2CM Entries"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        app_settings: Optional[AppSettings] = None,
    ):
        super().__init__(client)
        self.settings = app_settings or default_settings
        logger.debug(
            f"EntriesScraper initialized for {self.settings.landing_url} "
            f"(select id '{self.settings.competitor_select_id}')."
        )

    async def fetch_competitor_ids(self, event_key: str) -> List[str]:
        """GETs the competition landing page and reads its competitor dropdown.

        Transport errors and DiscoveryError subclasses propagate; without
        identifiers there is nothing to scrape.
        """
        url = self.settings.landing_url
        logger.info(f"Fetching initial competitor list from: {url}?event={event_key}")
        response = await self._make_request(
            method="GET", url=url, params={"event": event_key}
        )
        return parse_competitor_ids(
            response.text, select_id=self.settings.competitor_select_id
        )

    async def fetch_competitor_page(self, event_key: str, competitor_id: str) -> str:
        """POSTs the entry form for one competitor and returns the page HTML."""
        logger.info(f"Processing competitor ID: {competitor_id}")
        form_data = {
            "submit": "OK",
            self.settings.competitor_select_id: competitor_id,
            "event": event_key,
        }
        response = await self._make_request(
            method="POST",
            url=self.settings.entries_url,
            headers=FORM_HEADERS,
            data=form_data,
        )
        return response.text
