from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from o2cm_couples.config.settings import settings

# Define common HTTP status codes that warrant a retry
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class ScraperError(Exception):
    """Custom exception for scraper-related errors."""

    pass


class AuthenticationError(ScraperError):
    """Exception raised for authentication failures (401, 403)."""

    pass


class RateLimitError(ScraperError):
    """Exception raised for rate limit errors (429)."""

    pass


class BaseScraper(ABC):
    """Abstract base class for entry-list document sources."""

    source_name: str = "Unknown"

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout),
            follow_redirects=True,
            headers={"User-Agent": settings.user_agent},
        )

    @abstractmethod
    async def fetch_competitor_ids(self, event_key: str) -> List[str]:
        """Fetch the competitor identifiers listed for a competition.

        Args:
            event_key: The competition key, e.g. "CCC".

        Returns:
            Competitor identifiers in the order the source lists them.
        """
        pass

    @abstractmethod
    async def fetch_competitor_page(self, event_key: str, competitor_id: str) -> str:
        """Fetch the raw HTML page describing one competitor's entries."""
        pass

    def _check_response(self, response: httpx.Response) -> None:
        """Raises for any unsuccessful status, as the retry policy expects.

        Retryable statuses surface as httpx.HTTPStatusError (or RateLimitError
        for 429); everything else becomes a ScraperError and is not retried.
        """
        status = response.status_code
        url = response.request.url
        if status in {401, 403}:
            logger.warning(f"{self.source_name} refused access ({status}) to {url}.")
            raise AuthenticationError(
                f"Authentication failed ({status}) for {self.source_name}"
            )
        if status == 429:
            logger.warning(
                f"{self.source_name} rate limited {url}. Retry-After: {response.headers.get('Retry-After')}"
            )
            raise RateLimitError(f"Rate limited by {self.source_name}")
        if status in RETRYABLE_STATUS_CODES:
            logger.warning(f"{self.source_name} answered {status} for {url}, retrying.")
            response.raise_for_status()
        if response.is_error:
            logger.error(f"{self.source_name} answered {status} for {url}, giving up.")
            raise ScraperError(f"HTTP error: {status}")

    @retry(
        stop=stop_after_attempt(settings.max_request_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=10),  # 1s, 2s, 4s... capped
        retry=retry_if_exception_type(
            (httpx.RequestError, httpx.HTTPStatusError, RateLimitError)
        ),
        reraise=True,  # Last attempt's exception propagates unchanged
    )
    async def _make_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Sends one request, retried on transport errors, 408/429/5xx."""
        logger.debug(f"{method} {url} params={params} form={data is not None}")
        try:
            response = await self.client.request(
                method, url, headers=headers, params=params, data=data
            )
        except httpx.RequestError as e:
            logger.warning(f"Request error for {self.source_name} at {url}: {e}")
            raise

        self._check_response(response)
        logger.debug(f"{response.status_code} for {url}")
        return response

    async def close(self):
        """Closes the underlying HTTP client."""
        await self.client.aclose()
        logger.info(f"Closed HTTP client for {self.source_name}")
