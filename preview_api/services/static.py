import logging

import httpx
from bs4.exceptions import ParserRejectedMarkup

from preview_api.config import Settings
from preview_api.exceptions import TransientFetchFailure
from preview_api.schemas import RawExtraction
from preview_api.services.parser import parse_document

logger = logging.getLogger(__name__)


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={
            "Accept-Encoding": settings.accept_encoding,
            "User-Agent": settings.user_agent,
        },
        timeout=settings.fetch_timeout_seconds,
        follow_redirects=True,
    )


class StaticFetcher:
    """Fetch a page over plain HTTP and parse it without running scripts."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def fetch(
        self, url: str, headers: dict[str, str] | None = None
    ) -> RawExtraction:
        try:
            response = await self.client.get(url, headers=headers)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransientFetchFailure(url, str(exc) or type(exc).__name__) from exc

        logger.debug("Fetched %s (%s bytes)", response.url, len(response.content))
        try:
            return parse_document(response.text, str(response.url))
        except ParserRejectedMarkup as exc:
            raise TransientFetchFailure(url, f"unparseable markup: {exc}") from exc
