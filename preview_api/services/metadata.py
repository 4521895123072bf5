import logging
from dataclasses import dataclass
from typing import Optional, Union

from preview_api.exceptions import NoMetadataFound, TransientFetchFailure
from preview_api.schemas import LinkMetadata, RawExtraction
from preview_api.services.cache import CacheGateway
from preview_api.services.rendered import RenderedFetcher
from preview_api.services.static import StaticFetcher
from preview_api.services.validation import hostname_of, is_fetchable, validate_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Usable:
    extraction: RawExtraction


@dataclass(frozen=True)
class Empty:
    reason: str


StageResult = Union[Usable, Empty]


def normalize(extraction: RawExtraction, hostname: str) -> LinkMetadata:
    og, meta = extraction.og, extraction.meta
    if og.get("image"):
        image = og["image"]
    elif extraction.images:
        image = extraction.images[0].src
    else:
        image = None
    return LinkMetadata(
        title=og.get("title") or meta.get("title") or "",
        description=og.get("description") or meta.get("description") or None,
        image=image,
        site_name=og.get("site_name") or "",
        hostname=hostname,
    )


class MetadataService:
    """Extracts link preview metadata, preferring the cache and a plain fetch."""

    def __init__(
        self,
        static_fetcher: StaticFetcher,
        rendered_fetcher: RenderedFetcher,
        cache: Optional[CacheGateway] = None,
    ) -> None:
        self.static_fetcher = static_fetcher
        self.rendered_fetcher = rendered_fetcher
        self.cache = cache

    async def extract(self, raw_url: Optional[str]) -> LinkMetadata:
        url = validate_url(raw_url)
        hostname = hostname_of(url)

        if self.cache is not None:
            cached = await self.cache.lookup(url)
            if cached is not None:
                logger.debug("Cache hit for %s", url)
                return LinkMetadata.model_validate(cached)

        extraction = await self.fetch(url)
        if extraction.is_empty:
            raise NoMetadataFound(url)

        result = normalize(extraction, hostname)
        if self.cache is not None:
            await self.cache.store(url, result)
        return result

    async def fetch(self, url: str) -> RawExtraction:
        """Run the static stage and, when it is not usable, the rendered one."""
        if not is_fetchable(url):
            logger.info("Not fetching %s: unsupported URL", url)
            return RawExtraction()

        stage = await self._static_stage(url)
        if isinstance(stage, Usable):
            return stage.extraction

        logger.info("Static fetch of %s not usable (%s), rendering", url, stage.reason)
        return await self.rendered_fetcher.fetch(url)

    async def _static_stage(self, url: str) -> StageResult:
        try:
            extraction = await self.static_fetcher.fetch(url)
        except TransientFetchFailure as exc:
            logger.warning("%s", exc)
            return Empty(exc.reason)
        # og tags and images alone do not count; only <title>/description do.
        if not extraction.meta:
            return Empty("no title or description")
        return Usable(extraction)
