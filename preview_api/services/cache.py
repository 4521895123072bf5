import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from preview_api.models import MetaCache
from preview_api.schemas import LinkMetadata

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    # Stored naive so the value survives backends without timezone support.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CacheGateway:
    """Previously extracted metadata keyed by URL.

    Records older than the retention window are deleted when they are read;
    there is no background eviction. Store failures are logged and reported
    as ``False``, lookup failures as a miss.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        retention: timedelta = timedelta(days=10),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.retention = retention
        self.clock = clock

    async def lookup(self, url: str) -> Optional[MetaCache]:
        try:
            async with self.session_factory() as session:
                record = await session.get(MetaCache, url)
                if record is None:
                    return None
                if self.clock() - record.created_at > self.retention:
                    logger.info("Cache entry for %s expired", url)
                    await session.execute(delete(MetaCache).where(MetaCache.url == url))
                    await session.commit()
                    return None
                return record
        except (SQLAlchemyError, OSError):
            logger.warning("Cache unavailable, lookup of %s skipped", url, exc_info=True)
            return None

    async def store(self, url: str, metadata: LinkMetadata) -> bool:
        record = MetaCache(
            url=url,
            created_at=self.clock(),
            title=metadata.title,
            description=metadata.description,
            image=metadata.image,
            site_name=metadata.site_name,
            hostname=metadata.hostname,
        )
        try:
            async with self.session_factory() as session:
                await session.merge(record)
                await session.commit()
        except (SQLAlchemyError, OSError):
            logger.warning("Cache unavailable, result for %s not stored", url, exc_info=True)
            return False
        return True
