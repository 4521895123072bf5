from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from preview_api.models.base import Base


class MetaCache(Base):
    __tablename__ = "meta_cache"

    url: Mapped[str] = mapped_column(primary_key=True)
    created_at: Mapped[datetime]
    title: Mapped[str] = mapped_column(default="")
    description: Mapped[Optional[str]]
    image: Mapped[Optional[str]]
    site_name: Mapped[str] = mapped_column(default="")
    hostname: Mapped[str]
