from preview_api.models.base import Base
from preview_api.models.meta_cache import MetaCache

__all__ = ["Base", "MetaCache"]
