from fastapi import APIRouter

from preview_api.api import legacy
from preview_api.api.v2 import metadata

api_router = APIRouter()
api_router.include_router(metadata.router)
api_router.include_router(legacy.router)

__all__ = ["api_router"]
