from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from preview_api.api.deps import get_metadata_service
from preview_api.exceptions import InvalidURL
from preview_api.schemas import RawMetadataResponse
from preview_api.services.metadata import MetadataService
from preview_api.services.validation import validate_url

router = APIRouter(tags=["legacy"])


@router.get("/", response_model=RawMetadataResponse)
async def get_raw_metadata(
    service: Annotated[MetadataService, Depends(get_metadata_service)],
    url: Optional[str] = None,
) -> RawMetadataResponse:
    """Unnormalized tags and images for ``url``, bypassing the cache."""
    try:
        extraction = await service.fetch(validate_url(url))
    except InvalidURL:
        return RawMetadataResponse(metadata=None)
    if extraction.is_empty:
        return RawMetadataResponse(metadata=None)
    return RawMetadataResponse(metadata=extraction)
