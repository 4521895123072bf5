from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from preview_api.api.deps import get_metadata_service
from preview_api.schemas import ErrorResponse, MetadataResponse
from preview_api.services.metadata import MetadataService

router = APIRouter(prefix="/v2", tags=["metadata"])


@router.get(
    "",
    response_model=MetadataResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": MetadataResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_metadata(
    service: Annotated[MetadataService, Depends(get_metadata_service)],
    url: Optional[str] = None,
) -> MetadataResponse:
    """Return normalized preview metadata for ``url``."""
    metadata = await service.extract(url)
    return MetadataResponse(metadata=metadata)
