from fastapi import Request

from preview_api.services.metadata import MetadataService


async def get_metadata_service(request: Request) -> MetadataService:
    return request.app.state.metadata_service
