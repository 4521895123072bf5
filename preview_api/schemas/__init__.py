from preview_api.schemas.metadata import (
    ErrorResponse,
    ImageSource,
    LinkMetadata,
    MetadataResponse,
    RawExtraction,
    RawMetadataResponse,
)

__all__ = [
    "ErrorResponse",
    "ImageSource",
    "LinkMetadata",
    "MetadataResponse",
    "RawExtraction",
    "RawMetadataResponse",
]
