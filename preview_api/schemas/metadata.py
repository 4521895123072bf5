from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ImageSource(BaseModel):
    src: str


class RawExtraction(BaseModel):
    """Tags and images read from one fetch of a page."""

    meta: dict[str, str] = Field(default_factory=dict)
    og: dict[str, str] = Field(default_factory=dict)
    images: list[ImageSource] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.meta or self.og or self.images)


class LinkMetadata(BaseModel):
    """Normalized preview data returned to callers and kept in the cache."""

    title: str = ""
    description: Optional[str] = None
    image: Optional[str] = None
    site_name: str = Field(
        default="",
        validation_alias=AliasChoices("site_name", "siteName"),
        serialization_alias="siteName",
    )
    hostname: str

    model_config = ConfigDict(from_attributes=True)


class MetadataResponse(BaseModel):
    metadata: Optional[LinkMetadata] = None


class RawMetadataResponse(BaseModel):
    metadata: Optional[RawExtraction] = None


class ErrorResponse(BaseModel):
    error: str
