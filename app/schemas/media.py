"""Media reference schema shared by storage backends and blog responses."""

from pydantic import BaseModel, ConfigDict, Field


class MediaAsset(BaseModel):
    """A stored image: the host's identifier plus its public URL."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "public_id": "blog/7f9c2b1e",
                "url": "https://res.cloudinary.com/demo/image/upload/blog/7f9c2b1e.jpg",
            },
        },
    )

    public_id: str = Field(description="Identifier used to delete the asset")
    url: str = Field(description="Public URL of the asset")
