"""
Blog schemas.

Request models carry validated input into the service layer; response
models shape the JSON envelopes returned by the ``/blogs`` endpoints.
Response field names are camelCase on the wire (``coverImage``,
``createdAt``) and snake_case in Python.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.configs.settings import MAX_CONTENT_LENGTH, MAX_TITLE_LENGTH
from app.schemas.media import MediaAsset


class BlogCreate(BaseModel):
    """Validated fields for a new blog post."""

    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    tags: list[str] = Field(default_factory=list)


class BlogUpdate(BaseModel):
    """Blog update model (all fields optional)."""

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=MAX_CONTENT_LENGTH)
    tags: list[str] | None = None


class ReactionRequest(BaseModel):
    """Body of the react endpoint."""

    model_config = ConfigDict(json_schema_extra={"example": {"reaction": "like"}})

    # Validated by the service
    reaction: Any = Field(default=None, description="Either 'like' or 'dislike'")


class AuthorSummary(BaseModel):
    """Author information for blog responses (without sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(validation_alias=AliasChoices("id", "uuid"))
    name: str | None = None
    avatar: str | None = None
    role: str


class AuthorProfile(AuthorSummary):
    """Author information attached to listed posts."""

    bio: str | None = None


class CommentAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str | None = None
    avatar: str | None = None


class CommentResponse(BaseModel):
    """Comment as shown under a post (without a reference back to the post)."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    user: CommentAuthor
    comment: str
    likes: list[str] = Field(default_factory=list)
    replies: list[dict[str, Any]] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")


class BlogBase(BaseModel):
    """Fields shared by every blog representation."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: UUID
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    cover_image: MediaAsset | None = Field(default=None, alias="coverImage")
    images: list[MediaAsset] = Field(default_factory=list)
    view_count: int = Field(default=0, alias="views")
    likes: list[UUID] = Field(default_factory=list)
    dislikes: list[UUID] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class BlogResponse(BlogBase):
    """Blog returned after a write."""

    author: AuthorSummary


class BlogListItem(BlogBase):
    """Blog as it appears in listings."""

    author: AuthorProfile


class BlogDetail(BlogResponse):
    """Blog with its comments."""

    comments: list[CommentResponse] = Field(default_factory=list)


class MessageEnvelope(BaseModel):
    status: Literal["success"] = "success"
    message: str


class BlogEnvelope(MessageEnvelope):
    data: BlogResponse


class BlogListEnvelope(BaseModel):
    status: Literal["success"] = "success"
    results: int
    data: list[BlogListItem]


class BlogDetailEnvelope(BaseModel):
    """Single post plus its reaction and view counters."""

    status: Literal["success"] = "success"
    likes: int
    dislikes: int
    views: int
    data: BlogDetail


class ReactionEnvelope(MessageEnvelope):
    """Reaction state of a post after the caller reacted."""

    model_config = ConfigDict(populate_by_name=True)

    likes: list[UUID]
    dislikes: list[UUID]
    is_liked: bool = Field(alias="isLiked")
    is_disliked: bool = Field(alias="isDisliked")
