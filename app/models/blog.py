"""Blog database models using SQLModel."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, DateTime, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, Relationship, SQLModel, String

from app.configs.settings import MAX_TAG_LENGTH

if TYPE_CHECKING:
    from app.models.comment import CommentDB
    from app.models.user import UserDB

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSON_VARIANT = JSON().with_variant(JSONB(), "postgresql")


class BlogTagDB(SQLModel, table=True):
    """One tag held by a blog post."""

    __tablename__ = cast("declared_attr[str]", "blog_tags")

    blog_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("blogs.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    tag: str = Field(
        sa_column=Column(String(MAX_TAG_LENGTH), primary_key=True, index=True),
    )


class BlogReactionDB(SQLModel, table=True):
    """
    A user's reaction to a blog post.

    The (blog_id, user_id) primary key holds at most one reaction per user,
    so a user is never counted in both likes and dislikes.
    """

    __tablename__ = cast("declared_attr[str]", "blog_reactions")

    blog_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("blogs.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    user_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    reaction: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="like or dislike",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class BlogViewDB(SQLModel, table=True):
    """A viewer that has already been counted for a blog post."""

    __tablename__ = cast("declared_attr[str]", "blog_views")

    blog_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("blogs.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    # User id for authenticated viewers, client address otherwise
    viewer_id: str = Field(
        sa_column=Column(String(255), primary_key=True),
    )
    viewed_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    Tags, reactions and view records live in their own tables; the
    ``tags``, ``likes`` and ``dislikes`` properties expose them in the
    shape the API returns.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (Index("ix_blogs_author_created", "author_id", "created_at"),)

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    # Foreign key to User
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.uuid)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Blog title",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog content",
    )

    # Media references ({"public_id": ..., "url": ...})
    cover_image: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSON_VARIANT, nullable=True),
        description="Cover image reference",
    )
    images: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON_VARIANT, nullable=False),
        description="Gallery image references in upload order",
    )

    view_count: int = Field(
        default=0,
        nullable=False,
        index=True,
        description="Number of distinct viewers",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    author: "UserDB" = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
    tag_links: list[BlogTagDB] = Relationship(
        sa_relationship_kwargs={
            "lazy": "selectin",
            "cascade": "all, delete-orphan",
            "order_by": "BlogTagDB.tag",
        },
    )
    reactions: list[BlogReactionDB] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin", "viewonly": True},
    )
    # Only loaded on the detail endpoint
    comments: list["CommentDB"] = Relationship(
        sa_relationship_kwargs={
            "lazy": "noload",
            "viewonly": True,
            "order_by": "CommentDB.created_at",
        },
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Getting Started with Async Python",
                "content": "Async code in Python starts with an event loop...",
                "cover_image": {
                    "public_id": "blog/cover-1",
                    "url": "https://res.cloudinary.com/demo/image/upload/blog/cover-1.jpg",
                },
                "images": [],
                "view_count": 0,
            },
        },
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]

    @property
    def likes(self) -> list[UUID]:
        return [r.user_id for r in self.reactions if r.reaction == "like"]

    @property
    def dislikes(self) -> list[UUID]:
        return [r.user_id for r in self.reactions if r.reaction == "dislike"]

    def media_public_ids(self) -> list[str]:
        """Return the public ids of every image this post owns."""
        assets = [self.cover_image, *self.images] if self.cover_image else list(self.images)
        return [asset["public_id"] for asset in assets if asset.get("public_id")]
