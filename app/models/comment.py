"""Comment database model using SQLModel."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Text, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, Relationship, SQLModel

from app.models.blog import JSON_VARIANT

if TYPE_CHECKING:
    from app.models.user import UserDB


class CommentDB(SQLModel, table=True):
    """
    Comment on a blog post.

    Comments are written by another service; this one reads them on the
    detail endpoint and deletes them together with their post.
    """

    __tablename__ = cast("declared_attr[str]", "comments")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    blog_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("blogs.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
    )
    user_id: UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    comment: str = Field(sa_column=Column(Text, nullable=False))
    # User ids that liked the comment
    likes: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON_VARIANT, nullable=False),
    )
    replies: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON_VARIANT, nullable=False),
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    user: "UserDB" = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
