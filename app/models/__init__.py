"""Database models for the application."""

from app.models.blog import BlogDB, BlogReactionDB, BlogTagDB, BlogViewDB
from app.models.comment import CommentDB
from app.models.user import UserDB

__all__ = ["BlogDB", "BlogReactionDB", "BlogTagDB", "BlogViewDB", "CommentDB", "UserDB"]
