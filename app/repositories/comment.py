"""Comment repository for database operations."""

from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.comment import CommentDB


class CommentRepository:
    """Repository for the comment operations the blog service needs."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def delete_for_blog(self, blog_id: UUID) -> int:
        """
        Delete every comment attached to a blog.

        Args:
            blog_id: Blog UUID

        Returns:
            int: Number of deleted comments
        """
        result = await self.session.execute(
            delete(CommentDB)
            .where(CommentDB.blog_id == blog_id)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount
