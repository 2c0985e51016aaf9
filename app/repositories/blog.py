"""Blog repository for database operations."""

from datetime import UTC, datetime
from typing import Any, Literal, TypeAlias
from uuid import UUID

from sqlalchemy import Table, delete, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.configs.settings import AUTHOR_POSTS_LIMIT
from app.errors.database import DatabaseError
from app.models.blog import BlogDB, BlogReactionDB, BlogTagDB, BlogViewDB
from app.monitoring import get_logger
from app.schemas.blog import BlogCreate

logger = get_logger(__name__)

SortOrder: TypeAlias = Literal["mostViewed", "mostLiked", "newest"]


def likes_count_expression() -> Any:
    """Correlated subquery counting the live "like" reactions of a blog."""
    return (
        select(func.count())
        .select_from(BlogReactionDB)
        .where(
            BlogReactionDB.blog_id == BlogDB.id,
            BlogReactionDB.reaction == "like",
        )
        .correlate(BlogDB)
        .scalar_subquery()
    )


class BlogRepository:
    """
    Repository for Blog database operations.

    This class implements the repository pattern for Blog entities,
    including the tag, reaction and view tables that hang off a post.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    def _upsert(self, table: Table) -> Any:
        """Return an INSERT supporting ON CONFLICT for the bound dialect."""
        if self.session.get_bind().dialect.name == "postgresql":
            return pg_insert(table)
        return sqlite_insert(table)

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            error_msg = str(e.orig) if e.orig else str(e)
            logger.exception("Blog write violated a constraint")
            raise DatabaseError(detail=f"Database integrity error: {error_msg}") from e

    async def create(self, author_id: UUID, blog: BlogCreate) -> BlogDB:
        """
        Create a new blog post in the database.

        Args:
            author_id: UUID of the blog author
            blog: Validated blog fields

        Returns:
            BlogDB: Created blog with author and tags loaded

        Raises:
            DatabaseError: For database integrity errors
        """
        now = datetime.now(tz=UTC)
        db_blog = BlogDB(
            author_id=author_id,
            title=blog.title,
            content=blog.content,
            cover_image=None,
            images=[],
            view_count=0,
            created_at=now,
            updated_at=now,
            tag_links=[BlogTagDB(tag=tag) for tag in dict.fromkeys(blog.tags)],
        )

        self.session.add(db_blog)
        await self._flush()
        return await self._reload(db_blog.id)

    async def _reload(self, blog_id: UUID) -> BlogDB:
        """Re-read a blog the session already holds, overwriting stale state."""
        result = await self.session.execute(
            select(BlogDB).where(BlogDB.id == blog_id).execution_options(populate_existing=True),
        )
        return result.scalar_one()

    async def get_by_id(self, blog_id: UUID) -> BlogDB | None:
        """
        Get blog by ID.

        Args:
            blog_id: Blog UUID

        Returns:
            BlogDB | None: Blog if found, None otherwise
        """
        result = await self.session.execute(select(BlogDB).where(BlogDB.id == blog_id))
        return result.scalar_one_or_none()

    async def get_detail(self, blog_id: UUID) -> BlogDB | None:
        """
        Get blog by ID together with its comments and their authors.

        Args:
            blog_id: Blog UUID

        Returns:
            BlogDB | None: Blog if found, None otherwise
        """
        result = await self.session.execute(
            select(BlogDB)
            .where(BlogDB.id == blog_id)
            .options(selectinload(BlogDB.comments))
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def get_owned(self, blog_id: UUID, author_id: UUID) -> BlogDB | None:
        """
        Get blog by ID only if it belongs to the given author.

        Args:
            blog_id: Blog UUID
            author_id: Expected author UUID

        Returns:
            BlogDB | None: Blog if found and owned, None otherwise
        """
        result = await self.session.execute(
            select(BlogDB).where(BlogDB.id == blog_id, BlogDB.author_id == author_id),
        )
        return result.scalar_one_or_none()

    async def list_blogs(
        self,
        *,
        tags: list[str] | None = None,
        title: str | None = None,
        sort_by: SortOrder = "newest",
        offset: int = 0,
        limit: int = 10,
    ) -> list[BlogDB]:
        """
        List blogs with filtering, sorting and pagination.

        Args:
            tags: Keep blogs holding at least one of these tags
            title: Case-insensitive substring of the title
            sort_by: "mostViewed", "mostLiked" or "newest"
            offset: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            list[BlogDB]: Matching blogs for the requested page
        """
        statement = select(BlogDB)

        if tags:
            statement = statement.where(
                BlogDB.id.in_(select(BlogTagDB.blog_id).where(BlogTagDB.tag.in_(tags))),
            )
        if title:
            statement = statement.where(BlogDB.title.icontains(title, autoescape=True))

        if sort_by == "mostViewed":
            statement = statement.order_by(BlogDB.view_count.desc(), BlogDB.created_at.desc())
        elif sort_by == "mostLiked":
            statement = statement.order_by(
                likes_count_expression().desc(),
                BlogDB.created_at.desc(),
            )
        else:
            statement = statement.order_by(BlogDB.created_at.desc())

        statement = statement.order_by(BlogDB.id).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_recent_by_author(
        self,
        author_id: UUID,
        limit: int = AUTHOR_POSTS_LIMIT,
    ) -> list[BlogDB]:
        """
        Get an author's most recent blogs.

        Args:
            author_id: Author UUID
            limit: Maximum number of records to return

        Returns:
            list[BlogDB]: Blogs ordered newest first
        """
        result = await self.session.execute(
            select(BlogDB)
            .where(BlogDB.author_id == author_id)
            .order_by(BlogDB.created_at.desc(), BlogDB.id)
            .limit(limit),
        )
        return list(result.scalars().all())

    async def record_view(self, blog: BlogDB, viewer_id: str) -> bool:
        """
        Count a view once per viewer.

        The view row and the counter increment happen in the same
        transaction; a viewer already on record changes nothing.

        Args:
            blog: Blog being viewed
            viewer_id: User id or client address of the viewer

        Returns:
            bool: True if this was the viewer's first view
        """
        views = BlogViewDB.__table__
        inserted = await self.session.execute(
            self._upsert(views)
            .values(blog_id=blog.id, viewer_id=viewer_id, viewed_at=datetime.now(tz=UTC))
            .on_conflict_do_nothing(index_elements=[views.c.blog_id, views.c.viewer_id])
            .returning(views.c.blog_id),
        )
        if inserted.first() is None:
            return False

        await self.session.execute(
            update(BlogDB)
            .where(BlogDB.id == blog.id)
            .values(view_count=BlogDB.view_count + 1)
            .execution_options(synchronize_session=False),
        )
        await self.session.refresh(blog, attribute_names=["view_count"])
        return True

    async def set_reaction(self, blog: BlogDB, user_id: UUID, reaction: str) -> BlogDB:
        """
        Record a user's reaction, replacing any previous one.

        Args:
            blog: Blog being reacted to
            user_id: Reacting user
            reaction: "like" or "dislike"

        Returns:
            BlogDB: Blog with its reactions reloaded
        """
        reactions = BlogReactionDB.__table__
        statement = self._upsert(reactions).values(
            blog_id=blog.id,
            user_id=user_id,
            reaction=reaction,
            created_at=datetime.now(tz=UTC),
        )
        await self.session.execute(
            statement.on_conflict_do_update(
                index_elements=[reactions.c.blog_id, reactions.c.user_id],
                set_={"reaction": statement.excluded.reaction},
            ),
        )
        return await self._reload(blog.id)

    async def update(
        self,
        blog: BlogDB,
        *,
        tags: list[str] | None = None,
        **values: Any,
    ) -> BlogDB:
        """
        Apply field, tag and media changes to a blog in one write.

        Args:
            blog: Blog to update
            tags: Replacement tag set, or None to keep the current tags
            **values: Column values to overwrite (title, content, cover_image, images)

        Returns:
            BlogDB: Updated blog

        Raises:
            DatabaseError: For database integrity errors
        """
        if tags is not None:
            wanted = list(dict.fromkeys(tags))
            current = set(blog.tags)
            blog.tag_links = [link for link in blog.tag_links if link.tag in wanted] + [
                BlogTagDB(tag=tag) for tag in wanted if tag not in current
            ]

        for field, value in values.items():
            setattr(blog, field, value)
        blog.updated_at = datetime.now(tz=UTC)

        await self._flush()
        return await self._reload(blog.id)

    async def delete(self, blog: BlogDB) -> None:
        """
        Delete a blog together with its reactions, views and tags.

        Args:
            blog: Blog to delete
        """
        await self.session.execute(
            delete(BlogReactionDB)
            .where(BlogReactionDB.blog_id == blog.id)
            .execution_options(synchronize_session=False),
        )
        await self.session.execute(
            delete(BlogViewDB)
            .where(BlogViewDB.blog_id == blog.id)
            .execution_options(synchronize_session=False),
        )
        await self.session.delete(blog)
        await self._flush()
