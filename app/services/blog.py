"""
Blog service.

Coordinates the blog and comment repositories with the media service so
route handlers stay "validate, call, respond". Every write that touches a
post goes through an ownership-checked lookup first.
"""

from collections.abc import Sequence
from uuid import UUID

from fastapi import UploadFile

from app.configs.settings import AUTHOR_POSTS_LIMIT, settings
from app.errors.blog import BlogNotFoundError, BlogValidationError
from app.errors.upload import CoverImageUploadError, UploadError
from app.models import BlogDB, UserDB
from app.monitoring import get_logger
from app.repositories import BlogRepository, CommentRepository
from app.repositories.blog import SortOrder
from app.schemas.blog import BlogCreate, BlogUpdate
from app.services.media import COVER_FOLDER, MediaService

logger = get_logger(__name__)


def validate_tags(tags: Sequence[str]) -> list[str]:
    """
    Check tags against the configured vocabulary.

    Args:
        tags: Candidate tags

    Returns:
        list[str]: The tags with duplicates removed, in first-seen order

    Raises:
        BlogValidationError: If any tag is not in ``BLOG_TAGS``
    """
    if any(tag not in settings.BLOG_TAGS for tag in tags):
        raise BlogValidationError("Invalid tags")
    return list(dict.fromkeys(tags))


def validate_reaction(reaction: object) -> str:
    if not isinstance(reaction, str) or reaction not in settings.REACTIONS:
        raise BlogValidationError("Invalid reactions")
    return reaction


class BlogService:
    """Business operations behind the ``/blogs`` endpoints."""

    def __init__(
        self,
        blogs: BlogRepository,
        comments: CommentRepository,
        media: MediaService,
    ) -> None:
        self.blogs = blogs
        self.comments = comments
        self.media = media

    async def list_blogs(
        self,
        *,
        tags: Sequence[str],
        title: str | None,
        sort_by: SortOrder,
        page: int,
        limit: int,
    ) -> list[BlogDB]:
        """
        Return one page of blogs matching the filters.

        Raises:
            BlogValidationError: If a tag is outside the vocabulary
            BlogNotFoundError: If the page is empty
        """
        wanted_tags = validate_tags(tags)
        blogs = await self.blogs.list_blogs(
            tags=wanted_tags,
            title=title,
            sort_by=sort_by,
            offset=(page - 1) * limit,
            limit=limit,
        )
        if not blogs:
            raise BlogNotFoundError("No blog found")
        return blogs

    async def get_blog(self, blog_id: UUID, viewer_id: str) -> BlogDB:
        """
        Return a blog with its comments and count the viewer once.

        Args:
            blog_id: Blog UUID
            viewer_id: Authenticated user id, or the client address

        Returns:
            BlogDB: The blog, with ``view_count`` reflecting this view

        Raises:
            BlogNotFoundError: If the blog does not exist
        """
        blog = await self.blogs.get_detail(blog_id)
        if blog is None:
            raise BlogNotFoundError("No Blog found with this id")

        if await self.blogs.record_view(blog, viewer_id):
            logger.debug("Counted new viewer", blog_id=str(blog_id))
        return blog

    async def create_blog(
        self,
        author: UserDB,
        data: BlogCreate,
        cover_image: UploadFile | None = None,
        images: Sequence[UploadFile] = (),
    ) -> BlogDB:
        """
        Persist a blog, then attach its cover and gallery images.

        A failed cover upload removes the just-created blog. Gallery
        images that fail, or that exceed the gallery limit, are logged
        and left out.

        Raises:
            BlogValidationError: If a tag is outside the vocabulary
            CoverImageUploadError: If the cover image cannot be stored
        """
        data = data.model_copy(update={"tags": validate_tags(data.tags)})
        images = self.media.cap_gallery(0, images)

        blog = await self.blogs.create(author.uuid, data)

        media_values: dict[str, object] = {}
        if cover_image is not None:
            try:
                cover = await self.media.upload_image(cover_image, COVER_FOLDER)
            except UploadError as e:
                logger.warning("Cover upload failed, removing new blog", blog_id=str(blog.id))
                await self.blogs.delete(blog)
                raise CoverImageUploadError from e
            media_values["cover_image"] = cover.model_dump()

        if images:
            gallery = await self.media.upload_gallery(images)
            media_values["images"] = [asset.model_dump() for asset in gallery]

        if media_values:
            blog = await self.blogs.update(blog, **media_values)

        logger.info("Blog created", blog_id=str(blog.id), author_id=str(author.uuid))
        return blog

    async def update_blog(
        self,
        blog_id: UUID,
        user: UserDB,
        data: BlogUpdate,
        cover_image: UploadFile | None = None,
        images: Sequence[UploadFile] = (),
    ) -> BlogDB:
        """
        Update a blog owned by ``user``.

        Ownership is checked before any upload, so a non-author changes
        nothing. Field, tag and image changes are written together.

        Raises:
            BlogNotFoundError: If the blog does not exist or is not owned by ``user``
            BlogValidationError: If a tag is outside the vocabulary
            UploadError: If the replacement cover image cannot be stored
        """
        blog = await self.blogs.get_owned(blog_id, user.uuid)
        if blog is None:
            raise BlogNotFoundError(
                "No blog found with this id or you are not authorized to update this blog",
            )

        tags = validate_tags(data.tags) if data.tags is not None else None
        images = self.media.cap_gallery(len(blog.images), images)

        values: dict[str, object] = data.model_dump(exclude_none=True, exclude={"tags"})

        if cover_image is not None:
            try:
                if blog.cover_image and blog.cover_image.get("public_id"):
                    await self.media.delete_asset(blog.cover_image["public_id"])
                cover = await self.media.upload_image(cover_image, COVER_FOLDER)
            except UploadError as e:
                raise UploadError("Error uploading image to Cloudinary") from e
            values["cover_image"] = cover.model_dump()

        if images:
            gallery = await self.media.upload_gallery(images)
            if gallery:
                values["images"] = [*blog.images, *(asset.model_dump() for asset in gallery)]

        updated = await self.blogs.update(blog, tags=tags, **values)
        logger.info("Blog updated", blog_id=str(blog_id), fields=sorted(values))
        return updated

    async def delete_blog(self, blog_id: UUID, user: UserDB) -> list[str]:
        """
        Delete a blog owned by ``user`` with its comments.

        The stored media is not touched here: the caller releases the
        returned public ids once the deletion is committed.

        Returns:
            list[str]: Public ids of the cover and gallery images

        Raises:
            BlogNotFoundError: If the blog does not exist or is not owned by ``user``
        """
        blog = await self.blogs.get_owned(blog_id, user.uuid)
        if blog is None:
            raise BlogNotFoundError(
                "No blog found with this id or you are not authorized to delete this blog",
            )

        public_ids = blog.media_public_ids()
        removed_comments = await self.comments.delete_for_blog(blog.id)
        await self.blogs.delete(blog)

        logger.info(
            "Blog deleted",
            blog_id=str(blog_id),
            comments=removed_comments,
            media=len(public_ids),
        )
        return public_ids

    async def react(self, blog_id: UUID, user: UserDB, reaction: object) -> BlogDB:
        """
        Set the user's reaction to a blog.

        Raises:
            BlogValidationError: If the reaction is not "like" or "dislike"
            BlogNotFoundError: If the blog does not exist
        """
        value = validate_reaction(reaction)

        blog = await self.blogs.get_by_id(blog_id)
        if blog is None:
            raise BlogNotFoundError("No blog found with this id")

        return await self.blogs.set_reaction(blog, user.uuid, value)

    async def author_posts(self, blog_id: UUID) -> list[BlogDB]:
        """
        Return the latest posts by the author of a given blog.

        Raises:
            BlogNotFoundError: If the seed blog does not exist or its author has no posts
        """
        seed = await self.blogs.get_by_id(blog_id)
        if seed is None:
            raise BlogNotFoundError("Blog not found")

        posts = await self.blogs.get_recent_by_author(seed.author_id, AUTHOR_POSTS_LIMIT)
        if not posts:
            raise BlogNotFoundError("No other blogs found by this author")
        return posts
