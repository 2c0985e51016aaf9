# app/routes/blog.py

"""
Blog Routes.

Provides CRUD endpoints, listing and reactions for blog posts with
standardized documentation and rate limiting.

Summary
-------
Endpoints include:
  - List blogs (tag / title filters, sorting, pagination)
  - Get blog by id (counts one view per viewer)
  - Create blog (multipart, with cover and gallery images)
  - Update blog (author only)
  - Delete blog (author only, cascades comments and media)
  - React to blog (like / dislike)
  - Author's recent posts

Dependencies
------------
  - `BlogServiceDep`: Service bundling the blog and comment repositories and media.
  - `UserDBDep`: Authenticated user (401 envelope when missing or invalid).
  - `ViewerDep`: User id or client address used for view counting.

Rate Limiting
-------------
Every endpoint shares the default per-client limit and documents its `429`
response.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Body, File, Form, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.configs.settings import MAX_CONTENT_LENGTH, MAX_TITLE_LENGTH, settings
from app.dependencies import BlogQueryListDep, BlogServiceDep, UserDBDep, ViewerDep
from app.managers import limiter
from app.schemas import (
    BlogCreate,
    BlogDetail,
    BlogDetailEnvelope,
    BlogEnvelope,
    BlogListEnvelope,
    BlogListItem,
    BlogResponse,
    BlogUpdate,
    MessageEnvelope,
    ReactionEnvelope,
    ReactionRequest,
)
from app.utils.helpers import split_csv

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

RATE_LIMITED = {
    "description": "Rate limit exceeded",
    "content": {
        "application/json": {
            "example": {
                "status": "error",
                "message": "Too many requests from this IP, please try again later",
            },
        },
    },
}


def not_found(message: str) -> dict:
    return {
        "description": "Not found",
        "content": {"application/json": {"example": {"status": "error", "message": message}}},
    }


def bad_request(message: str) -> dict:
    return {
        "description": "Bad request",
        "content": {"application/json": {"example": {"status": "error", "message": message}}},
    }


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    summary="List blogs",
    description="List blogs filtered by tags and title, sorted and paginated.",
    responses={
        400: bad_request("Invalid tags"),
        404: not_found("No blog found"),
        429: RATE_LIMITED,
    },
    operation_id="blogs_list",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def list_blogs(
    request: Request,
    response: Response,
    query: BlogQueryListDep,
    service: BlogServiceDep,
) -> BlogListEnvelope:
    """
    List blogs.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    query : BlogListQuery
        Tags, title, sort order and pagination.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogListEnvelope
        Page of blogs with author profiles.

    Raises
    ------
    BlogValidationError
        If a tag is outside the vocabulary.
    BlogNotFoundError
        If the page is empty.
    """
    blogs = await service.list_blogs(
        tags=query.tags,
        title=query.title,
        sort_by=query.sort_by,
        page=query.page,
        limit=query.limit,
    )
    return BlogListEnvelope(
        results=len(blogs),
        data=[BlogListItem.model_validate(blog) for blog in blogs],
    )


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogDetailEnvelope,
    summary="Get blog by ID",
    description="Retrieve a blog with its comments. Counts one view per viewer.",
    responses={
        404: not_found("No Blog found with this id"),
        429: RATE_LIMITED,
    },
    operation_id="blogs_get_by_id",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def get_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    viewer_id: ViewerDep,
    service: BlogServiceDep,
) -> BlogDetailEnvelope:
    """
    Get blog by ID and count the viewer.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog_id : UUID
        Blog identifier.
    viewer_id : str
        Authenticated user id, or the client address.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogDetailEnvelope
        Blog with comments and reaction / view counters.

    Raises
    ------
    BlogNotFoundError
        If blog not found.
    """
    blog = await service.get_blog(blog_id, viewer_id)
    return BlogDetailEnvelope(
        likes=len(blog.likes),
        dislikes=len(blog.dislikes),
        views=blog.view_count,
        data=BlogDetail.model_validate(blog),
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    status_code=HTTP_201_CREATED,
    summary="Create a new blog post",
    description="Create a blog post from multipart form data with optional images.",
    responses={
        400: bad_request("Invalid tags"),
        500: {
            "description": "Cover image upload failed",
            "content": {
                "application/json": {
                    "example": {
                        "status": "error",
                        "message": "Error uploading cover image to Cloudinary",
                    },
                },
            },
        },
        429: RATE_LIMITED,
    },
    operation_id="blogs_create",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def create_blog(
    request: Request,
    response: Response,
    title: Annotated[str, Form(min_length=1, max_length=MAX_TITLE_LENGTH)],
    content: Annotated[str, Form(min_length=1, max_length=MAX_CONTENT_LENGTH)],
    user: UserDBDep,
    service: BlogServiceDep,
    tags: Annotated[str | None, Form(description="Comma-separated tags")] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> BlogEnvelope:
    """
    Create a new blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    title : str
        Blog title.
    content : str
        Blog content.
    user : UserDB
        Authenticated author.
    service : BlogService
        Blog service dependency.
    tags : str | None
        Comma-separated tags.
    cover_image : UploadFile | None
        Optional cover image.
    images : list[UploadFile] | None
        Optional gallery images.

    Returns
    -------
    BlogEnvelope
        Created blog data.

    Raises
    ------
    BlogValidationError
        If a tag is outside the vocabulary.
    CoverImageUploadError
        If the cover image cannot be stored.
    """
    blog = await service.create_blog(
        user,
        BlogCreate(title=title, content=content, tags=split_csv(tags)),
        cover_image=cover_image,
        images=images or [],
    )
    return BlogEnvelope(message="created successfully", data=BlogResponse.model_validate(blog))


@router.patch(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogEnvelope,
    summary="Update a blog post",
    description="Update fields and images of a blog owned by the caller.",
    responses={
        404: not_found(
            "No blog found with this id or you are not authorized to update this blog",
        ),
        500: {
            "description": "Cover image upload failed",
            "content": {
                "application/json": {
                    "example": {"status": "error", "message": "Error uploading image to Cloudinary"},
                },
            },
        },
        429: RATE_LIMITED,
    },
    operation_id="blogs_update",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def update_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    user: UserDBDep,
    service: BlogServiceDep,
    title: Annotated[str | None, Form(min_length=1, max_length=MAX_TITLE_LENGTH)] = None,
    content: Annotated[str | None, Form(min_length=1, max_length=MAX_CONTENT_LENGTH)] = None,
    tags: Annotated[str | None, Form(description="Comma-separated tags")] = None,
    cover_image: Annotated[UploadFile | None, File(alias="coverImage")] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> BlogEnvelope:
    """
    Update a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog_id : UUID
        Blog identifier.
    user : UserDB
        Authenticated user; must be the author.
    service : BlogService
        Blog service dependency.
    title, content, tags : str | None
        Replacement values; omitted fields are kept.
    cover_image : UploadFile | None
        Replacement cover image.
    images : list[UploadFile] | None
        Gallery images to append.

    Returns
    -------
    BlogEnvelope
        Updated blog data.

    Raises
    ------
    BlogNotFoundError
        If the blog does not exist or the caller is not its author.
    UploadError
        If the replacement cover image cannot be stored.
    """
    blog = await service.update_blog(
        blog_id,
        user,
        BlogUpdate(
            title=title,
            content=content,
            tags=split_csv(tags) if tags is not None else None,
        ),
        cover_image=cover_image,
        images=images or [],
    )
    return BlogEnvelope(message="updated successfully", data=BlogResponse.model_validate(blog))


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageEnvelope,
    summary="Delete a blog post",
    description="Delete a blog owned by the caller with its comments and media.",
    responses={
        404: not_found(
            "No blog found with this id or you are not authorized to delete this blog",
        ),
        429: RATE_LIMITED,
    },
    operation_id="blogs_delete",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def delete_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    user: UserDBDep,
    background_tasks: BackgroundTasks,
    service: BlogServiceDep,
) -> MessageEnvelope:
    """
    Delete a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog_id : UUID
        Blog identifier.
    user : UserDB
        Authenticated user; must be the author.
    background_tasks : BackgroundTasks
        Runs the media cleanup once the deletion is committed.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    MessageEnvelope
        Confirmation message.

    Raises
    ------
    BlogNotFoundError
        If the blog does not exist or the caller is not its author.
    """
    public_ids = await service.delete_blog(blog_id, user)
    # Storage failures are logged by release and never reach the caller
    background_tasks.add_task(service.media.release, public_ids)
    return MessageEnvelope(message="deleted successfully")


@router.post(
    "/{blog_id}/react",
    response_class=ORJSONResponse,
    response_model=ReactionEnvelope,
    summary="React to a blog post",
    description="Like or dislike a blog; a new reaction replaces the previous one.",
    responses={
        400: bad_request("Invalid reactions"),
        404: not_found("No blog found with this id"),
        429: RATE_LIMITED,
    },
    operation_id="blogs_react",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def react_to_blog(
    request: Request,
    response: Response,
    blog_id: UUID,
    body: Annotated[ReactionRequest, Body()],
    user: UserDBDep,
    service: BlogServiceDep,
) -> ReactionEnvelope:
    """
    React to a blog post.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog_id : UUID
        Blog identifier.
    body : ReactionRequest
        The reaction ("like" or "dislike").
    user : UserDB
        Authenticated user.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    ReactionEnvelope
        Likes and dislikes after the reaction, plus the caller's state.

    Raises
    ------
    BlogValidationError
        If the reaction is not recognised.
    BlogNotFoundError
        If blog not found.
    """
    blog = await service.react(blog_id, user, body.reaction)
    likes, dislikes = blog.likes, blog.dislikes
    return ReactionEnvelope(
        message="Reacted successfully",
        likes=likes,
        dislikes=dislikes,
        is_liked=user.uuid in likes,
        is_disliked=user.uuid in dislikes,
    )


@router.get(
    "/{blog_id}/author-posts",
    response_class=ORJSONResponse,
    response_model=BlogListEnvelope,
    summary="Author's recent posts",
    description="Latest posts by the author of the given blog.",
    responses={
        404: not_found("Blog not found"),
        429: RATE_LIMITED,
    },
    operation_id="blogs_author_posts",
)
@limiter.limit(settings.RATE_LIMIT_DEFAULT)
async def get_author_posts(
    request: Request,
    response: Response,
    blog_id: UUID,
    service: BlogServiceDep,
) -> BlogListEnvelope:
    """
    Get the most recent posts by a blog's author.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    blog_id : UUID
        Blog whose author is looked up.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogListEnvelope
        Up to four posts, newest first.

    Raises
    ------
    BlogNotFoundError
        If the seed blog does not exist.
    """
    posts = await service.author_posts(blog_id)
    return BlogListEnvelope(
        results=len(posts),
        data=[BlogListItem.model_validate(post) for post in posts],
    )
