from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.errors.blog import BlogNotFoundError, BlogValidationError
from app.errors.upload import CoverImageUploadError, StorageError, UploadError
from app.models import UserDB
from app.schemas.blog import BlogCreate, BlogUpdate
from app.schemas.media import MediaAsset
from app.services.blog import BlogService, validate_reaction, validate_tags


@pytest.fixture
def user() -> UserDB:
    return UserDB(uuid=uuid4(), username="writer", email="writer@example.com")


@pytest.fixture
def blogs() -> MagicMock:
    mock = MagicMock()
    for name in (
        "create",
        "update",
        "delete",
        "get_by_id",
        "get_detail",
        "get_owned",
        "list_blogs",
        "record_view",
        "set_reaction",
        "get_recent_by_author",
    ):
        setattr(mock, name, AsyncMock())
    return mock


@pytest.fixture
def comments() -> MagicMock:
    mock = MagicMock()
    mock.delete_for_blog = AsyncMock(return_value=2)
    return mock


@pytest.fixture
def media() -> MagicMock:
    mock = MagicMock()
    mock.upload_image = AsyncMock()
    mock.upload_gallery = AsyncMock(return_value=[])
    mock.delete_asset = AsyncMock(return_value=True)
    mock.release = AsyncMock()
    mock.cap_gallery = MagicMock(side_effect=lambda _count, files: list(files))
    return mock


@pytest.fixture
def service(blogs: MagicMock, comments: MagicMock, media: MagicMock) -> BlogService:
    return BlogService(blogs, comments, media)


def test_validate_tags_dedupes_in_order() -> None:
    assert validate_tags(["tech", "life", "tech"]) == ["tech", "life"]


def test_validate_tags_rejects_unknown() -> None:
    with pytest.raises(BlogValidationError, match="Invalid tags"):
        validate_tags(["tech", "Tech"])


def test_validate_reaction() -> None:
    assert validate_reaction("like") == "like"
    for value in ("LIKE", None, 5, ["like"]):
        with pytest.raises(BlogValidationError, match="Invalid reactions"):
            validate_reaction(value)


@pytest.mark.asyncio
async def test_list_blogs_computes_offset(service: BlogService, blogs: MagicMock) -> None:
    blogs.list_blogs.return_value = [MagicMock()]

    await service.list_blogs(tags=[], title=None, sort_by="newest", page=3, limit=5)

    assert blogs.list_blogs.call_args.kwargs["offset"] == 10
    assert blogs.list_blogs.call_args.kwargs["limit"] == 5


@pytest.mark.asyncio
async def test_create_blog_cover_failure_compensates(
    service: BlogService,
    blogs: MagicMock,
    media: MagicMock,
    user: UserDB,
) -> None:
    created = MagicMock(id=uuid4())
    blogs.create.return_value = created
    media.upload_image.side_effect = StorageError()

    with pytest.raises(CoverImageUploadError):
        await service.create_blog(user, BlogCreate(title="t", content="c"), cover_image=MagicMock())

    blogs.delete.assert_awaited_once_with(created)
    blogs.update.assert_not_called()


@pytest.mark.asyncio
async def test_create_blog_writes_media_once(
    service: BlogService,
    blogs: MagicMock,
    media: MagicMock,
    user: UserDB,
) -> None:
    created = MagicMock(id=uuid4())
    blogs.create.return_value = created
    media.upload_image.return_value = MediaAsset(public_id="c", url="https://cdn.test/c.jpg")
    media.upload_gallery.return_value = [MediaAsset(public_id="g", url="https://cdn.test/g.jpg")]

    await service.create_blog(
        user,
        BlogCreate(title="t", content="c", tags=["tech"]),
        cover_image=MagicMock(),
        images=[MagicMock()],
    )

    blogs.update.assert_awaited_once_with(
        created,
        cover_image={"public_id": "c", "url": "https://cdn.test/c.jpg"},
        images=[{"public_id": "g", "url": "https://cdn.test/g.jpg"}],
    )


@pytest.mark.asyncio
async def test_update_blog_checks_owner_before_uploading(
    service: BlogService,
    blogs: MagicMock,
    media: MagicMock,
    user: UserDB,
) -> None:
    blogs.get_owned.return_value = None

    with pytest.raises(BlogNotFoundError):
        await service.update_blog(uuid4(), user, BlogUpdate(title="x"), cover_image=MagicMock())

    media.upload_image.assert_not_called()
    media.delete_asset.assert_not_called()
    blogs.update.assert_not_called()


@pytest.mark.asyncio
async def test_update_blog_cover_failure_leaves_blog(
    service: BlogService,
    blogs: MagicMock,
    media: MagicMock,
    user: UserDB,
) -> None:
    blogs.get_owned.return_value = MagicMock(images=[], cover_image=None)
    media.upload_image.side_effect = StorageError()

    with pytest.raises(UploadError, match="Error uploading image to Cloudinary"):
        await service.update_blog(uuid4(), user, BlogUpdate(title="x"), cover_image=MagicMock())

    blogs.update.assert_not_called()


@pytest.mark.asyncio
async def test_delete_blog_returns_media_without_releasing(
    service: BlogService,
    blogs: MagicMock,
    comments: MagicMock,
    media: MagicMock,
    user: UserDB,
) -> None:
    blog = MagicMock(id=uuid4())
    blog.media_public_ids.return_value = ["c", "g"]
    blogs.get_owned.return_value = blog
    calls: list[str] = []
    comments.delete_for_blog.side_effect = lambda _: calls.append("comments") or 0
    blogs.delete.side_effect = lambda _: calls.append("blog")

    assert await service.delete_blog(blog.id, user) == ["c", "g"]

    assert calls == ["comments", "blog"]
    media.release.assert_not_called()
    media.delete_asset.assert_not_called()


@pytest.mark.asyncio
async def test_react_validates_before_lookup(
    service: BlogService,
    blogs: MagicMock,
    user: UserDB,
) -> None:
    with pytest.raises(BlogValidationError):
        await service.react(uuid4(), user, "love")

    blogs.get_by_id.assert_not_called()


@pytest.mark.asyncio
async def test_author_posts_empty(service: BlogService, blogs: MagicMock) -> None:
    blogs.get_by_id.return_value = MagicMock(author_id=uuid4())
    blogs.get_recent_by_author.return_value = []

    with pytest.raises(BlogNotFoundError, match="No other blogs found by this author"):
        await service.author_posts(uuid4())
