# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read once at import time, so the environment must be set
# before the app is imported anywhere
_TEST_TRUSTED_HOSTS = "localhost,127.0.0.1,0.0.0.0,host.docker.internal,testserver,test"
os.environ["TRUSTED_HOSTS"] = _TEST_TRUSTED_HOSTS
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="blog-uploads-")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from io import BytesIO  # noqa: E402
from typing import Any  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession  # noqa: E402

from app.db import get_session  # noqa: E402
from app.dependencies import get_media_service  # noqa: E402
from app.main import app  # noqa: E402
from app.managers.rate_limiter import limiter  # noqa: E402
from app.managers.token_manager import create_access_token  # noqa: E402
from app.models import BlogDB, BlogReactionDB, BlogTagDB, CommentDB, UserDB  # noqa: E402
from app.schemas.media import MediaAsset  # noqa: E402
from app.services.media import MediaService  # noqa: E402

SessionMaker = async_sessionmaker[SQLModelAsyncSession]


class FakeStorage:
    """In-memory storage backend recording every upload and delete."""

    def __init__(self) -> None:
        self.uploaded: list[MediaAsset] = []
        self.deleted: list[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload(self, file_data: bytes, content_type: str, folder: str) -> MediaAsset:
        if self.fail_uploads:
            raise RuntimeError("storage unavailable")
        public_id = f"blog/{folder}/{len(self.uploaded) + 1}"
        asset = MediaAsset(
            public_id=public_id,
            url=f"https://res.cloudinary.com/demo/image/upload/{public_id}.jpg",
        )
        self.uploaded.append(asset)
        return asset

    async def delete(self, public_id: str) -> bool:
        if self.fail_deletes:
            raise RuntimeError("storage unavailable")
        self.deleted.append(public_id)
        return True


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    img = Image.new("RGB", (200, 200), color="red")
    buffer = BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with every table created."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def db(engine: AsyncEngine) -> SessionMaker:
    """Session factory bound to the test database."""
    return async_sessionmaker(
        engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(db: SessionMaker) -> AsyncGenerator[AsyncSession]:
    async with db() as db_session:
        yield db_session


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
async def client(db: SessionMaker, storage: FakeStorage) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client wired to the test database and storage."""

    async def override_session() -> AsyncGenerator[AsyncSession]:
        async with db() as request_session:
            try:
                yield request_session
                await request_session.commit()
            except Exception:
                await request_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_media_service] = lambda: MediaService(storage=storage)
    limiter.enabled = False

    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac

    limiter.enabled = True
    app.dependency_overrides = {}


@pytest.fixture
def make_user(db: SessionMaker) -> Callable[..., Awaitable[UserDB]]:
    """Factory persisting a user."""

    async def _make_user(username: str, **fields: Any) -> UserDB:
        user = UserDB(
            uuid=uuid4(),
            username=username,
            email=f"{username}@example.com",
            name=fields.pop("name", username.title()),
            **fields,
        )
        async with db() as db_session:
            db_session.add(user)
            await db_session.commit()
        return user

    return _make_user


@pytest.fixture
async def author(make_user: Callable[..., Awaitable[UserDB]]) -> UserDB:
    return await make_user("author", bio="Writes about software", avatar="https://x.test/a.png")


@pytest.fixture
async def reader(make_user: Callable[..., Awaitable[UserDB]]) -> UserDB:
    return await make_user("reader")


@pytest.fixture
def bearer() -> Callable[[UserDB], dict[str, str]]:
    """Build auth headers with a valid access token for a user."""

    def _bearer(user: UserDB) -> dict[str, str]:
        token = create_access_token(
            user_id=user.uuid,
            username=user.username,
            expires_delta=timedelta(minutes=30),
        )
        return {"Authorization": f"Bearer {token}"}

    return _bearer


@pytest.fixture
def auth_headers(author: UserDB, bearer: Callable[[UserDB], dict[str, str]]) -> dict[str, str]:
    return bearer(author)


@pytest.fixture
def reader_headers(reader: UserDB, bearer: Callable[[UserDB], dict[str, str]]) -> dict[str, str]:
    return bearer(reader)


@pytest.fixture
def make_blog(db: SessionMaker) -> Callable[..., Awaitable[BlogDB]]:
    """
    Factory persisting a blog directly, bypassing the service layer.

    ``age`` pushes ``created_at`` into the past so ordering is deterministic.
    """

    async def _make_blog(
        author: UserDB,
        title: str = "My First Blog Post",
        *,
        content: str = "Hello from my first post.",
        tags: list[str] | None = None,
        age: timedelta = timedelta(0),
        view_count: int = 0,
        cover_image: dict[str, Any] | None = None,
        images: list[dict[str, Any]] | None = None,
    ) -> BlogDB:
        created = datetime.now(tz=UTC) - age
        blog = BlogDB(
            author_id=author.uuid,
            title=title,
            content=content,
            cover_image=cover_image,
            images=images or [],
            view_count=view_count,
            created_at=created,
            updated_at=created,
            tag_links=[BlogTagDB(tag=tag) for tag in tags or []],
        )
        async with db() as db_session:
            db_session.add(blog)
            await db_session.commit()
        return blog

    return _make_blog


@pytest.fixture
def add_reaction(db: SessionMaker) -> Callable[..., Awaitable[None]]:
    async def _add_reaction(blog: BlogDB, user: UserDB, reaction: str = "like") -> None:
        async with db() as db_session:
            db_session.add(BlogReactionDB(blog_id=blog.id, user_id=user.uuid, reaction=reaction))
            await db_session.commit()

    return _add_reaction


@pytest.fixture
def add_comment(db: SessionMaker) -> Callable[..., Awaitable[CommentDB]]:
    async def _add_comment(blog: BlogDB, user: UserDB, text: str = "Great post!") -> CommentDB:
        comment = CommentDB(blog_id=blog.id, user_id=user.uuid, comment=text)
        async with db() as db_session:
            db_session.add(comment)
            await db_session.commit()
        return comment

    return _add_comment
