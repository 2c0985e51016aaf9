from app.services.blog import BlogService
from app.services.media import MediaService

__all__ = ["BlogService", "MediaService"]
