from uuid import UUID

from pydantic import BaseModel


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    username: str | None = None
    user_id: UUID | None = None
    jti: str | None = None
    token_type: str | None = None
