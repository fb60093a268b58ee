from datetime import datetime

from sqlmodel import Field, SQLModel

from miturno.utils import utc_naive_now


class RefreshToken(SQLModel, table=True):
    """Server-side record of an issued refresh token, keyed by its jti.

    A token is single use: refreshing revokes it and stores the new one.
    Logging out revokes it as well.
    """

    __tablename__ = "refresh_tokens"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    jti: str = Field(unique=True, index=True)
    # naive UTC, like every timestamp column
    expires_at: datetime = Field(index=True)
    revoked: bool = False
    created_at: datetime = Field(default_factory=utc_naive_now)

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and self.expires_at > now
