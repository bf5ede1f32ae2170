"""Server-side HTTP session rows, keyed by the browser's session cookie."""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base import Base, created_at_column, updated_at_column


class HttpSession(Base):
    """
    Attribute map for one browser session.

    ``data`` holds the session attributes (currently only ``user_id``).
    Rows past ``expires_at`` are treated as absent and removed by the
    background sweeper.
    """

    __tablename__ = "http_sessions"
    __table_args__ = (Index("idx_http_sessions_expires_at", "expires_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()
