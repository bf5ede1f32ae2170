from datetime import datetime

from sqlalchemy import BigInteger, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base import (
    Base,
    created_at_column,
    deleted_at_column,
    updated_at_column,
)

# Email uniqueness only applies to live rows
LIVE_ROWS = text("deleted_at IS NULL")


class User(Base):
    """
    A registered user.

    Rows are created on the first successful Google login for an email and
    are never rewritten by later logins. ``deleted_at`` marks soft-deleted
    rows, which every store query hides; a later login for the same email
    creates a new row.
    """

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "ix_users_email",
            "email",
            unique=True,
            postgresql_where=LIVE_ROWS,
            sqlite_where=LIVE_ROWS,
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    # Hashed password; empty for accounts created through Google
    password: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    created_at: Mapped[datetime] = created_at_column()
    updated_at: Mapped[datetime] = updated_at_column()
    deleted_at: Mapped[datetime | None] = deleted_at_column()
