"""User persistence: lookup by email, create, list."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.errors import StoreError
from app.database.base import soft_delete_filter
from app.models.user import User

logger = logging.getLogger(__name__)


class UserStore:
    """Credential store over the ``users`` table. Soft-deleted rows are invisible."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        """
        Return the live user with ``email``, or None if there is none.

        Raises:
            StoreError: if the lookup itself fails
        """
        try:
            return (
                self.db.query(User)
                .filter(User.email == email, soft_delete_filter(User))
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User lookup failed for %s: %s", email, e)
            raise StoreError("Failed to look up user") from e

    def create(
        self,
        name: str,
        email: str,
        phone: int = 0,
        password: str = "",
    ) -> User:
        """
        Insert a new user.

        If another request inserted the same email first, the unique index
        rejects this insert and the winning row is returned instead.

        Raises:
            StoreError: if the insert fails for any other reason
        """
        user = User(name=name, email=email, phone=phone, password=password)
        try:
            self.db.add(user)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            existing = self.find_by_email(email)
            if existing is None:
                logger.error("User insert conflict for %s without a live row: %s", email, e)
                raise StoreError("Failed to create user") from e
            logger.info("User %s was created concurrently, reusing id=%s", email, existing.id)
            return existing
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User insert failed for %s: %s", email, e)
            raise StoreError("Failed to create user") from e

        self.db.refresh(user)
        logger.info("User created: id=%s email=%s", user.id, user.email)
        return user

    def list_users(self) -> list[User]:
        """
        Return every live user ordered by id.

        Raises:
            StoreError: if the query fails
        """
        try:
            return (
                self.db.query(User)
                .filter(soft_delete_filter(User))
                .order_by(User.id)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("User listing failed: %s", e)
            raise StoreError("Failed to fetch users") from e
