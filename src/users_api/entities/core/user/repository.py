"""User repository contract and its SQL implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.users_api.core.exceptions import StoreError, UserNotFoundError
from src.users_api.entities.core._base import utcnow
from src.users_api.entities.core.user.entity import User
from src.users_api.entities.core.user.schemas import UserUpdate
from src.users_api.entities.core.user.table import UserTable


class UserRepository(ABC):
    """Abstract interface for user persistence backends."""

    @abstractmethod
    def create(self, user: User) -> User:
        """Insert a new user.

        Args:
            user: Entity to store; its id and timestamps are kept when set

        Returns:
            The stored user

        Raises:
            StoreError: On constraint violation or connectivity failure
        """

    @abstractmethod
    def get_by_id(self, user_id: str) -> User:
        """Fetch a user.

        Raises:
            UserNotFoundError: If no user has this id
            StoreError: On any other persistence failure
        """

    @abstractmethod
    def get_all(self) -> list[User]:
        """Return every stored user, in the store's default order."""

    @abstractmethod
    def update_by_id(self, user_id: str, updates: UserUpdate) -> User:
        """Apply the explicitly set fields of ``updates`` to an existing user.

        Raises:
            UserNotFoundError: If no user has this id
            StoreError: On any other persistence failure
        """

    @abstractmethod
    def delete_by_id(self, user_id: str) -> None:
        """Permanently remove a user.

        Raises:
            UserNotFoundError: If no user has this id
            StoreError: On any other persistence failure
        """


class SQLUserRepository(UserRepository):
    """Data-access layer for users backed by a SQLModel session.

    Every write commits immediately; a failed statement rolls the session
    back before the error is re-raised as :class:`StoreError`.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self._session.rollback()
            raise StoreError(f"failed {action}: {e}") from e

    @staticmethod
    def _to_entity(row: UserTable) -> User:
        return User.model_validate(row, from_attributes=True)

    def _get_row(self, user_id: str) -> UserTable:
        row = self._session.get(UserTable, user_id)
        if row is None:
            raise UserNotFoundError(user_id)
        return row

    def create(self, user: User) -> User:
        row = UserTable.model_validate(user, from_attributes=True)
        with self._store_errors(f"creating user {user.id!r}"):
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        return self._to_entity(row)

    def get_by_id(self, user_id: str) -> User:
        with self._store_errors(f"retrieving user {user_id!r}"):
            row = self._get_row(user_id)
        return self._to_entity(row)

    def get_all(self) -> list[User]:
        with self._store_errors("retrieving users"):
            rows = self._session.exec(select(UserTable)).all()
        return [self._to_entity(row) for row in rows]

    def update_by_id(self, user_id: str, updates: UserUpdate) -> User:
        with self._store_errors(f"updating user {user_id!r}"):
            row = self._get_row(user_id)
            for field, value in updates.changes().items():
                setattr(row, field, value)
            row.updated_at = utcnow()
            self._session.add(row)
            self._session.commit()
            self._session.refresh(row)
        return self._to_entity(row)

    def delete_by_id(self, user_id: str) -> None:
        with self._store_errors(f"deleting user {user_id!r}"):
            row = self._get_row(user_id)
            self._session.delete(row)
            self._session.commit()
