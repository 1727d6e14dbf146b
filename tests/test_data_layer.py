"""Data layer tests.

Covers the User entity, its table mapping and the SQL repository, run against
an in-memory SQLite database so real statements are exercised.
"""

from datetime import datetime

import pytest
from sqlalchemy import text
from sqlmodel import Session, select

from src.users_api.core.exceptions import NotFoundError, StoreError, UserNotFoundError
from src.users_api.entities.core.user import (
    SQLUserRepository,
    User,
    UserTable,
    UserUpdate,
)


class TestUserEntity:
    """Test User domain entity."""

    def test_user_creation(self):
        """Test user entity creation with required fields."""
        user = User(first_name="John", last_name="Doe", email="john.doe@mail.com")

        assert user.first_name == "John"
        assert user.last_name == "Doe"
        assert user.email == "john.doe@mail.com"
        assert user.id is not None  # Auto-generated
        assert user.created_at is not None
        assert user.updated_at is not None

    def test_generated_ids_are_unique(self):
        ids = {User(first_name="A", last_name="B", email="a@mail.com").id for _ in range(50)}
        assert len(ids) == 50

    def test_user_equality_ignores_timestamps(self):
        """Should compare users by their business attributes, ignoring timestamps."""
        user1 = User(id="1", first_name="John", last_name="Doe", email="john@mail.com")
        user2 = user1.model_copy(update={"updated_at": user1.updated_at.replace(year=2001)})

        assert user1 == user2
        assert hash(user1) == hash(user2)

    def test_user_inequality(self):
        user1 = User(id="1", first_name="John", last_name="Doe", email="john@mail.com")
        user2 = User(id="1", first_name="Jon", last_name="Doe", email="john@mail.com")

        assert user1 != user2
        assert user1 != "not a user"


class TestUserTable:
    """Test User table mapping."""

    def test_table_name(self):
        assert UserTable.__tablename__ == "users"

    def test_entity_to_table_conversion(self):
        """Test converting the User entity to its table row."""
        user = User(id="abc123", first_name="Jane", last_name="Doe", email="jane@mail.com")
        row = UserTable.model_validate(user, from_attributes=True)

        assert row.id == "abc123"
        assert row.first_name == "Jane"
        assert row.email == "jane@mail.com"

    def test_table_persistence(self, session: Session):
        """Test the row round-trips through the database."""
        session.add(UserTable(id="r1", first_name="Jane", last_name="Doe", email="jane@mail.com"))
        session.commit()

        row = session.exec(select(UserTable).where(UserTable.id == "r1")).one()
        assert row.last_name == "Doe"
        assert row.created_at is not None
        assert row.updated_at is not None


class TestSQLUserRepository:
    """Test the SQL user repository against a real database."""

    def test_create_keeps_given_id(self, user_repo: SQLUserRepository, jane: User):
        created = user_repo.create(jane)

        assert created == jane
        assert created.id == "abc123"

    def test_create_generates_id(self, user_repo: SQLUserRepository):
        created = user_repo.create(
            User(first_name="John", last_name="Doe", email="john.doe@mail.com")
        )

        assert created.id
        assert user_repo.get_by_id(created.id) == created

    def test_create_duplicate_id_is_store_error(
        self, user_repo: SQLUserRepository, jane: User
    ):
        user_repo.create(jane)

        duplicate = User(id=jane.id, first_name="Other", last_name="Person", email="o@mail.com")
        with pytest.raises(StoreError):
            user_repo.create(duplicate)

        # The session is usable again after the failed insert
        assert user_repo.get_by_id(jane.id) == jane

    def test_get_by_id(self, user_repo: SQLUserRepository, jane: User, john: User):
        user_repo.create(jane)
        user_repo.create(john)

        assert user_repo.get_by_id(john.id) == john

    def test_get_by_id_missing(self, user_repo: SQLUserRepository):
        with pytest.raises(UserNotFoundError) as exc_info:
            user_repo.get_by_id("nope")

        assert exc_info.value.user_id == "nope"
        assert isinstance(exc_info.value, NotFoundError)
        assert not isinstance(exc_info.value, StoreError)

    def test_get_all_empty(self, user_repo: SQLUserRepository):
        assert user_repo.get_all() == []

    def test_get_all(self, user_repo: SQLUserRepository, jane: User, john: User):
        user_repo.create(jane)
        user_repo.create(john)

        assert set(user_repo.get_all()) == {jane, john}

    def test_update_replaces_fields(self, user_repo: SQLUserRepository, jane: User):
        created = user_repo.create(jane)

        updated = user_repo.update_by_id(
            jane.id,
            UserUpdate(first_name="Janet", last_name="Smith", email="janet@mail.com"),
        )

        assert updated.id == jane.id
        assert updated.first_name == "Janet"
        assert updated.last_name == "Smith"
        assert updated.email == "janet@mail.com"
        assert updated.created_at == created.created_at
        assert user_repo.get_by_id(jane.id) == updated

    @pytest.mark.parametrize(
        "updates", [UserUpdate(first_name="Janet"), UserUpdate()], ids=["changed", "unchanged"]
    )
    def test_update_refreshes_updated_at(
        self, user_repo: SQLUserRepository, updates: UserUpdate
    ):
        long_ago = datetime(2000, 1, 1)
        user_repo.create(
            User(
                id="old",
                first_name="Jane",
                last_name="Doe",
                email="jane@mail.com",
                created_at=long_ago,
                updated_at=long_ago,
            )
        )

        updated = user_repo.update_by_id("old", updates)

        assert updated.created_at == long_ago
        assert updated.updated_at > long_ago
        assert user_repo.get_by_id("old").updated_at == updated.updated_at

    def test_update_only_touches_set_fields(
        self, user_repo: SQLUserRepository, jane: User
    ):
        user_repo.create(jane)

        updated = user_repo.update_by_id(jane.id, UserUpdate(last_name="Roe"))

        assert updated.first_name == "Jane"
        assert updated.last_name == "Roe"
        assert updated.email == "jane.doe@mail.com"

    def test_update_with_no_changes(self, user_repo: SQLUserRepository, jane: User):
        user_repo.create(jane)

        assert user_repo.update_by_id(jane.id, UserUpdate()) == jane

    def test_update_missing(self, user_repo: SQLUserRepository):
        with pytest.raises(UserNotFoundError):
            user_repo.update_by_id("nope", UserUpdate(first_name="X"))

    def test_delete(self, user_repo: SQLUserRepository, jane: User, john: User):
        user_repo.create(jane)
        user_repo.create(john)

        user_repo.delete_by_id(jane.id)

        with pytest.raises(UserNotFoundError):
            user_repo.get_by_id(jane.id)
        assert user_repo.get_all() == [john]

    def test_delete_missing(self, user_repo: SQLUserRepository):
        with pytest.raises(UserNotFoundError):
            user_repo.delete_by_id("nope")

    def test_delete_twice(self, user_repo: SQLUserRepository, jane: User):
        user_repo.create(jane)
        user_repo.delete_by_id(jane.id)

        with pytest.raises(UserNotFoundError):
            user_repo.delete_by_id(jane.id)

    def test_unavailable_table_is_store_error(
        self, user_repo: SQLUserRepository, session: Session
    ):
        session.connection().execute(text("DROP TABLE users"))
        session.commit()

        with pytest.raises(StoreError, match="retrieving users"):
            user_repo.get_all()
        with pytest.raises(StoreError):
            user_repo.get_by_id("abc123")
