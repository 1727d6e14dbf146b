"""User database table model."""

from src.users_api.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to keep the HTTP layer unaware of
    the ORM.
    """

    __tablename__ = "users"

    first_name: str
    last_name: str
    email: str
