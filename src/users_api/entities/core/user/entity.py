"""User domain entity."""

from typing import Any

from pydantic import Field

from src.users_api.entities.core._base import Entity


class User(Entity):
    """User entity representing a person in the system.

    This is the domain model handed between the repository and the HTTP layer.
    It inherits from Entity to get auto-generated UUID identifiers.
    """

    first_name: str = Field(description="User's first name")
    last_name: str = Field(description="User's last name")
    email: str = Field(description="User's email address")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.first_name == other.first_name
            and self.last_name == other.last_name
            and self.email == other.email
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.first_name,
            self.last_name,
            self.email,
        ))
