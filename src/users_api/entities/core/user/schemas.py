"""Request and response shapes for the User resource."""

from __future__ import annotations

from typing import Annotated

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from src.users_api.entities.core.user.entity import User


def _check_email(value: str) -> str:
    # Stored as submitted; the normalized form is only used for validation
    validate_email(value, check_deliverability=False)
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class UserRequest(BaseModel):
    """Inbound body for create and replace operations."""

    first_name: str = Field(min_length=1, description="User's first name")
    last_name: str = Field(min_length=1, description="User's last name")
    email: Email = Field(description="User's email address")

    def to_entity(self, user_id: str | None = None) -> User:
        """Build a new entity; the id is generated unless one is given."""
        fields = self.model_dump()
        if user_id is not None:
            fields["id"] = user_id
        return User(**fields)

    def to_update(self) -> UserUpdate:
        return UserUpdate(**self.model_dump())


class UserUpdate(BaseModel):
    """Partial update applied by the repository.

    Only fields that were explicitly set are written, so an empty string is a
    real value rather than "absent". ``None`` is rejected because every
    column is non-nullable.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: Email | None = None

    @model_validator(mode="after")
    def _reject_explicit_none(self) -> UserUpdate:
        nulls = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict[str, str]:
        """Return the explicitly set fields and their new values."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Outbound representation; timestamps are not exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    last_name: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> UserResponse:
        return cls.model_validate(user, from_attributes=True)
