"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model
- table.py: Database persistence model
- schemas.py: Request/response shapes
- repository.py: Data access layer
"""

from .core.user import (
    SQLUserRepository,
    User,
    UserRepository,
    UserRequest,
    UserResponse,
    UserTable,
    UserUpdate,
)

__all__ = [
    "User",
    "UserTable",
    "UserRequest",
    "UserResponse",
    "UserUpdate",
    "UserRepository",
    "SQLUserRepository",
]
