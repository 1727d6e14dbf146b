"""User entity module.

This module contains all User-related classes organized by responsibility:
- User: Domain entity
- UserTable: Database persistence model
- UserRequest / UserUpdate / UserResponse: Boundary shapes
- UserRepository / SQLUserRepository: Data access layer
"""

from .entity import User
from .repository import SQLUserRepository, UserRepository
from .schemas import UserRequest, UserResponse, UserUpdate
from .table import UserTable

__all__ = [
    "User",
    "UserTable",
    "UserRequest",
    "UserResponse",
    "UserUpdate",
    "UserRepository",
    "SQLUserRepository",
]
