"""Errors raised by the persistence layer.

Request validation failures never reach this layer; they are rejected by the
HTTP handlers before any repository call.
"""


class StoreError(Exception):
    """Any persistence failure other than a missing row.

    Covers connectivity problems, constraint violations and driver errors.
    The message is meant for logs, not for clients.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class NotFoundError(Exception):
    """Raised when a lookup by identifier matches no row."""


class UserNotFoundError(NotFoundError):
    """Raised when no user exists for the requested id."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"user not found: {user_id!r}")
