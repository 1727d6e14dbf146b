"""Schema management for the application database."""

from loguru import logger
from sqlalchemy import inspect
from sqlmodel import SQLModel

from src.users_api.core.services.database.db_session import DbSessionService


class DbManageService:
    def __init__(self, database_service: DbSessionService):
        self._engine = database_service.engine

    def create_all(self) -> None:
        """Create all database tables that do not exist yet."""
        # Importing the table module registers it with the metadata
        from src.users_api.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def table_names(self) -> list[str]:
        return inspect(self._engine).get_table_names()
