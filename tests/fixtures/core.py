from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlmodel import Session
from starlette.requests import Request

from src.users_api.api.http.app import create_app
from src.users_api.api.http.deps import get_user_repository
from src.users_api.core.services import DbManageService, DbSessionService
from src.users_api.entities.core.user import SQLUserRepository, User, UserRepository
from src.users_api.runtime.config import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
)
from tests.fixtures.dummies import FailingUserRepository, InMemoryUserRepository


@pytest.fixture
def config() -> ConfigData:
    """Test configuration backed by an in-memory SQLite database."""
    return ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(url="sqlite:///:memory:"),
        logging=LoggingConfig(level="DEBUG"),
    )


@pytest.fixture
def database_service(config: ConfigData) -> Iterator[DbSessionService]:
    """A fresh database with the schema created, one per test."""
    service = DbSessionService(config)
    DbManageService(service).create_all()
    try:
        yield service
    finally:
        service.dispose()


@pytest.fixture
def session(database_service: DbSessionService) -> Iterator[Session]:
    """Create a fresh database session for testing."""
    with database_service.get_session() as session:
        try:
            yield session
        finally:
            session.rollback()


@pytest.fixture
def user_repo(session: Session) -> SQLUserRepository:
    return SQLUserRepository(session)


@pytest.fixture
def app(config: ConfigData, database_service: DbSessionService) -> FastAPI:
    return create_app(config, database_service)


@pytest.fixture
def memory_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def client_factory(app: FastAPI) -> Iterator[Callable[[UserRepository], TestClient]]:
    """Build clients whose handlers use the given repository."""

    def _make_client(repository: UserRepository) -> TestClient:
        app.dependency_overrides[get_user_repository] = lambda: repository
        return TestClient(app)

    try:
        yield _make_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def memory_client(
    client_factory: Callable[[UserRepository], TestClient],
    memory_repository: InMemoryUserRepository,
) -> TestClient:
    """Client whose handlers use the in-memory repository."""
    return client_factory(memory_repository)


@pytest.fixture
def failing_client(client_factory: Callable[[UserRepository], TestClient]) -> TestClient:
    """Client whose handlers hit a store that always fails."""
    return client_factory(FailingUserRepository())


@pytest.fixture
def jane() -> User:
    return User(id="abc123", first_name="Jane", last_name="Doe", email="jane.doe@mail.com")


@pytest.fixture
def john() -> User:
    return User(id="abc124", first_name="John", last_name="Doe", email="john.doe@mail.com")


@pytest.fixture
def request_factory() -> Callable[[str, str], Request]:
    def _make_request(method: str = "GET", path: str = "/") -> Request:
        scope = {
            "type": "http",
            "headers": [],
            "method": method,
            "path": path,
            "query_string": b"",
        }
        return Request(scope)

    return _make_request
