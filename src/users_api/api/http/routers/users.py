"""User API router with CRUD operations."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from loguru import logger

from src.users_api.api.http.deps import get_user_repository
from src.users_api.core.exceptions import StoreError, UserNotFoundError
from src.users_api.core.models import ErrorMessage
from src.users_api.entities.core.user import (
    UserRepository,
    UserRequest,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])

UserId = Annotated[str, Path(min_length=1, description="User identifier")]
Repository = Annotated[UserRepository, Depends(get_user_repository)]

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorMessage},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorMessage},
}
_ERRORS_WITH_404 = {**_ERRORS, status.HTTP_404_NOT_FOUND: {"model": ErrorMessage}}


def _not_found(user_id: str) -> HTTPException:
    # Quoted the way a JSON string literal is, so blank or odd ids stay visible
    quoted = json.dumps(user_id, ensure_ascii=False)
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"no user with id {quoted} exists",
    )


def _store_failure(message: str, error: StoreError) -> HTTPException:
    logger.error("{}: {}", message, error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message
    )


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
)
def create_user(user_request: UserRequest, repository: Repository) -> UserResponse:
    """Create a new user with a server-generated id."""
    try:
        created = repository.create(user_request.to_entity())
    except StoreError as e:
        raise _store_failure("error creating user", e) from e

    logger.info("Created user {}", created.id)
    return UserResponse.from_entity(created)


@router.get("/{user_id}", response_model=UserResponse, responses=_ERRORS_WITH_404)
def get_user(user_id: UserId, repository: Repository) -> UserResponse:
    """Get a user by ID."""
    try:
        user = repository.get_by_id(user_id)
    except UserNotFoundError as e:
        logger.info("User not found: {}", e)
        raise _not_found(user_id) from e
    except StoreError as e:
        raise _store_failure("error retrieving user", e) from e

    return UserResponse.from_entity(user)


@router.get(
    "/",
    response_model=list[UserResponse],
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorMessage}},
)
def list_users(repository: Repository) -> list[UserResponse]:
    """List all users."""
    try:
        users = repository.get_all()
    except StoreError as e:
        raise _store_failure("error retrieving users", e) from e

    return [UserResponse.from_entity(user) for user in users]


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        **_ERRORS,
        status.HTTP_201_CREATED: {
            "model": UserResponse,
            "description": "No user had this id; it was created",
        },
    },
)
def update_user(
    user_id: UserId,
    user_request: UserRequest,
    repository: Repository,
    response: Response,
) -> UserResponse:
    """Replace a user's fields, creating the user under this id if it is missing."""
    try:
        updated = repository.update_by_id(user_id, user_request.to_update())
    except UserNotFoundError:
        logger.info("User {} does not exist; creating it", user_id)
        try:
            created = repository.create(user_request.to_entity(user_id))
        except StoreError as e:
            raise _store_failure("error creating user", e) from e
        response.status_code = status.HTTP_201_CREATED
        return UserResponse.from_entity(created)
    except StoreError as e:
        raise _store_failure("error updating user", e) from e

    logger.info("Updated user {}", updated.id)
    return UserResponse.from_entity(updated)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERRORS_WITH_404,
)
def delete_user(user_id: UserId, repository: Repository) -> Response:
    """Delete a user."""
    try:
        repository.delete_by_id(user_id)
    except UserNotFoundError as e:
        logger.info("User not found: {}", e)
        raise _not_found(user_id) from e
    except StoreError as e:
        raise _store_failure("error deleting user", e) from e

    logger.info("Deleted user {}", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
