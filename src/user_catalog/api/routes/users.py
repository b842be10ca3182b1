"""
User management API routes
All data access goes through UserService; failed results are raised as
domain exceptions and rendered by the centralized error handlers.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from user_catalog.models.user import User, UserPayload, UserResponse
from user_catalog.services.errors import NotFoundError, UserValidationError
from user_catalog.services.user_service import UserService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_user_service(request: Request) -> UserService:
    """Resolve the service built at startup"""
    return request.app.state.user_service


def _check_shape(payload: UserPayload, partial: bool = False) -> None:
    errors = payload.validate_shape(partial=partial)
    if errors:
        raise UserValidationError({error.field: error.message for error in errors})


def _to_body(user: User) -> Dict[str, Any]:
    return UserResponse.from_user(user).model_dump(by_alias=True)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserPayload,
    service: UserService = Depends(get_user_service)
):
    """Create a new user"""
    _check_shape(payload)

    result = await service.create_user(payload.to_user())
    result.raise_for_error()

    return _to_body(result.first)

@router.get("")
async def list_users(service: UserService = Depends(get_user_service)):
    """List every user"""
    result = await service.list_users()
    result.raise_for_error()

    return [_to_body(user) for user in result.data]

@router.get("/search/name")
async def get_user_by_name(
    name: str = Query(..., description="Exact name to match"),
    service: UserService = Depends(get_user_service)
):
    """Find a user by exact name"""
    result = await service.get_user_by_name(name)
    result.raise_for_error()

    if not result.data:
        raise HTTPException(status_code=404, detail=f"No user named '{name}'")

    return _to_body(result.first)

@router.get("/stats/total")
async def count_users(service: UserService = Depends(get_user_service)) -> int:
    """Total number of users"""
    result = await service.count_users()
    result.raise_for_error()

    return result.count

@router.get("/{user_id}")
async def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service)
):
    """Get user details"""
    result = await service.get_user(user_id)
    result.raise_for_error()

    if not result.data:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    return _to_body(result.first)

@router.put("/{user_id}")
async def update_user(
    user_id: int,
    payload: UserPayload,
    service: UserService = Depends(get_user_service)
):
    """Update the supplied fields of a user"""
    _check_shape(payload, partial=True)

    result = await service.update_user(user_id, payload.to_user())
    try:
        result.raise_for_error()
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    return _to_body(result.first)

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service)
):
    """Delete a user"""
    result = await service.delete_user(user_id)
    try:
        result.raise_for_error()
    except NotFoundError:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")

    logger.info(f"Deleted user {user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
