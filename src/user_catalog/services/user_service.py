"""
Users service - business rules for user management
"""

import logging
from dataclasses import replace

from user_catalog.database.user_repository import UserRepository
from user_catalog.models.user import User
from user_catalog.services.base_service import (
    EXECUTION_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    ServiceResult,
)

logger = logging.getLogger(__name__)


class UserService:
    """Service for user management operations"""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def create_user(self, user: User) -> ServiceResult:
        """
        Create a new user

        Args:
            user: User to create (id is ignored and assigned by storage)

        Returns:
            ServiceResult with the created user, or VALIDATION_ERROR when
            name or age is missing
        """
        if user.name is None or not user.name.strip():
            return ServiceResult.fail("name required", VALIDATION_ERROR)
        if user.age is None:
            return ServiceResult.fail("age required", VALIDATION_ERROR)

        logger.info(f"Creating new user: {user.name}")
        try:
            created = await self.repository.save(replace(user, id=None))
        except RuntimeError as e:
            logger.error(f"Create operation failed for users: {e}", exc_info=True)
            return ServiceResult.fail(str(e), EXECUTION_ERROR)

        return ServiceResult.ok([created])

    async def list_users(self) -> ServiceResult:
        try:
            users = await self.repository.find_all()
        except RuntimeError as e:
            logger.error(f"Read operation failed for users: {e}")
            return ServiceResult.fail(str(e), EXECUTION_ERROR)
        return ServiceResult.ok(users)

    async def get_user(self, user_id: int) -> ServiceResult:
        """Get a user by id; an empty result means not found"""
        try:
            user = await self.repository.find_by_id(user_id)
        except RuntimeError as e:
            logger.error(f"Read operation failed for users: {e}")
            return ServiceResult.fail(str(e), EXECUTION_ERROR)
        return ServiceResult.ok([user] if user else [])

    async def get_user_by_name(self, name: str) -> ServiceResult:
        """Get the first user whose name matches exactly; an empty result means not found"""
        try:
            user = await self.repository.find_by_name(name)
        except RuntimeError as e:
            logger.error(f"Read operation failed for users: {e}")
            return ServiceResult.fail(str(e), EXECUTION_ERROR)
        return ServiceResult.ok([user] if user else [])

    async def update_user(self, user_id: int, patch: User) -> ServiceResult:
        """
        Apply the non-null fields of patch to an existing user

        A blank name is ignored rather than applied. Fields absent from the
        patch keep their stored values.

        Args:
            user_id: ID of the user to update
            patch: Partial user carrying the new values

        Returns:
            ServiceResult with the merged user, or NOT_FOUND
        """
        try:
            existing = await self.repository.find_by_id(user_id)
            if existing is None:
                return ServiceResult.fail(f"User with id {user_id} not found", NOT_FOUND)

            updated = replace(existing)
            if patch.name is not None and patch.name.strip():
                updated.name = patch.name
            if patch.age is not None:
                updated.age = patch.age
            if patch.address is not None:
                updated.address = patch.address

            logger.info(f"Updating user {user_id}")
            saved = await self.repository.save(updated)
        except RuntimeError as e:
            logger.error(f"Update operation failed for users: {e}", exc_info=True)
            return ServiceResult.fail(str(e), EXECUTION_ERROR)

        return ServiceResult.ok([saved])

    async def delete_user(self, user_id: int) -> ServiceResult:
        try:
            if not await self.repository.exists_by_id(user_id):
                return ServiceResult.fail(f"User with id {user_id} not found", NOT_FOUND)

            logger.info(f"Deleting user {user_id}")
            await self.repository.delete_by_id(user_id)
        except RuntimeError as e:
            logger.error(f"Delete operation failed for users: {e}")
            return ServiceResult.fail(str(e), EXECUTION_ERROR)

        return ServiceResult.ok()

    async def count_users(self) -> ServiceResult:
        try:
            total = await self.repository.count()
        except RuntimeError as e:
            logger.error(f"Count operation failed for users: {e}")
            return ServiceResult.fail(str(e), EXECUTION_ERROR)
        return ServiceResult.ok(count=total)
