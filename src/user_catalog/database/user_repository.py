"""
Persistence gateway for the users table
"""

import logging
from typing import List, Optional

import asyncpg

from user_catalog.models.user import User

logger = logging.getLogger(__name__)

TABLE_NAME = "users"
COLUMNS = "id, name, age, address"


class UserRepository:
    """CRUD operations for users over an asyncpg pool"""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def save(self, user: User) -> User:
        """
        Insert the user when it has no id, otherwise overwrite every column

        Args:
            user: User to persist

        Returns:
            The stored row, with id populated
        """
        if user.id is None:
            query = f"""
                INSERT INTO {TABLE_NAME} (name, age, address)
                VALUES ($1, $2, $3)
                RETURNING {COLUMNS}
            """
            params = [user.name, user.age, user.address]
        else:
            query = f"""
                UPDATE {TABLE_NAME} SET name = $1, age = $2, address = $3
                WHERE id = $4
                RETURNING {COLUMNS}
            """
            params = [user.name, user.age, user.address, user.id]

        logger.info(f"Executing SAVE: {' '.join(query.split())}")
        logger.debug(f"Parameters: {params}")

        async with self.pool.acquire() as conn:
            try:
                row = await conn.fetchrow(query, *params)
            except asyncpg.PostgresError as e:
                logger.error(f"Database error during SAVE: {e}")
                raise RuntimeError(f"Database SAVE failed: {str(e)}")

        if not row:
            raise RuntimeError(f"No record found with ID: {user.id}")

        return User.from_record(row)

    async def find_all(self) -> List[User]:
        query = f"SELECT {COLUMNS} FROM {TABLE_NAME} ORDER BY id"
        rows = await self._fetch(query)
        return [User.from_record(row) for row in rows]

    async def find_by_id(self, user_id: int) -> Optional[User]:
        query = f"SELECT {COLUMNS} FROM {TABLE_NAME} WHERE id = $1"
        rows = await self._fetch(query, user_id)
        return User.from_record(rows[0]) if rows else None

    async def find_by_name(self, name: str) -> Optional[User]:
        """Exact, case-sensitive match; the lowest id wins when names repeat"""
        query = f"SELECT {COLUMNS} FROM {TABLE_NAME} WHERE name = $1 ORDER BY id LIMIT 1"
        rows = await self._fetch(query, name)
        return User.from_record(rows[0]) if rows else None

    async def exists_by_id(self, user_id: int) -> bool:
        query = f"SELECT EXISTS(SELECT 1 FROM {TABLE_NAME} WHERE id = $1)"
        return bool(await self._fetchval(query, user_id))

    async def delete_by_id(self, user_id: int) -> None:
        query = f"DELETE FROM {TABLE_NAME} WHERE id = $1"

        logger.info(f"Executing DELETE: {query}")
        logger.debug(f"Parameters: [{user_id}]")

        async with self.pool.acquire() as conn:
            try:
                result = await conn.execute(query, user_id)
            except asyncpg.PostgresError as e:
                logger.error(f"Database error during DELETE: {e}")
                raise RuntimeError(f"Database DELETE failed: {str(e)}")

        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        if deleted_count == 0:
            raise RuntimeError(f"No record found with ID: {user_id}")

    async def count(self) -> int:
        return int(await self._fetchval(f"SELECT COUNT(*) FROM {TABLE_NAME}"))

    async def _fetch(self, query: str, *params) -> List[asyncpg.Record]:
        logger.debug(f"Executing READ query: {query}")
        async with self.pool.acquire() as conn:
            try:
                return await conn.fetch(query, *params)
            except asyncpg.PostgresError as e:
                logger.error(f"Database error: {e}")
                raise RuntimeError(f"Database query failed: {str(e)}")

    async def _fetchval(self, query: str, *params):
        logger.debug(f"Executing READ query: {query}")
        async with self.pool.acquire() as conn:
            try:
                return await conn.fetchval(query, *params)
            except asyncpg.PostgresError as e:
                logger.error(f"Database error: {e}")
                raise RuntimeError(f"Database query failed: {str(e)}")
