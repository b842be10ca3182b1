"""
pytest configuration and fixtures for the users test suite
HTTP and service tests run against an in-memory repository; no database needed.
"""

from dataclasses import replace
from typing import Dict, List, Optional

import pytest
from faker import Faker
from fastapi.testclient import TestClient

from user_catalog.app import create_app
from user_catalog.models.user import User
from user_catalog.services.user_service import UserService


class InMemoryUserRepository:
    """Dict-backed stand-in for UserRepository with the same contract"""

    def __init__(self):
        self.rows: Dict[int, User] = {}
        self._next_id = 1

    async def save(self, user: User) -> User:
        if user.id is None:
            user = replace(user, id=self._next_id)
            self._next_id += 1
        elif user.id not in self.rows:
            raise RuntimeError(f"No record found with ID: {user.id}")
        self.rows[user.id] = replace(user)
        return replace(user)

    async def find_all(self) -> List[User]:
        return [replace(self.rows[key]) for key in sorted(self.rows)]

    async def find_by_id(self, user_id: int) -> Optional[User]:
        user = self.rows.get(user_id)
        return replace(user) if user else None

    async def find_by_name(self, name: str) -> Optional[User]:
        for key in sorted(self.rows):
            if self.rows[key].name == name:
                return replace(self.rows[key])
        return None

    async def exists_by_id(self, user_id: int) -> bool:
        return user_id in self.rows

    async def delete_by_id(self, user_id: int) -> None:
        if self.rows.pop(user_id, None) is None:
            raise RuntimeError(f"No record found with ID: {user_id}")

    async def count(self) -> int:
        return len(self.rows)


class UserDataFactory:
    """Generates valid user payloads using Faker"""

    def __init__(self):
        self.fake = Faker()

    def payload(self, **overrides) -> dict:
        data = {
            "nome": self.fake.name()[:100],
            "idade": self.fake.random_int(min=1, max=99),
            "endereco": self.fake.address()[:500],
        }
        data.update(overrides)
        return data

    def user(self, **overrides) -> User:
        data = self.payload()
        user = User(name=data["nome"], age=data["idade"], address=data["endereco"])
        return replace(user, **overrides)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user_service(repository) -> UserService:
    return UserService(repository)


@pytest.fixture
def client(user_service) -> TestClient:
    """HTTP client bound to an app wired to the in-memory repository"""
    return TestClient(create_app(user_service=user_service), raise_server_exceptions=False)


@pytest.fixture
def factory() -> UserDataFactory:
    return UserDataFactory()
