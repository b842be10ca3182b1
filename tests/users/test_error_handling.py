"""
Error translator tests: uniform bodies, status mapping and trace IDs
"""

from fastapi.testclient import TestClient

from user_catalog.app import create_app
from user_catalog.services.errors import NotFoundError, ValidationError
from user_catalog.services.user_service import UserService
from user_catalog.utils.error_handling import ErrorHandlingConfig

ERROR_KEYS = {"timestamp", "status", "error", "message", "trace_id"}


class BrokenRepository:
    """Raises an error the service does not anticipate"""

    async def find_all(self):
        raise KeyError("internal column mapping")

    async def count(self):
        raise RuntimeError("Database query failed: password=hunter2")


def _app_with_route(path, exc):
    app = create_app(user_service=UserService(BrokenRepository()))

    async def endpoint():
        raise exc

    app.add_api_route(path, endpoint, methods=["GET"])
    return TestClient(app, raise_server_exceptions=False)


def test_validation_body_shape(client):
    response = client.post("/users", json={"nome": "", "idade": 0})

    body = response.json()
    assert response.status_code == 400
    assert ERROR_KEYS | {"fields"} == set(body)
    assert body["message"] == "Invalid data provided"
    assert body["fields"] == {"name": "name must not be blank", "age": "age must be at least 1"}
    assert response.headers["X-Trace-ID"] == body["trace_id"]


def test_not_found_body_has_no_fields(client):
    body = client.get("/users/1").json()
    assert set(body) == ERROR_KEYS
    assert body["error"] == "Not Found"


def test_uncaught_not_found_defaults_to_400():
    client = _app_with_route("/boom", NotFoundError("User with id 3 not found"))

    response = client.get("/boom")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid Argument"
    assert response.json()["message"] == "User with id 3 not found"


def test_business_validation_error_is_400():
    client = _app_with_route("/boom", ValidationError("age required"))

    response = client.get("/boom")

    assert response.status_code == 400
    assert response.json()["message"] == "age required"


def test_unexpected_error_is_generic_500():
    client = TestClient(create_app(user_service=UserService(BrokenRepository())), raise_server_exceptions=False)

    response = client.get("/users")

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert body["message"] == "An unexpected error occurred"
    assert "column" not in response.text


def test_storage_failure_does_not_leak_details():
    client = TestClient(create_app(user_service=UserService(BrokenRepository())), raise_server_exceptions=False)

    response = client.get("/users/stats/total")

    assert response.status_code == 500
    assert "hunter2" not in response.text


def test_sanitize_data_redacts_sensitive_fields():
    data = {"nome": "Ana", "api_key": "abc", "nested": [{"password": "x"}]}

    assert ErrorHandlingConfig.sanitize_data(data) == {
        "nome": "Ana",
        "api_key": "***REDACTED***",
        "nested": [{"password": "***REDACTED***"}],
    }
