"""
Tests for the error envelope and exception handlers.
"""
import pytest
from fastapi.testclient import TestClient

from liferpg.core.errors import (
    InsufficientCoinsError,
    InvalidInputError,
    LifeRPGException,
    NotFoundError,
    RecoveryLimitReachedError,
    UnauthorizedError,
)
from liferpg.db.base import get_db
from liferpg.main import app


class TestExceptionClasses:
    @pytest.mark.parametrize(
        "exc,status,code",
        [
            (InvalidInputError("bad", field="x"), 422, "INVALID_INPUT"),
            (UnauthorizedError(), 401, "UNAUTHORIZED"),
            (NotFoundError("Habit", 3), 404, "NOT_FOUND"),
            (RecoveryLimitReachedError("WALK", 2), 409, "RECOVERY_LIMIT_REACHED"),
            (InsufficientCoinsError(10, 3), 409, "INSUFFICIENT_COINS"),
        ],
    )
    def test_status_and_code(self, exc, status, code):
        assert isinstance(exc, LifeRPGException)
        assert exc.http_status == status
        assert exc.to_dict()["code"] == code

    def test_details_omitted_when_empty(self):
        assert "details" not in UnauthorizedError().to_dict()

    def test_not_found_details(self):
        assert NotFoundError("Reward", 9).to_dict()["details"] == {"resource": "Reward", "id": 9}


class TestHandlers:
    def test_validation_envelope(self, client, headers):
        r = client.post("/actions", json={"block": "HEALTH"}, headers=headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = {e["field"] for e in body["details"]["errors"]}
        assert {"name", "xp"} <= fields

    def test_unhandled_error_is_500(self):
        def broken_db():
            raise RuntimeError("db exploded")
            yield  # pragma: no cover

        app.dependency_overrides[get_db] = broken_db
        try:
            with TestClient(app, raise_server_exceptions=False) as c:
                r = c.post("/users", json={})
        finally:
            app.dependency_overrides.clear()
        assert r.status_code == 500
        assert r.json() == {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred."}

    def test_validation_errors_list_field_message_type(self, client, headers):
        r = client.post("/actions", json={"block": "HEALTH"}, headers=headers)
        for error in r.json()["details"]["errors"]:
            assert set(error) == {"field", "message", "type"}

    def test_openapi_documents_error_envelope(self, client):
        schema = client.get("/openapi.json").json()
        assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {
            "code", "message", "details",
        }
        not_found = schema["paths"]["/habits/{habit_id}/log"]["post"]["responses"]["404"]
        assert not_found["content"]["application/json"]["schema"]["$ref"] == (
            "#/components/schemas/ErrorResponse"
        )
