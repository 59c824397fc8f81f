"""Tests for the exception handlers."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from api.errors import register_exception_handlers, status_for
from modules.payments.exceptions import PaymentNotFoundError
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    SubVaultError,
    ValidationError,
)


class Body(BaseModel):
    amount: int


@pytest.fixture
def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/raise/{kind}")
    async def raise_error(kind: str):
        errors = {
            "not-found": NotFoundError("Vault not found", code="VAULT_NOT_FOUND"),
            "forbidden": AuthorizationError("Vault belongs to someone else", code="VAULT_NOT_OWNED"),
            "external": ExternalServiceError("RPC timed out", service="base-rpc", code="RPC_ERROR"),
        }
        if kind == "boom":
            raise RuntimeError("unexpected")
        raise errors[kind]

    @app.post("/body")
    async def body(payload: Body):
        return payload

    return TestClient(app, raise_server_exceptions=False)


class TestStatusMapping:

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (NotFoundError("x"), 404),
            (ValidationError("x"), 400),
            (AuthenticationError("x"), 401),
            (AuthorizationError("x"), 404),
            (ConflictError("x"), 409),
            (ExternalServiceError("x", service="supabase"), 500),
            (SubVaultError("x"), 500),
        ],
    )
    def test_status_for(self, exc, expected):
        assert status_for(exc) == expected

    def test_module_errors_use_their_base(self):
        assert status_for(PaymentNotFoundError("abc")) == 404


class TestHandlers:

    def test_not_found_body(self, client):
        response = client.get("/raise/not-found")
        assert response.status_code == 404
        assert response.json() == {"error": "Vault not found", "code": "VAULT_NOT_FOUND", "details": {}}

    def test_authorization_looks_like_not_found(self, client):
        response = client.get("/raise/forbidden")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found", "code": "NOT_FOUND", "details": {}}

    def test_external_service(self, client):
        response = client.get("/raise/external")
        assert response.status_code == 500
        assert response.json()["details"] == {"service": "base-rpc"}

    def test_request_validation_is_400(self, client):
        response = client.post("/body", json={"amount": "lots"})
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["loc"] == ["body", "amount"]

    def test_unexpected_error_is_500(self, client):
        response = client.get("/raise/boom")
        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
