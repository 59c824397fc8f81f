"""
Tests for vault API endpoints.

Requests carry real bearer tokens and run against the in-memory database.
"""

from tests.conftest import OTHER_USER_ID, TEST_USER_ID, create_test_token


def other_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(user_id=OTHER_USER_ID)}"}


class TestVaultEndpoints:
    def test_requires_authentication(self, api_client):
        response = api_client.get("/api/vaults")
        assert response.status_code == 401
        assert response.json()["code"] == "MISSING_TOKEN"

    def test_create_and_list(self, api_client, auth_headers):
        created = api_client.post(
            "/api/vaults", json={"name": "Marketing Team"}, headers=auth_headers
        )
        assert created.status_code == 201
        assert created.json()["handle"] == "marketing-team"
        assert created.json()["user_id"] == TEST_USER_ID

        listed = api_client.get("/api/vaults", headers=auth_headers)
        assert listed.status_code == 200
        assert listed.json()["total"] == 1

    def test_blank_name_is_400(self, api_client, auth_headers):
        response = api_client.post("/api/vaults", json={"name": "   "}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unsupported_chain_is_400(self, api_client, auth_headers):
        response = api_client.post(
            "/api/vaults", json={"name": "Ops", "chain_id": 1}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_get_by_handle(self, api_client, auth_headers):
        api_client.post("/api/vaults", json={"name": "Ops"}, headers=auth_headers)
        response = api_client.get("/api/vaults/by-handle/OPS", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Ops"

    def test_other_users_vault_is_404(self, api_client, auth_headers):
        vault_id = api_client.post(
            "/api/vaults", json={"name": "Ops"}, headers=auth_headers
        ).json()["id"]

        for method, path in [
            ("get", f"/api/vaults/{vault_id}"),
            ("patch", f"/api/vaults/{vault_id}"),
            ("delete", f"/api/vaults/{vault_id}"),
        ]:
            kwargs = {"json": {"name": "Mine"}} if method == "patch" else {}
            response = api_client.request(method.upper(), path, headers=other_headers(), **kwargs)
            assert response.status_code == 404, path
            assert response.json()["code"] == "VAULT_NOT_FOUND"

    def test_update_and_delete(self, api_client, auth_headers):
        vault_id = api_client.post(
            "/api/vaults", json={"name": "Ops"}, headers=auth_headers
        ).json()["id"]

        updated = api_client.patch(
            f"/api/vaults/{vault_id}", json={"name": "Operations"}, headers=auth_headers
        )
        assert updated.status_code == 200
        assert updated.json()["handle"] == "operations"

        deleted = api_client.delete(f"/api/vaults/{vault_id}", headers=auth_headers)
        assert deleted.status_code == 204
        assert api_client.get(f"/api/vaults/{vault_id}", headers=auth_headers).status_code == 404
