"""Tests for profile API endpoints."""

from tests.conftest import TEST_ADDRESS, TEST_USER_ID


class TestProfileEndpoints:
    def test_get_profile(self, api_client, auth_headers, fake_db):
        fake_db.add_profile(TEST_USER_ID, TEST_ADDRESS)
        response = api_client.get("/api/profile", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["address"] == TEST_ADDRESS

    def test_missing_profile_is_404(self, api_client, auth_headers):
        response = api_client.get("/api/profile", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["code"] == "PROFILE_NOT_FOUND"

    def test_set_sub_account_validates_address(self, api_client, auth_headers, fake_db):
        fake_db.add_profile(TEST_USER_ID, TEST_ADDRESS)
        response = api_client.patch(
            "/api/profile/sub-account", json={"address": "nope"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_onboarding_flow(self, api_client, auth_headers, fake_db):
        fake_db.add_profile(TEST_USER_ID, TEST_ADDRESS)

        before = api_client.get("/api/profile/onboarding", headers=auth_headers).json()
        completed = api_client.post("/api/profile/onboarding/complete", headers=auth_headers)
        after = api_client.get("/api/profile/onboarding", headers=auth_headers).json()

        assert before["needs_onboarding"] is True
        assert completed.status_code == 200
        assert after["needs_onboarding"] is False

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/profile").status_code == 401
