"""Tests for wallet identity provisioning."""

import hashlib
import hmac

import pytest
from unittest.mock import patch

from modules.auth.exceptions import IdentityProvisioningError
from modules.auth.identity import (
    IdentityRepository,
    canonical_address,
    derive_password,
    synthetic_email,
)

ADDRESS = "0x" + "Ab" * 20


@pytest.fixture
def identity(fake_db) -> IdentityRepository:
    return IdentityRepository(
        fake_db,
        password_secret="server-secret",
        email_domain="siwe.subvault.xyz",
        sign_in_client_factory=lambda: fake_db,
    )


class TestCredentials:
    def test_canonical_address_is_lowercase(self):
        assert canonical_address(f"  {ADDRESS} ") == ADDRESS.lower()

    def test_synthetic_email(self):
        assert synthetic_email(ADDRESS, "siwe.subvault.xyz") == f"{ADDRESS.lower()}@siwe.subvault.xyz"

    def test_password_is_hmac_of_canonical_address(self):
        expected = hmac.new(
            b"server-secret", ADDRESS.lower().encode(), hashlib.sha256
        ).hexdigest()
        assert derive_password("server-secret", ADDRESS) == expected
        assert derive_password("server-secret", ADDRESS.lower()) == expected

    def test_password_depends_on_secret(self):
        assert derive_password("a", ADDRESS) != derive_password("b", ADDRESS)

    def test_missing_secret_is_a_configuration_error(self):
        with pytest.raises(IdentityProvisioningError, match="not configured"):
            derive_password("", ADDRESS)


class TestResolveSession:
    def test_first_sign_in_creates_user_and_profile(self, identity, fake_db):
        session = identity.resolve_session(ADDRESS)

        [user] = fake_db.auth.users.values()
        assert user["email"] == f"{ADDRESS.lower()}@siwe.subvault.xyz"
        assert user["user_metadata"] == {"ethereum_address": ADDRESS.lower()}
        assert session.user_id == user["id"]
        assert fake_db.tables["user_profiles"][0]["address"] == ADDRESS.lower()

    def test_second_sign_in_reuses_user(self, identity, fake_db):
        first = identity.resolve_session(ADDRESS)
        second = identity.resolve_session(ADDRESS.lower())

        assert first.user_id == second.user_id
        assert len(fake_db.auth.users) == 1

    def test_lookup_is_case_insensitive(self, identity, fake_db):
        fake_db.add_profile("existing-user", ADDRESS.lower())
        assert identity.find_user_id(ADDRESS.upper().replace("0X", "0x")) == "existing-user"

    def test_concurrent_creation_falls_back_to_lookup(self, identity, fake_db):
        identity.resolve_session(ADDRESS)
        [user_id] = fake_db.auth.users

        # The first lookup misses, as if the other sign-in had not committed yet
        with patch.object(identity, "find_user_id", side_effect=[None, user_id]):
            session = identity.resolve_session(ADDRESS)

        assert session.user_id == user_id
        assert len(fake_db.auth.users) == 1

    def test_provider_failure_on_create(self, identity, fake_db):
        fake_db.auth.fail_create = True
        with pytest.raises(IdentityProvisioningError, match="Failed to create user"):
            identity.resolve_session(ADDRESS)

    def test_sign_in_failure(self, fake_db):
        identity = IdentityRepository(
            fake_db, "server-secret", "siwe.subvault.xyz", sign_in_client_factory=lambda: fake_db
        )
        identity.resolve_session(ADDRESS)
        rotated = IdentityRepository(
            fake_db, "rotated-secret", "siwe.subvault.xyz", sign_in_client_factory=lambda: fake_db
        )
        with pytest.raises(IdentityProvisioningError, match="Sign-in failed"):
            rotated.resolve_session(ADDRESS)
