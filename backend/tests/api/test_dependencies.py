"""Tests for the service container."""

from unittest.mock import patch

from api.dependencies import get_auth_service, get_container, reset_container


class TestServiceContainer:

    @patch("modules.auth.service.AuthService")
    def test_auth_service_is_shared(self, mock_service_cls):
        first = get_auth_service()
        second = get_auth_service()

        assert first is second
        assert first is get_container().auth
        mock_service_cls.assert_called_once_with()

    @patch("modules.auth.service.AuthService")
    def test_reset_builds_a_fresh_service(self, mock_service_cls):
        mock_service_cls.side_effect = [object(), object()]
        before = get_auth_service()

        reset_container()

        assert get_auth_service() is not before
        assert mock_service_cls.call_count == 2
