"""Tests for the credential and refresh exception taxonomy."""

import pytest

from refresh_client_core.auth.exceptions import (
    AuthenticationExpiredError,
    CredentialError,
    NoRefreshCredentialError,
    RefreshError,
    RefreshRejectedError,
    RefreshResponseError,
    RefreshUnreachableError,
    StorageUnavailableError,
)
from refresh_client_core.errors import APIError


class TestRefreshErrors:
    """Refresh failures share a base but stay distinguishable."""

    @pytest.mark.parametrize(
        "exc_class",
        [NoRefreshCredentialError, RefreshRejectedError, RefreshUnreachableError, RefreshResponseError],
    )
    def test_is_refresh_error(self, exc_class):
        """Every refresh failure is a RefreshError and a CredentialError."""
        assert issubclass(exc_class, RefreshError)
        assert issubclass(exc_class, CredentialError)

    def test_missing_and_rejected_are_different_kinds(self):
        """A missing refresh token is not reported as a rejected one."""
        assert not issubclass(NoRefreshCredentialError, RefreshRejectedError)
        assert not issubclass(RefreshRejectedError, NoRefreshCredentialError)

    def test_no_refresh_credential_default_message(self):
        """Test the default message."""
        assert str(NoRefreshCredentialError()) == "No refresh token available"

    def test_rejected_status_code_attribute(self):
        """Test that status_code attribute is set."""
        error = RefreshRejectedError("Invalid refresh token", status_code=401)
        assert error.status_code == 401
        assert str(error) == "Invalid refresh token"

    def test_response_error_status_code_optional(self):
        """Test that status_code is optional."""
        assert RefreshResponseError("No access token in response").status_code is None


class TestStorageUnavailableError:
    def test_can_be_raised(self):
        with pytest.raises(CredentialError):
            raise StorageUnavailableError("keychain locked")


class TestAuthenticationExpiredError:
    """Test the terminal error surfaced to applications."""

    def test_cause_attribute(self):
        """Test that the refresh error is kept as cause."""
        cause = RefreshRejectedError("expired", status_code=401)
        error = AuthenticationExpiredError("Session expired", cause=cause)
        assert error.cause is cause

    def test_cause_optional(self):
        """Test that cause is optional."""
        assert AuthenticationExpiredError("rejected again").cause is None

    def test_not_an_api_error(self):
        """Applications can tell session expiry apart from ordinary API failures."""
        assert not issubclass(AuthenticationExpiredError, APIError)
        assert not issubclass(AuthenticationExpiredError, RefreshError)
