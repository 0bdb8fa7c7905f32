"""Email/password authentication against the hosted auth service."""

import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import parse_qs, urlsplit
from uuid import UUID

from ninja_training.domain.auth import AuthSession, AuthUser, RecoveryParams
from ninja_training.domain.errors import AuthError

_logger = logging.getLogger(__name__)


class AuthClient(Protocol):
    """Interface for the hosted auth service."""

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user; None when email confirmation is pending."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``."""

    def reset_password_for_email(self, email: str, redirect_to: str | None) -> None:
        """Send a password recovery email."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user that owns ``access_token``."""

    def update_password(self, user_id: UUID, password: str) -> None:
        """Set a new password for a user."""


@dataclass
class AuthService:
    """Application service for account lifecycle actions."""

    client: AuthClient
    password_reset_redirect_url: str | None = None

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Create an account."""
        session = self.client.sign_up(email.strip(), password)
        _logger.info("Sign-up requested for %s", email.strip())
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        return self.client.sign_in(email.strip(), password)

    def sign_out(self, access_token: str) -> None:
        """Sign the current session out."""
        self.client.sign_out(access_token)

    def request_password_reset(self, email: str) -> None:
        """Email a recovery link."""
        self.client.reset_password_for_email(
            email.strip(), self.password_reset_redirect_url
        )

    def update_password(self, access_token: str, password: str) -> AuthUser:
        """Set a new password for the user owning a recovery token."""
        user = self.current_user(access_token)
        self.client.update_password(user.id, password)
        _logger.info("Password updated for user %s", user.id)
        return user

    def current_user(self, access_token: str) -> AuthUser:
        """Resolve a bearer token to a user."""
        if not access_token:
            raise AuthError("Not signed in.")
        user = self.client.get_user(access_token)
        if user is None:
            raise AuthError("Session expired. Please sign in again.")
        return user


def parse_recovery_params(url: str) -> RecoveryParams:
    """Extract auth tokens from a redirect URL's fragment or query string."""
    parts = urlsplit(url)
    values: dict[str, list[str]] = {}
    for source in (parts.query, parts.fragment):
        for key, items in parse_qs(source).items():
            values.setdefault(key, items)
    return RecoveryParams(
        access_token=_first(values, "access_token"),
        refresh_token=_first(values, "refresh_token"),
        type=_first(values, "type"),
    )


def _first(values: dict[str, list[str]], key: str) -> str | None:
    items = values.get(key)
    return items[0] if items else None
