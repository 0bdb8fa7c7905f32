"""Supabase Auth implementation of the auth client."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from ninja_training.domain.auth import AuthSession, AuthUser
from ninja_training.domain.errors import AuthError
from ninja_training.services.auth import AuthClient


@dataclass
class SupabaseAuthClient(AuthClient):
    """Wraps ``supabase.auth`` and its admin API."""

    client: Client

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user."""
        try:
            response = self.client.auth.sign_up({"email": email, "password": password})
        except AuthApiError as exc:
            raise AuthError(exc.message) from exc
        return _to_session(response.session, response.user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with a password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            raise AuthError(exc.message) from exc
        session = _to_session(response.session, response.user)
        if session is None:
            raise AuthError("Sign-in did not return a session.")
        return session

    def sign_out(self, access_token: str) -> None:
        """Revoke the user's session."""
        try:
            self.client.auth.admin.sign_out(access_token)
        except AuthApiError as exc:
            raise AuthError(exc.message) from exc

    def reset_password_for_email(self, email: str, redirect_to: str | None) -> None:
        """Send a recovery email."""
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            self.client.auth.reset_password_for_email(email, options)
        except AuthApiError as exc:
            raise AuthError(exc.message) from exc

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the token's user, or None for an invalid token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthApiError:
            return None
        if response is None or response.user is None:
            return None
        return AuthUser(id=UUID(str(response.user.id)), email=response.user.email)

    def update_password(self, user_id: UUID, password: str) -> None:
        """Set a new password through the admin API."""
        try:
            self.client.auth.admin.update_user_by_id(
                str(user_id), {"password": password}
            )
        except AuthApiError as exc:
            raise AuthError(exc.message) from exc


def _to_session(session, user) -> AuthSession | None:  # type: ignore[no-untyped-def]
    if session is None or user is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        user=AuthUser(id=UUID(str(user.id)), email=user.email),
    )
