"""Authentication value objects."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """The authenticated user."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class AuthSession:
    """Tokens issued for a signed-in user."""

    access_token: str
    refresh_token: str
    user: AuthUser


@dataclass(frozen=True)
class RecoveryParams:
    """Tokens carried by an email redirect link."""

    access_token: str | None
    refresh_token: str | None
    type: str | None

    @property
    def is_recovery(self) -> bool:
        return self.type == "recovery" and bool(self.access_token)
