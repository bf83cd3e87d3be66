"""Identity provider port and the principal check used before every mutation."""

import uuid
from dataclasses import dataclass
from typing import Protocol

from eacledger.errors import AuthError


@dataclass(frozen=True)
class Principal:
    """Authenticated user on whose behalf a mutation runs."""

    user_id: uuid.UUID
    email: str | None = None


class IdentityProvider(Protocol):
    """Source of the current authenticated principal."""

    async def current_principal(self) -> Principal | None:
        """Return the signed-in principal, or None when signed out."""
        ...


class StaticIdentityProvider:
    """Identity provider returning a fixed principal (or none)."""

    def __init__(self, principal: Principal | None) -> None:
        self._principal = principal

    async def current_principal(self) -> Principal | None:
        """Return the configured principal."""
        return self._principal

    def sign_out(self) -> None:
        """Drop the principal; later mutations fail with AuthError."""
        self._principal = None


async def require_principal(identity: IdentityProvider) -> Principal:
    """Return the current principal or raise before any store I/O.

    Raises:
        AuthError: If no principal is signed in
    """
    principal = await identity.current_principal()
    if principal is None:
        raise AuthError("No user")
    return principal


def principal_from_authorization(authorization: str | None) -> Principal | None:
    """Parse a ``Bearer <user_id>`` header into a principal.

    Returns None when the header is missing.

    Raises:
        AuthError: If the header is present but malformed
    """
    if not authorization:
        return None

    if not authorization.startswith("Bearer "):
        raise AuthError("Invalid authorization header format")

    token = authorization[7:].strip()  # Strip "Bearer "

    try:
        return Principal(user_id=uuid.UUID(token))
    except ValueError as e:
        raise AuthError("Invalid bearer token (expected user id)") from e
