"""Identity domain service."""

from uuid import UUID

import logfire

from tally.config import AuthSettings
from tally.domain.error import InvalidCredentialError, MissingCredentialError
from tally.domain.value import UserId
from tally.util.jwt import ExpiredTokenError, JWTError, verify_token

from .base import Service


class IdentityService(Service):
    """Validates bearer credentials and yields stable user IDs.

    Called once per request; results are not cached here.
    """

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize identity service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def authenticate(self, authorization: str | None) -> UserId:
        """Validate an ``Authorization`` header value.

        Args:
            authorization: Raw header value, e.g. ``"Bearer <jwt>"``

        Returns:
            The caller's user ID

        Raises:
            MissingCredentialError: If the header is absent or not a bearer credential
            InvalidCredentialError: If the token is expired, invalid, or has a bad subject
        """
        with logfire.span("identity_service.authenticate"):
            token = self._extract_bearer(authorization)

            try:
                payload = verify_token(token, self.auth_settings)
            except ExpiredTokenError:
                logfire.info("Expired bearer token")
                raise InvalidCredentialError("Token has expired")
            except JWTError as e:
                logfire.warn("Bearer token verification failed", error=str(e))
                raise InvalidCredentialError("Invalid token")

            try:
                user_id = UserId(UUID(payload.sub))
            except ValueError:
                logfire.warn("Bearer token subject is not a user ID", sub=payload.sub)
                raise InvalidCredentialError("Invalid token subject")

            logfire.debug("Caller authenticated", user_id=str(user_id))
            return user_id

    def optional_user(self, authorization: str | None) -> UserId | None:
        """Resolve the caller if a credential is present.

        Convenience for read endpoints that personalise their response for
        signed-in users. A missing header means anonymous; a present but
        invalid one still raises.

        Args:
            authorization: Raw header value (optional)

        Returns:
            User ID, or None when no credential was supplied
        """
        if not authorization:
            return None
        return self.authenticate(authorization)

    @staticmethod
    def _extract_bearer(authorization: str | None) -> str:
        if not authorization:
            raise MissingCredentialError()

        scheme, _, token = authorization.partition(" ")
        token = token.strip()
        if scheme.lower() != "bearer" or not token:
            raise MissingCredentialError()
        return token
