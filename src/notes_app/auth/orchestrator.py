"""Ensure-authenticated flow: user pool session -> identity pool credentials.

``AuthOrchestrator.authenticate`` is the single entry point. It returns an
``AuthResult`` rather than mixing booleans and exceptions; the boolean
``ensure_authenticated`` and the raising ``require_credentials`` are thin
adapters for callers that want those shapes.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from notes_app.auth.user_pool import SessionError
from notes_app.aws_credentials.cognito_identity import ExchangeError

if TYPE_CHECKING:
    from notes_app.auth.user_pool import UserPoolClient
    from notes_app.aws_credentials.cache import CredentialCache
    from notes_app.aws_credentials.cognito_identity import CognitoIdentityExchanger
    from notes_app.aws_credentials.credentials import TemporaryCredentials

logger = logging.getLogger(__name__)


class NotAuthenticatedError(Exception):
    """Raised when an operation needs credentials but no user is signed in."""

    def __init__(self, message: str = "User is not logged in", code: str = "not_authenticated") -> None:
        super().__init__(message)
        self.code = code


class AuthStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    NOT_AUTHENTICATED = "not_authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthResult:
    status: AuthStatus
    error: SessionError | ExchangeError | None = None

    @classmethod
    def authenticated(cls) -> "AuthResult":
        return cls(AuthStatus.AUTHENTICATED)

    @classmethod
    def not_authenticated(cls) -> "AuthResult":
        return cls(AuthStatus.NOT_AUTHENTICATED)

    @classmethod
    def failed(cls, error: SessionError | ExchangeError) -> "AuthResult":
        return cls(AuthStatus.FAILED, error)

    @property
    def is_authenticated(self) -> bool:
        return self.status is AuthStatus.AUTHENTICATED


class AuthOrchestrator:
    """Owns the credential cache and keeps it populated for the current user."""

    def __init__(
        self,
        user_pool: "UserPoolClient",
        exchanger: "CognitoIdentityExchanger",
        cache: "CredentialCache",
    ) -> None:
        self._user_pool = user_pool
        self._exchanger = exchanger
        self._cache = cache
        self._lock = asyncio.Lock()
        # Bumped by sign_out so an exchange already in flight is not stored afterwards.
        self._sign_out_count = 0

    @property
    def cache(self) -> "CredentialCache":
        return self._cache

    @property
    def user_pool(self) -> "UserPoolClient":
        return self._user_pool

    async def authenticate(self) -> AuthResult:
        if self._cache.has_valid_credentials():
            return AuthResult.authenticated()

        async with self._lock:
            # Another caller may have refreshed while we waited.
            if self._cache.has_valid_credentials():
                return AuthResult.authenticated()

            user = self._user_pool.get_current_user()
            if user is None:
                return AuthResult.not_authenticated()

            generation = self._sign_out_count

            try:
                token = await self._user_pool.get_session_token(user)
                credentials = await self._exchanger.exchange(
                    token,
                    identity_id=self._cache.identity_id,
                )
            except (SessionError, ExchangeError) as exc:
                logger.warning(
                    "Authentication failed for user %s: %s (%s)",
                    user.username,
                    exc,
                    exc.code,
                )
                return AuthResult.failed(exc)

            if generation != self._sign_out_count:
                logger.info("Discarding credentials for %s obtained across a sign-out", user.username)
                return AuthResult.not_authenticated()

            self._cache.store(credentials)
            logger.info("Authenticated user %s", user.username)
            return AuthResult.authenticated()

    async def ensure_authenticated(self) -> bool:
        """
        Make sure valid credentials are cached.

        Returns:
            True when credentials are available, False when no user is signed in

        Raises:
            SessionError: If the user pool could not produce a session
            ExchangeError: If the identity pool exchange failed
        """
        result = await self.authenticate()
        if result.status is AuthStatus.FAILED and result.error is not None:
            raise result.error
        return result.is_authenticated

    async def require_credentials(self) -> "TemporaryCredentials":
        if not await self.ensure_authenticated():
            raise NotAuthenticatedError()
        credentials = self._cache.credentials
        if credentials is None or credentials.is_empty:
            raise NotAuthenticatedError()
        return credentials

    def sign_out(self) -> None:
        self._sign_out_count += 1
        user = self._user_pool.get_current_user()
        if user is not None:
            self._user_pool.sign_out(user)

        if self._cache.credentials is not None:
            self._cache.clear()
