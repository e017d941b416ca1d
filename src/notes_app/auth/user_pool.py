"""Cognito user pool client: current user, session tokens, sign-in/out."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import botocore.session
import jwt
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from notes_app.auth.token_store import StoredTokens, TokenStore
from notes_app.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

# Tokens this close to expiry are refreshed rather than handed out.
_TOKEN_EXPIRY_SKEW = timedelta(seconds=30)


class SessionError(Exception):
    """Raised when the user pool cannot produce a valid session."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class CognitoUser:
    """Handle for a signed-in user pool user."""

    username: str
    client_id: str


_ERROR_CODE_MAP = {
    "NotAuthorizedException": "not_authorized",
    "UserNotFoundException": "user_not_found",
    "UserNotConfirmedException": "user_not_confirmed",
    "PasswordResetRequiredException": "password_reset_required",
    "InvalidParameterException": "invalid_request",
    "TooManyRequestsException": "throttled",
    "InternalErrorException": "service_error",
}


class UserPoolClient:
    """Thread-safe wrapper around the ``cognito-idp`` auth API."""

    def __init__(
        self,
        region: str,
        user_pool_id: str,
        client_id: str,
        token_store: TokenStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._region = region
        self._user_pool_id = user_pool_id
        self._client_id = client_id
        self._store = token_store
        self._clock = clock
        self._client: Any = None
        self._lock = threading.Lock()

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        with self._lock:
            if self._client is not None:
                return self._client
            session = botocore.session.get_session()
            self._client = session.create_client(
                "cognito-idp",
                region_name=self._region,
                config=Config(
                    signature_version=UNSIGNED,
                    connect_timeout=5,
                    read_timeout=15,
                    retries={"max_attempts": 2},
                ),
            )
            logger.info("Cognito user pool client initialized (region=%s)", self._region)
            return self._client

    def get_current_user(self) -> CognitoUser | None:
        username = self._store.last_user(self._client_id)
        if username is None:
            return None
        return CognitoUser(username=username, client_id=self._client_id)

    async def get_session_token(self, user: CognitoUser) -> str:
        """Return a valid ID token for ``user``, refreshing the session if needed.

        Raises:
            SessionError: If there is no usable session for the user
        """
        tokens = self._store.load(self._client_id, user.username)
        if tokens is None:
            raise SessionError(f"No session stored for user {user.username}", "no_session")

        if not self._is_expired(tokens.id_token):
            return tokens.id_token

        if not tokens.refresh_token:
            raise SessionError("Session expired and no refresh token is available", "expired")

        refreshed = await asyncio.to_thread(self._refresh_sync, user, tokens.refresh_token)
        return refreshed.id_token

    async def sign_in(self, username: str, password: str) -> CognitoUser:
        """Authenticate with username and password and persist the session."""
        await asyncio.to_thread(self._sign_in_sync, username, password)
        return CognitoUser(username=username, client_id=self._client_id)

    def sign_out(self, user: CognitoUser) -> None:
        self._store.remove(self._client_id, user.username)
        logger.info("Signed out user %s", user.username)

    def _is_expired(self, id_token: str) -> bool:
        try:
            claims = jwt.decode(
                id_token,
                options={"verify_signature": False, "verify_exp": False},
            )
        except jwt.PyJWTError as exc:
            raise SessionError(f"Stored ID token is malformed: {exc}", "invalid_token") from exc

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return True
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        return expires_at <= as_utc(self._clock()) + _TOKEN_EXPIRY_SKEW

    def _refresh_sync(self, user: CognitoUser, refresh_token: str) -> StoredTokens:
        result = self._initiate_auth(
            "REFRESH_TOKEN_AUTH",
            {"REFRESH_TOKEN": refresh_token},
        )
        tokens = StoredTokens(
            id_token=result["IdToken"],
            access_token=result["AccessToken"],
            refresh_token=result.get("RefreshToken") or refresh_token,
        )
        self._store.save(self._client_id, user.username, tokens, make_current=False)
        logger.info("Refreshed session for user %s", user.username)
        return tokens

    def _sign_in_sync(self, username: str, password: str) -> StoredTokens:
        result = self._initiate_auth(
            "USER_PASSWORD_AUTH",
            {"USERNAME": username, "PASSWORD": password},
        )
        tokens = StoredTokens(
            id_token=result["IdToken"],
            access_token=result["AccessToken"],
            refresh_token=result.get("RefreshToken"),
        )
        self._store.save(self._client_id, username, tokens)
        logger.info("Signed in user %s", username)
        return tokens

    def _initiate_auth(self, flow: str, parameters: dict[str, str]) -> dict[str, Any]:
        client = self._get_client()
        try:
            response = client.initiate_auth(
                AuthFlow=flow,
                ClientId=self._client_id,
                AuthParameters=parameters,
            )
        except ClientError as exc:
            raise self._map_client_error(exc, flow) from exc
        except BotoCoreError as exc:
            logger.warning("Cognito user pool request failed (%s): %s", flow, exc)
            raise SessionError(str(exc), code="network_error") from exc

        if response.get("ChallengeName"):
            raise SessionError(
                f"Authentication challenge required: {response['ChallengeName']}",
                "challenge_required",
            )
        result = response.get("AuthenticationResult")
        if not result or "IdToken" not in result:
            raise SessionError("User pool returned no tokens", "no_tokens")
        return result

    def _map_client_error(self, exc: ClientError, flow: str) -> SessionError:
        error = exc.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message", str(exc))

        logger.warning(
            "Cognito user pool %s failed: pool=%s, error=%s: %s",
            flow,
            self._user_pool_id,
            code,
            message,
        )
        return SessionError(message, code=_ERROR_CODE_MAP.get(code, "session_error"))
