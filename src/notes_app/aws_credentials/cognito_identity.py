"""Cognito identity pool credential exchange.

A user pool ID token is exchanged for temporary AWS credentials in two calls:
``GetId`` resolves (or creates) the caller's identity in the identity pool and
``GetCredentialsForIdentity`` issues credentials for it. Both calls are
authorized by the login map alone, so the client is unsigned.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any

import botocore.session
from botocore import UNSIGNED
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from notes_app.aws_credentials.credentials import TemporaryCredentials

logger = logging.getLogger(__name__)


class ExchangeError(Exception):
    """Raised when exchanging a session token for AWS credentials fails."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


_ERROR_CODE_MAP = {
    "NotAuthorizedException": "not_authorized",
    "ResourceNotFoundException": "identity_not_found",
    "InvalidParameterException": "invalid_request",
    "InvalidIdentityPoolConfigurationException": "pool_misconfigured",
    "ExternalServiceException": "idp_error",
    "LimitExceededException": "throttled",
    "TooManyRequestsException": "throttled",
    "ResourceConflictException": "conflict",
    "InternalErrorException": "service_error",
}

_STALE_IDENTITY_CODES = frozenset({"NotAuthorizedException", "ResourceNotFoundException"})


class CognitoIdentityExchanger:
    """Thread-safe exchanger for Cognito identity pool credentials."""

    def __init__(self, region: str, user_pool_id: str, identity_pool_id: str) -> None:
        self._region = region
        self._user_pool_id = user_pool_id
        self._identity_pool_id = identity_pool_id
        self._client: Any = None
        self._lock = threading.Lock()

    @property
    def authenticator(self) -> str:
        """Login map key naming the user pool that issued the token."""
        return f"cognito-idp.{self._region}.amazonaws.com/{self._user_pool_id}"

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is not None:
                return self._client

            session = botocore.session.get_session()
            self._client = session.create_client(
                "cognito-identity",
                region_name=self._region,
                config=Config(
                    signature_version=UNSIGNED,
                    connect_timeout=5,
                    read_timeout=15,
                    retries={"max_attempts": 2},
                ),
            )
            logger.info("Cognito Identity client initialized (UNSIGNED, region=%s)", self._region)
            return self._client

    async def exchange(
        self,
        session_token: str,
        identity_id: str | None = None,
    ) -> TemporaryCredentials:
        """
        Exchange a user pool ID token for temporary credentials.

        Args:
            session_token: ID token (JWT) of the signed-in user
            identity_id: Previously resolved identity id; skips ``GetId`` when set

        Returns:
            TemporaryCredentials bound to the resolved identity id

        Raises:
            ExchangeError: If either Cognito Identity call fails
        """
        return await asyncio.to_thread(self._exchange_sync, session_token, identity_id)

    def _exchange_sync(
        self,
        session_token: str,
        identity_id: str | None,
    ) -> TemporaryCredentials:
        client = self._get_client()
        logins = {self.authenticator: session_token}

        try:
            if identity_id:
                try:
                    response = client.get_credentials_for_identity(
                        IdentityId=identity_id,
                        Logins=logins,
                    )
                except ClientError as exc:
                    # A remembered id may belong to another login; resolve afresh once.
                    if exc.response.get("Error", {}).get("Code") not in _STALE_IDENTITY_CODES:
                        raise
                    logger.info("Identity %s rejected for this login, resolving again", identity_id)
                    response = self._resolve_and_fetch(client, logins)
            else:
                response = self._resolve_and_fetch(client, logins)
        except ClientError as exc:
            raise self._map_client_error(exc) from exc
        except BotoCoreError as exc:
            logger.warning("Cognito Identity request failed: %s", exc)
            raise ExchangeError(str(exc), code="network_error") from exc

        creds = response["Credentials"]
        resolved_id = response.get("IdentityId") or identity_id
        logger.info("Obtained credentials for identity %s", resolved_id)

        return TemporaryCredentials(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretKey"],
            session_token=creds["SessionToken"],
            expiration=creds["Expiration"],
            identity_id=resolved_id,
        )

    def _resolve_and_fetch(self, client: Any, logins: dict[str, str]) -> dict[str, Any]:
        resp = client.get_id(IdentityPoolId=self._identity_pool_id, Logins=logins)
        identity_id = resp["IdentityId"]
        response = client.get_credentials_for_identity(IdentityId=identity_id, Logins=logins)
        return {**response, "IdentityId": response.get("IdentityId") or identity_id}

    def _map_client_error(self, exc: ClientError) -> ExchangeError:
        error = exc.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message", str(exc))

        logger.warning(
            "Cognito Identity failed: pool=%s, error=%s: %s",
            self._identity_pool_id,
            code,
            message,
        )
        return ExchangeError(message, code=_ERROR_CODE_MAP.get(code, "exchange_error"))
