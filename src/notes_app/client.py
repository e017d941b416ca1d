"""Wiring of the auth flow, API invoker and uploader from settings."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

from notes_app.auth.orchestrator import AuthOrchestrator
from notes_app.auth.token_store import TokenStore
from notes_app.auth.user_pool import CognitoUser, UserPoolClient
from notes_app.aws_credentials.cache import CredentialCache
from notes_app.aws_credentials.cognito_identity import CognitoIdentityExchanger
from notes_app.config import Settings, load_settings
from notes_app.gateway.invoker import ApiGatewayInvoker
from notes_app.gateway.signer import RequestSigner
from notes_app.logging_utils import get_logger
from notes_app.storage.upload import S3Uploader, UploadFile


@dataclass
class NotesClient:
    orchestrator: AuthOrchestrator
    invoker: ApiGatewayInvoker | None = None
    uploader: S3Uploader | None = None

    async def sign_in(self, username: str, password: str) -> CognitoUser:
        user = await self.orchestrator.user_pool.sign_in(username, password)
        # Credentials of a previous user must not leak into the new session.
        if self.orchestrator.cache.credentials is not None:
            self.orchestrator.cache.clear()
        return user

    async def invoke(
        self,
        path: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, object] | None = None,
        body: Any = None,
    ) -> Any:
        if self.invoker is None:
            raise RuntimeError("API_GATEWAY_URL is required to call the notes API")
        return await self.invoker.invoke(
            path,
            method=method,
            headers=headers,
            query_params=query_params,
            body=body,
        )

    async def upload(self, file: UploadFile) -> dict[str, Any]:
        if self.uploader is None:
            raise RuntimeError("S3_BUCKET is required to upload attachments")
        return await self.uploader.upload(file)


def build_notes_client(settings: Settings) -> NotesClient:
    logger = get_logger(__name__)

    cognito = settings.cognito
    if not cognito.is_configured:
        raise RuntimeError(
            "COGNITO_USER_POOL_ID, COGNITO_APP_CLIENT_ID and COGNITO_IDENTITY_POOL_ID are required"
        )

    user_pool = UserPoolClient(
        region=cognito.region,
        user_pool_id=cognito.user_pool_id,
        client_id=cognito.app_client_id,
        token_store=TokenStore(settings.auth.token_store_path),
    )
    exchanger = CognitoIdentityExchanger(
        region=cognito.region,
        user_pool_id=cognito.user_pool_id,
        identity_pool_id=cognito.identity_pool_id,
    )
    cache = CredentialCache(
        expiry_margin_seconds=settings.auth.credential_expiry_margin_seconds,
    )
    orchestrator = AuthOrchestrator(user_pool=user_pool, exchanger=exchanger, cache=cache)

    invoker = None
    if settings.api_gateway.url:
        signer = RequestSigner(
            endpoint=settings.api_gateway.url,
            region=settings.api_gateway.region,
        )
        invoker = ApiGatewayInvoker(orchestrator=orchestrator, signer=signer)

    uploader = None
    if settings.storage.bucket:
        uploader = S3Uploader(
            orchestrator=orchestrator,
            bucket=settings.storage.bucket,
            region=settings.storage.region,
        )

    logger.info(
        "Notes client configured (region=%s, api=%s, bucket=%s)",
        cognito.region,
        settings.api_gateway.url,
        settings.storage.bucket,
    )
    return NotesClient(orchestrator=orchestrator, invoker=invoker, uploader=uploader)


@lru_cache(maxsize=1)
def get_notes_client() -> NotesClient:
    return build_notes_client(load_settings())


async def auth_user() -> bool:
    return await get_notes_client().orchestrator.ensure_authenticated()


def sign_out_user() -> None:
    get_notes_client().orchestrator.sign_out()


async def invoke_api(
    path: str,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    query_params: Mapping[str, object] | None = None,
    body: Any = None,
) -> Any:
    return await get_notes_client().invoke(
        path,
        method=method,
        headers=headers,
        query_params=query_params,
        body=body,
    )


async def upload_file(file: UploadFile) -> dict[str, Any]:
    return await get_notes_client().upload(file)
