"""Per-identity file uploads to the attachments bucket."""

from __future__ import annotations

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO, Callable

import boto3
from botocore.config import Config

from notes_app.utils.time import epoch_millis, utc_now

if TYPE_CHECKING:
    from notes_app.auth.orchestrator import AuthOrchestrator
    from notes_app.aws_credentials.credentials import TemporaryCredentials

logger = logging.getLogger(__name__)

_DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class UploadFile:
    name: str
    body: bytes | BinaryIO
    content_type: str = _DEFAULT_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: str | Path) -> "UploadFile":
        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            body=file_path.read_bytes(),
            content_type=content_type or _DEFAULT_CONTENT_TYPE,
        )


def build_object_key(identity_id: str, file_name: str, now: datetime | None = None) -> str:
    """Key namespaced by identity so users cannot collide with or read each other's files."""
    return f"{identity_id}-{epoch_millis(now)}-{file_name}"


def _create_s3_client(credentials: "TemporaryCredentials", region: str | None) -> Any:
    session = boto3.Session(
        aws_access_key_id=credentials.access_key_id,
        aws_secret_access_key=credentials.secret_access_key,
        aws_session_token=credentials.session_token,
        region_name=region,
    )
    return session.client(
        "s3",
        config=Config(
            request_checksum_calculation="when_required",
            response_checksum_validation="when_required",
        ),
    )


class S3Uploader:
    def __init__(
        self,
        orchestrator: "AuthOrchestrator",
        bucket: str,
        region: str | None = None,
        client_factory: Callable[["TemporaryCredentials", str | None], Any] = _create_s3_client,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._orchestrator = orchestrator
        self._bucket = bucket
        self._region = region
        self._client_factory = client_factory
        self._clock = clock

    async def upload(self, file: UploadFile) -> dict[str, Any]:
        """
        Upload ``file`` publicly readable under the caller's identity prefix.

        Raises:
            NotAuthenticatedError: If no user is signed in
            botocore.exceptions.ClientError: Surfaced unchanged from S3
        """
        credentials = await self._orchestrator.require_credentials()
        if not credentials.identity_id:
            raise RuntimeError("Cached credentials carry no identity id")

        key = build_object_key(credentials.identity_id, file.name, self._clock())
        logger.info("Uploading %s to s3://%s/%s", file.name, self._bucket, key)
        return await asyncio.to_thread(self._put_sync, credentials, key, file)

    def _put_sync(
        self,
        credentials: "TemporaryCredentials",
        key: str,
        file: UploadFile,
    ) -> dict[str, Any]:
        client = self._client_factory(credentials, self._region)
        response = client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=file.body,
            ContentType=file.content_type,
            ACL="public-read",
        )
        return {**response, "Bucket": self._bucket, "Key": key}
