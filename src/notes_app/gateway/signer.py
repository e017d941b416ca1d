"""SigV4 request signing for API Gateway (``execute-api``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import quote, urlencode

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from notes_app.aws_credentials.credentials import TemporaryCredentials

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass(frozen=True)
class SignedRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


class RequestSigner:
    """Stateless signer bound to an API endpoint and region."""

    def __init__(self, endpoint: str, region: str, service: str = "execute-api") -> None:
        self._endpoint = endpoint.rstrip("/")
        self._region = region
        self._service = service

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def build_url(self, path: str, query_params: Mapping[str, object] | None = None) -> str:
        url = f"{self._endpoint}/{path.lstrip('/')}"
        if query_params:
            pairs = sorted((k, str(v)) for k, v in query_params.items())
            url = f"{url}?{urlencode(pairs, quote_via=quote)}"
        return url

    def sign(
        self,
        credentials: TemporaryCredentials,
        *,
        method: str,
        path: str,
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, object] | None = None,
        body: bytes | None = None,
    ) -> SignedRequest:
        merged = {**_DEFAULT_HEADERS, **(headers or {})}
        request = AWSRequest(
            method=method.upper(),
            url=self.build_url(path, query_params),
            data=body,
            headers=merged,
        )
        botocore_creds = Credentials(
            access_key=credentials.access_key_id,
            secret_key=credentials.secret_access_key,
            token=credentials.session_token or None,
        )
        SigV4Auth(botocore_creds, self._service, self._region).add_auth(request)
        return SignedRequest(
            method=request.method,
            url=request.url,
            headers=dict(request.headers.items()),
            body=body,
        )
