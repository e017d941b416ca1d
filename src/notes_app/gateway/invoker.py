"""Signed JSON calls to the notes API behind API Gateway."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping

import httpx

if TYPE_CHECKING:
    from notes_app.auth.orchestrator import AuthOrchestrator
    from notes_app.gateway.signer import RequestSigner, SignedRequest

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Non-200 response from the API; the message is the response body text."""

    def __init__(self, message: str, status_code: int, code: str = "gateway_error") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ApiGatewayInvoker:
    def __init__(
        self,
        orchestrator: "AuthOrchestrator",
        signer: "RequestSigner",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._signer = signer
        self._http_client = http_client

    async def invoke(
        self,
        path: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, object] | None = None,
        body: Any = None,
    ) -> Any:
        """
        Call ``path`` on the API with SigV4-signed headers.

        Raises:
            NotAuthenticatedError: If no user is signed in
            SessionError / ExchangeError: If credentials could not be obtained
            GatewayError: If the API answers with anything but 200
        """
        credentials = await self._orchestrator.require_credentials()

        payload = json.dumps(body).encode("utf-8") if body is not None else None
        signed = self._signer.sign(
            credentials,
            method=method,
            path=path,
            headers=headers,
            query_params=query_params,
            body=payload,
        )

        if self._http_client is not None:
            response = await self._send(self._http_client, signed)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._send(client, signed)

        if response.status_code != 200:
            logger.warning("API %s %s returned %d", signed.method, path, response.status_code)
            raise GatewayError(response.text, status_code=response.status_code)

        return response.json()

    @staticmethod
    async def _send(client: httpx.AsyncClient, signed: "SignedRequest") -> httpx.Response:
        return await client.request(
            signed.method,
            signed.url,
            headers=signed.headers,
            content=signed.body,
        )
