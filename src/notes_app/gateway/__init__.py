"""API Gateway signing and invocation."""

from notes_app.gateway.invoker import ApiGatewayInvoker, GatewayError
from notes_app.gateway.signer import RequestSigner, SignedRequest

__all__ = ["ApiGatewayInvoker", "GatewayError", "RequestSigner", "SignedRequest"]
