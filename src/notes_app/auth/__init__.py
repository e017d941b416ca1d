"""User pool authentication and the ensure-authenticated flow."""

from notes_app.auth.orchestrator import (
    AuthOrchestrator,
    AuthResult,
    AuthStatus,
    NotAuthenticatedError,
)
from notes_app.auth.token_store import StoredTokens, TokenStore
from notes_app.auth.user_pool import CognitoUser, SessionError, UserPoolClient

__all__ = [
    "AuthOrchestrator",
    "AuthResult",
    "AuthStatus",
    "CognitoUser",
    "NotAuthenticatedError",
    "SessionError",
    "StoredTokens",
    "TokenStore",
    "UserPoolClient",
]
