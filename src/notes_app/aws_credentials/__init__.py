"""AWS credential utilities."""

from notes_app.aws_credentials.cache import CredentialCache
from notes_app.aws_credentials.cognito_identity import (
    CognitoIdentityExchanger,
    ExchangeError,
)
from notes_app.aws_credentials.credentials import TemporaryCredentials

__all__ = [
    "CognitoIdentityExchanger",
    "CredentialCache",
    "ExchangeError",
    "TemporaryCredentials",
]
