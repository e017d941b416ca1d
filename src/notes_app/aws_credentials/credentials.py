"""Temporary AWS credential set issued by the identity pool."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class TemporaryCredentials:
    """Immutable temporary AWS credentials from Cognito Identity."""

    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime
    identity_id: str | None = None

    def __repr__(self) -> str:
        if self.is_empty:
            return "TemporaryCredentials(<empty>)"
        return (
            f"TemporaryCredentials(access_key_id={self.access_key_id[:8]}***, "
            f"identity_id={self.identity_id!r}, "
            f"expiration={self.expiration.isoformat()})"
        )

    @classmethod
    def empty(cls) -> "TemporaryCredentials":
        """Credential set marking a deliberately cleared cache."""
        return cls(
            access_key_id="",
            secret_access_key="",
            session_token="",
            expiration=_EPOCH,
        )

    @property
    def is_empty(self) -> bool:
        return not self.access_key_id and not self.secret_access_key
