"""In-process cache for the signed-in user's temporary credentials."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from notes_app.aws_credentials.credentials import TemporaryCredentials
from notes_app.utils.time import as_utc, utc_now

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_MARGIN_SECONDS = 60


class CredentialCache:
    """Holds at most one credential set and the identity id it was issued for.

    Three states are distinguished: never populated (``credentials is None``),
    populated, and deliberately cleared (holds ``TemporaryCredentials.empty()``).
    """

    def __init__(
        self,
        expiry_margin_seconds: int = DEFAULT_EXPIRY_MARGIN_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if expiry_margin_seconds < 0:
            raise ValueError("expiry_margin_seconds must be >= 0")
        self._margin = timedelta(seconds=expiry_margin_seconds)
        self._clock = clock
        self._credentials: TemporaryCredentials | None = None
        self._identity_id: str | None = None

    @property
    def credentials(self) -> TemporaryCredentials | None:
        return self._credentials

    @property
    def identity_id(self) -> str | None:
        return self._identity_id

    @property
    def expiry_margin(self) -> timedelta:
        return self._margin

    @property
    def is_cleared(self) -> bool:
        return self._credentials is not None and self._credentials.is_empty

    def has_valid_credentials(self, now: datetime | None = None) -> bool:
        creds = self._credentials
        if creds is None or creds.is_empty:
            return False
        current = as_utc(now) if now is not None else as_utc(self._clock())
        return current < as_utc(creds.expiration) - self._margin

    def store(self, credentials: TemporaryCredentials) -> None:
        self._credentials = credentials
        if credentials.identity_id:
            self._identity_id = credentials.identity_id
        logger.debug("Cached credentials: %r", credentials)

    def clear(self) -> None:
        self._credentials = TemporaryCredentials.empty()
        self._identity_id = None
        logger.debug("Credential cache cleared")
