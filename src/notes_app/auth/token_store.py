"""File-backed store for user pool sessions.

Keeps the tokens of signed-in users per app client, plus which user signed in
last. This is what "the current user" resolves against.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredTokens:
    id_token: str
    access_token: str
    refresh_token: str | None = None

    def __repr__(self) -> str:
        return f"StoredTokens(has_refresh_token={self.refresh_token is not None})"


class TokenStore:
    """JSON file of ``{client_id: {"last_user": ..., "users": {username: tokens}}}``."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt token store at %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.chmod(tmp, 0o600)
        tmp.replace(self._path)

    def last_user(self, client_id: str) -> str | None:
        with self._lock:
            entry = self._read().get(client_id) or {}
        username = entry.get("last_user")
        return username if isinstance(username, str) and username else None

    def load(self, client_id: str, username: str) -> StoredTokens | None:
        with self._lock:
            entry = self._read().get(client_id) or {}
        tokens = (entry.get("users") or {}).get(username)
        if not isinstance(tokens, dict):
            return None
        try:
            return StoredTokens(
                id_token=tokens["id_token"],
                access_token=tokens["access_token"],
                refresh_token=tokens.get("refresh_token"),
            )
        except KeyError:
            logger.warning("Incomplete stored session for user %s", username)
            return None

    def save(
        self,
        client_id: str,
        username: str,
        tokens: StoredTokens,
        *,
        make_current: bool = True,
    ) -> None:
        with self._lock:
            data = self._read()
            entry = data.setdefault(client_id, {})
            entry.setdefault("users", {})[username] = asdict(tokens)
            if make_current:
                entry["last_user"] = username
            self._write(data)

    def remove(self, client_id: str, username: str) -> None:
        with self._lock:
            data = self._read()
            entry = data.get(client_id)
            if not entry:
                return
            (entry.get("users") or {}).pop(username, None)
            if entry.get("last_user") == username:
                entry.pop("last_user", None)
            self._write(data)
