"""Tests for the file-backed session store."""

from __future__ import annotations

import json
from pathlib import Path

from notes_app.auth.token_store import StoredTokens, TokenStore


def _tokens(suffix: str = "") -> StoredTokens:
    return StoredTokens(
        id_token=f"id{suffix}",
        access_token=f"access{suffix}",
        refresh_token=f"refresh{suffix}",
    )


def test_missing_file_means_no_user(tmp_path: Path) -> None:
    store = TokenStore(tmp_path / "session.json")
    assert store.last_user("client") is None
    assert store.load("client", "alice") is None


def test_save_marks_last_user_and_roundtrips(tmp_path: Path) -> None:
    store = TokenStore(tmp_path / "nested" / "session.json")
    store.save("client", "alice", _tokens())

    assert store.last_user("client") == "alice"
    assert store.load("client", "alice") == _tokens()
    assert store.path.exists()


def test_save_without_make_current_keeps_last_user(tmp_path: Path) -> None:
    store = TokenStore(tmp_path / "session.json")
    store.save("client", "alice", _tokens())
    store.save("client", "bob", _tokens("-b"), make_current=False)

    assert store.last_user("client") == "alice"
    assert store.load("client", "bob") == _tokens("-b")


def test_clients_are_isolated(tmp_path: Path) -> None:
    store = TokenStore(tmp_path / "session.json")
    store.save("client-a", "alice", _tokens())
    assert store.last_user("client-b") is None


def test_remove_forgets_user(tmp_path: Path) -> None:
    store = TokenStore(tmp_path / "session.json")
    store.save("client", "alice", _tokens())
    store.remove("client", "alice")

    assert store.last_user("client") is None
    assert store.load("client", "alice") is None
    store.remove("other-client", "alice")


def test_corrupt_file_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    store = TokenStore(path)
    assert store.last_user("client") is None


def test_incomplete_entry_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text(
        json.dumps({"client": {"last_user": "alice", "users": {"alice": {"id_token": "x"}}}}),
        encoding="utf-8",
    )
    assert TokenStore(path).load("client", "alice") is None


def test_repr_hides_tokens() -> None:
    assert repr(_tokens()) == "StoredTokens(has_refresh_token=True)"
