"""Tests for wiring the notes client from settings."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from notes_app import client as client_module
from notes_app.client import NotesClient, build_notes_client, get_notes_client
from notes_app.config import Settings
from notes_app.storage.upload import UploadFile


def _settings(tmp_path: Path, **overrides: object) -> Settings:
    data: dict[str, object] = {
        "cognito": {
            "region": "us-east-1",
            "user_pool_id": "us-east-1_Pool",
            "app_client_id": "client",
            "identity_pool_id": "us-east-1:pool",
        },
        "auth": {
            "credential_expiry_margin_seconds": 120,
            "token_store_path": str(tmp_path / "session.json"),
        },
    }
    data.update(overrides)
    return Settings.model_validate(data)


def test_build_requires_cognito_settings() -> None:
    with pytest.raises(RuntimeError, match="COGNITO_USER_POOL_ID"):
        build_notes_client(Settings())


def test_build_wires_optional_components(tmp_path: Path) -> None:
    bare = build_notes_client(_settings(tmp_path))
    assert bare.invoker is None
    assert bare.uploader is None
    assert bare.orchestrator.cache.expiry_margin.total_seconds() == 120

    full = build_notes_client(
        _settings(
            tmp_path,
            api_gateway={"region": "us-east-1", "url": "https://api.example.com/prod"},
            storage={"bucket": "uploads", "region": "us-east-1"},
        )
    )
    assert full.invoker is not None
    assert full.uploader is not None


@pytest.mark.asyncio
async def test_invoke_and_upload_require_configuration(tmp_path: Path) -> None:
    notes = build_notes_client(_settings(tmp_path))

    with pytest.raises(RuntimeError, match="API_GATEWAY_URL"):
        await notes.invoke("/notes")
    with pytest.raises(RuntimeError, match="S3_BUCKET"):
        await notes.upload(UploadFile(name="a.txt", body=b"x"))


@pytest.mark.asyncio
async def test_sign_in_drops_previous_credentials() -> None:
    orchestrator = MagicMock()
    orchestrator.user_pool.sign_in = AsyncMock(return_value="user")
    orchestrator.cache.credentials = object()
    notes = NotesClient(orchestrator=orchestrator)

    assert await notes.sign_in("alice", "pw") == "user"
    orchestrator.cache.clear.assert_called_once()


@pytest.mark.asyncio
async def test_module_helpers_use_shared_client(monkeypatch: pytest.MonkeyPatch) -> None:
    orchestrator = MagicMock()
    orchestrator.ensure_authenticated = AsyncMock(return_value=True)
    invoker = MagicMock()
    invoker.invoke = AsyncMock(return_value={"ok": True})
    shared = NotesClient(orchestrator=orchestrator, invoker=invoker)
    monkeypatch.setattr(client_module, "get_notes_client", lambda: shared)

    assert await client_module.auth_user() is True
    assert await client_module.invoke_api("/notes", method="DELETE") == {"ok": True}
    client_module.sign_out_user()

    orchestrator.sign_out.assert_called_once()
    invoker.invoke.assert_awaited_once_with(
        "/notes", method="DELETE", headers=None, query_params=None, body=None
    )


def test_get_notes_client_is_cached(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    get_notes_client.cache_clear()
    monkeypatch.setattr(client_module, "load_settings", lambda: _settings(tmp_path))

    assert get_notes_client() is get_notes_client()
    get_notes_client.cache_clear()
