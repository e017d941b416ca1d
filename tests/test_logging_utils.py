from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from notes_app import logging_utils


def _settings(log_file: str | None, level: str = "INFO") -> SimpleNamespace:
    return SimpleNamespace(
        logging=SimpleNamespace(level=level, file=log_file),
    )


@patch("notes_app.logging_utils.load_settings")
@patch("notes_app.logging_utils.logging.basicConfig")
def test_configure_logging_stream_only(
    mock_basic_config: MagicMock,
    mock_load_settings: MagicMock,
) -> None:
    mock_load_settings.return_value = _settings(None, level="debug")

    logging_utils.configure_logging()

    kwargs = mock_basic_config.call_args.kwargs
    assert kwargs["force"] is True
    assert kwargs["level"] == logging.DEBUG
    assert len(kwargs["handlers"]) == 1


@patch("notes_app.logging_utils.load_settings")
@patch("notes_app.logging_utils.logging.basicConfig")
def test_configure_logging_with_file(
    mock_basic_config: MagicMock,
    mock_load_settings: MagicMock,
    tmp_path,
) -> None:
    mock_load_settings.return_value = _settings(str(tmp_path / "logs" / "notes.log"))

    logging_utils.configure_logging()

    handlers = mock_basic_config.call_args.kwargs["handlers"]
    assert len(handlers) == 2
    for handler in handlers:
        handler.close()


@patch("notes_app.logging_utils.load_settings")
@patch("notes_app.logging_utils.logging.FileHandler", side_effect=OSError("permission denied"))
@patch("notes_app.logging_utils._logger")
@patch("notes_app.logging_utils.logging.basicConfig")
def test_configure_logging_file_handler_error(
    _mock_basic_config: MagicMock,
    mock_logger: MagicMock,
    _mock_file_handler: MagicMock,
    mock_load_settings: MagicMock,
    tmp_path,
) -> None:
    mock_load_settings.return_value = _settings(str(tmp_path / "app.log"))

    logging_utils.configure_logging()

    mock_logger.warning.assert_called_once()


def test_get_logger_auto_configures(monkeypatch) -> None:
    monkeypatch.setattr(logging_utils, "_logging_configured", False)

    calls = {"count": 0}

    def fake_configure() -> None:
        calls["count"] += 1
        monkeypatch.setattr(logging_utils, "_logging_configured", True)

    monkeypatch.setattr(logging_utils, "configure_logging", fake_configure)

    logger = logging_utils.get_logger("test.logger")
    assert logger.name == "test.logger"
    assert calls["count"] == 1


@patch("notes_app.logging_utils.load_settings", side_effect=RuntimeError("Invalid configuration: table_name"))
@patch("notes_app.logging_utils.logging.basicConfig")
def test_configure_logging_survives_invalid_settings(
    mock_basic_config: MagicMock,
    _mock_load_settings: MagicMock,
    monkeypatch,
) -> None:
    monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)

    logging_utils.configure_logging()

    kwargs = mock_basic_config.call_args.kwargs
    assert kwargs["level"] == logging.INFO
    assert len(kwargs["handlers"]) == 1


@patch("notes_app.logging_utils.load_settings")
@patch("notes_app.logging_utils.logging.basicConfig")
def test_configure_logging_keeps_lambda_runtime_handler(
    mock_basic_config: MagicMock,
    mock_load_settings: MagicMock,
    monkeypatch,
) -> None:
    mock_load_settings.return_value = _settings(None, level="warning")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "notes-list")
    root = logging.getLogger()
    runtime_handler = logging.NullHandler()
    previous_level = root.level
    root.addHandler(runtime_handler)
    try:
        logging_utils.configure_logging()

        assert runtime_handler in root.handlers
        assert root.level == logging.WARNING
    finally:
        root.removeHandler(runtime_handler)
        root.setLevel(previous_level)

    mock_basic_config.assert_not_called()
