"""DELETE /notes/{id}: remove one note of the calling identity."""

from __future__ import annotations

import json
import logging
from typing import Any

from notes_app.config import load_settings
from notes_app.handlers import dynamodb
from notes_app.handlers.events import identity_id, path_parameter
from notes_app.handlers.response import failure, success
from notes_app.logging_utils import get_logger
from notes_app.utils.masking import redact_sensitive_fields
from notes_app.utils.serialization import json_default

logger = get_logger(__name__)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Delete event: %s",
            json.dumps(redact_sensitive_fields(event), default=json_default),
        )
    try:
        params = {
            "TableName": load_settings().notes.table_name,
            "Key": {
                "userId": identity_id(event),
                "noteId": path_parameter(event, "id"),
            },
        }
        dynamodb.call("delete", params)
    except Exception as exc:
        logger.warning("Delete note failed: %s: %s", type(exc).__name__, exc)
        return failure({"status": False})

    return success({"status": True})
