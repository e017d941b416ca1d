"""GET /notes: all notes of the calling identity."""

from __future__ import annotations

import json
import logging
from typing import Any

from boto3.dynamodb.conditions import Key

from notes_app.config import load_settings
from notes_app.handlers import dynamodb
from notes_app.handlers.events import identity_id
from notes_app.handlers.response import failure, success
from notes_app.logging_utils import get_logger
from notes_app.utils.masking import redact_sensitive_fields
from notes_app.utils.serialization import json_default

logger = get_logger(__name__)


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "List event: %s",
            json.dumps(redact_sensitive_fields(event), default=json_default),
        )
    try:
        params = {
            "TableName": load_settings().notes.table_name,
            # Partition key is the caller's identity pool identity id.
            "KeyConditionExpression": Key("userId").eq(identity_id(event)),
        }
        result = dynamodb.call("query", params)
    except Exception as exc:
        # Callers only ever see the status flag.
        logger.warning("List notes failed: %s: %s", type(exc).__name__, exc)
        return failure({"status": False})

    logger.info("List returned %d notes", result.get("Count", 0))
    return success(result.get("Items", []))
