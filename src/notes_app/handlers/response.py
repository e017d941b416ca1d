"""API Gateway proxy response envelopes."""

from __future__ import annotations

import json
from typing import Any

from notes_app.utils.serialization import json_default

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": True,
}


def build_response(status_code: int, body: Any) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(_CORS_HEADERS),
        "body": json.dumps(body, default=json_default),
    }


def success(body: Any) -> dict[str, Any]:
    return build_response(200, body)


def failure(body: Any) -> dict[str, Any]:
    return build_response(500, body)
