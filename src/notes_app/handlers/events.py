"""Field extraction from API Gateway proxy events."""

from __future__ import annotations

from typing import Any


class EventError(ValueError):
    """Raised when a proxy event lacks a required field."""


def identity_id(event: dict[str, Any]) -> str:
    """Identity pool identity id of the caller (IAM-authorized routes)."""
    try:
        value = event["requestContext"]["identity"]["cognitoIdentityId"]
    except (KeyError, TypeError) as exc:
        raise EventError("Missing requestContext.identity.cognitoIdentityId") from exc
    if not value:
        raise EventError("Empty cognitoIdentityId")
    return value


def path_parameter(event: dict[str, Any], name: str) -> str:
    params = event.get("pathParameters") or {}
    if not isinstance(params, dict):
        raise EventError("pathParameters must be an object")
    value = params.get(name)
    if not value:
        raise EventError(f"Missing path parameter: {name}")
    return value
