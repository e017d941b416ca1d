"""Document-style calls against DynamoDB tables."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import boto3

# Document client action name -> boto3 Table method.
_ACTIONS = {
    "get": "get_item",
    "put": "put_item",
    "query": "query",
    "scan": "scan",
    "update": "update_item",
    "delete": "delete_item",
}


@lru_cache(maxsize=1)
def get_resource() -> Any:
    return boto3.resource("dynamodb")


def call(action: str, params: dict[str, Any]) -> dict[str, Any]:
    """Run ``action`` with ``params``; ``params["TableName"]`` picks the table."""
    method_name = _ACTIONS.get(action)
    if method_name is None:
        raise ValueError(f"Unsupported DynamoDB action: {action}")

    kwargs = dict(params)
    table_name = kwargs.pop("TableName", None)
    if not table_name:
        raise ValueError("TableName is required")

    table = get_resource().Table(table_name)
    return getattr(table, method_name)(**kwargs)
