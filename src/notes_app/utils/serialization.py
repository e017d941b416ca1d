"""JSON serialization utilities."""

from __future__ import annotations

import datetime
import decimal


def json_default(obj: object) -> object:
    """JSON serializer for values DynamoDB and boto3 hand back."""
    if isinstance(obj, (datetime.date, datetime.datetime)):
        return obj.isoformat()
    if isinstance(obj, decimal.Decimal):
        # DynamoDB numbers: int when integral, float unless that loses precision.
        if obj == obj.to_integral_value():
            return int(obj)
        f = float(obj)
        if decimal.Decimal(str(f)) != obj:
            return str(obj)
        return f
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    return str(obj)
