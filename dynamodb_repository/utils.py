"""
Serialization helpers used by the repository when building requests.

The boto3 resource layer marshals Python values itself, with one gap: it
refuses ``float`` and knows nothing about datetimes, UUIDs or enums. Those
are converted on the way in (floats to ``Decimal``, the rest to strings); on
the way out pydantic parses them back into the declared field types.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping
from uuid import UUID


def to_dynamo_value(value: Any) -> Any:
    """Convert a Python value into something the boto3 resource layer accepts.

    Args:
        value: Scalar, list, set or mapping

    Returns:
        The same structure with floats as Decimal and datetimes, UUIDs and
        enums as their string form

    Examples:
        >>> to_dynamo_value({'likes': 1.5, 'tags': [0.1]})
        {'likes': Decimal('1.5'), 'tags': [Decimal('0.1')]}
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, Enum):
        return to_dynamo_value(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, float):
        # via str() so 0.1 becomes Decimal("0.1")
        return Decimal(str(value))
    if isinstance(value, Mapping):
        return {k: to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo_value(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {to_dynamo_value(v) for v in value}
    return value


def to_dynamo_item(item: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a dumped item into a DynamoDB-ready attribute mapping."""
    return {key: to_dynamo_value(value) for key, value in item.items()}
