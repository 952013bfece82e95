"""Text-column encoding for nested entity fields.

Nested structures (lists, objects) are stored as JSON text in a column of the
same name. Reads never raise: a stored value that is not valid JSON comes back
as the raw string.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic.alias_generators import to_camel

from pathfinder.db.base import Base

logger = logging.getLogger(__name__)


def dump_json_column(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def load_json_column(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Column value is not JSON, returning raw text")
        return raw


def encode_values(model: type[Base], values: dict[str, Any]) -> dict[str, Any]:
    """Keep only known columns and JSON-encode the nested ones."""
    json_columns = set(getattr(model, "__json_columns__", ()))
    columns = {column.key for column in model.__table__.columns}
    encoded: dict[str, Any] = {}
    for key, value in values.items():
        if key not in columns:
            continue
        encoded[key] = dump_json_column(value) if key in json_columns else value
    return encoded


def record_to_dict(record: Base, *, skip_null: bool = False) -> dict[str, Any]:
    """Serialise a row for the wire: camelCase keys, nested columns decoded."""
    json_columns = set(getattr(record, "__json_columns__", ()))
    payload: dict[str, Any] = {}
    for column in record.__table__.columns:
        value = getattr(record, column.key)
        if skip_null and value is None:
            continue
        if column.key in json_columns:
            value = load_json_column(value)
        payload[to_camel(column.key)] = value
    return payload
