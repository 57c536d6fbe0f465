"""DateTime field type handler."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO 8601 timestamp as sent by kintone.

    Naive timestamps are taken to be UTC. Returns None for empty or
    malformed input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Invalid datetime value: {value!r}")
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_rfc3339(value: datetime) -> str:
    """Format a timestamp as RFC 3339 with second precision, UTC as ``Z``."""
    value = value.replace(microsecond=0)
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat()


class DateTimeFieldHandler(BaseFieldTypeHandler):
    """
    Handler for datetime fields.

    kintone sends UTC timestamps such as ``2012-01-11T11:30:00Z`` or null.
    """

    field_type = "DATETIME"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to an aware datetime."""
        return parse_timestamp(value)

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """RFC 3339 timestamp, empty when unset."""
        if not isinstance(value, datetime):
            return ""
        return format_rfc3339(value)
