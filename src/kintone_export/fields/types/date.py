"""Date field type handler."""

import logging
from datetime import date, datetime
from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler

logger = logging.getLogger(__name__)


class DateFieldHandler(BaseFieldTypeHandler):
    """Handler for date fields. kintone sends ``YYYY-MM-DD`` or null."""

    field_type = "DATE"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to date."""
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value))
        except ValueError:
            logger.warning(f"Invalid date value: {value!r}")
            return cls.default()

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Format as YYYY-MM-DD, empty when unset."""
        if not isinstance(value, date):
            return ""
        return value.strftime("%Y-%m-%d")
