"""Time field type handler."""

import logging
from datetime import time
from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler

logger = logging.getLogger(__name__)


class TimeFieldHandler(BaseFieldTypeHandler):
    """Handler for time fields. kintone sends ``HH:MM`` or null."""

    field_type = "TIME"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to time."""
        if value is None or value == "":
            return None
        if isinstance(value, time):
            return value
        try:
            return time.fromisoformat(str(value))
        except ValueError:
            logger.warning(f"Invalid time value: {value!r}")
            return cls.default()

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Format as HH:MM:SS, empty when unset."""
        if not isinstance(value, time):
            return ""
        return value.strftime("%H:%M:%S")
