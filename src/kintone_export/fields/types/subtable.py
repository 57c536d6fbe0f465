"""Subtable field type handler."""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler
from kintone_export.schemas.record import SubtableRow


class SubtableFieldHandler(BaseFieldTypeHandler):
    """
    Handler for subtable fields.

    Value structure: list of ``{"id": "48290", "value": {<code>: {"type", "value"}}}``.
    Subtables are expanded into columns by the row flattener; rendering one
    directly is not supported and yields an empty string.
    """

    field_type = "SUBTABLE"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to a list of SubtableRow."""
        if not isinstance(value, list):
            return cls.default()
        return [
            row if isinstance(row, SubtableRow) else SubtableRow.from_api(row)
            for row in value
            if isinstance(row, (dict, SubtableRow))
        ]

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Unsupported."""
        return ""

    @classmethod
    def default(cls) -> Any:
        """No rows."""
        return []
