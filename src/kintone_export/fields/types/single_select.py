"""Single select (drop-down) field type handler."""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler


class SingleSelectFieldHandler(BaseFieldTypeHandler):
    """
    Handler for drop-down fields.

    The value is the selected option name, or None when nothing is selected.
    """

    field_type = "DROP_DOWN"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to option name or None."""
        if value is None or value == "":
            return None
        return str(value)

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Selected option, empty when unselected."""
        if not isinstance(value, str):
            return ""
        return value
