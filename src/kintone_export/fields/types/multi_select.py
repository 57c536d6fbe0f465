"""Multi-valued selection field type handlers."""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler


class MultiSelectFieldHandler(BaseFieldTypeHandler):
    """
    Handler for multi select fields.

    Value structure: list of selected option names, in the order kintone
    returns them.
    """

    field_type = "MULTI_SELECT"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to a list of strings."""
        if value is None:
            return cls.default()
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return cls.default()

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Join selections with the delimiter."""
        return cls._join(value, delimiter)

    @classmethod
    def default(cls) -> Any:
        """No selections."""
        return []


class CheckBoxFieldHandler(MultiSelectFieldHandler):
    """Handler for check box fields."""

    field_type = "CHECK_BOX"


class CategoryFieldHandler(MultiSelectFieldHandler):
    """Handler for the record category field."""

    field_type = "CATEGORY"
