"""Text-like field type handlers.

Every type in this module renders its value verbatim.
"""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler


class TextFieldHandler(BaseFieldTypeHandler):
    """Handler for single line text fields."""

    field_type = "SINGLE_LINE_TEXT"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to string."""
        if value is None:
            return cls.default()
        return str(value)

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Return the text unchanged."""
        if not isinstance(value, str):
            return ""
        return value

    @classmethod
    def default(cls) -> Any:
        """Empty text."""
        return ""


class MultiLineTextFieldHandler(TextFieldHandler):
    """Handler for multi line text fields."""

    field_type = "MULTI_LINE_TEXT"


class RichTextFieldHandler(TextFieldHandler):
    """Handler for rich text fields. The HTML markup is kept as-is."""

    field_type = "RICH_TEXT"


class NumberFieldHandler(TextFieldHandler):
    """Handler for number fields.

    kintone sends numbers as strings; keeping them as strings preserves the
    exact decimal representation.
    """

    field_type = "NUMBER"


class CalcFieldHandler(TextFieldHandler):
    """Handler for calculated fields."""

    field_type = "CALC"


class RadioButtonFieldHandler(TextFieldHandler):
    """Handler for radio button fields."""

    field_type = "RADIO_BUTTON"


class LinkFieldHandler(TextFieldHandler):
    """Handler for link fields (URL, phone number or e-mail)."""

    field_type = "LINK"


class StatusFieldHandler(TextFieldHandler):
    """Handler for the process management status field."""

    field_type = "STATUS"


class RecordNumberFieldHandler(TextFieldHandler):
    """Handler for record number fields, which may carry an app code prefix."""

    field_type = "RECORD_NUMBER"
