"""System field type handlers.

These fields are read-only and managed by kintone: record metadata,
creator/modifier and creation/modification timestamps.
"""

from datetime import datetime
from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler
from kintone_export.fields.types.datetime_field import format_rfc3339, parse_timestamp
from kintone_export.fields.types.text import TextFieldHandler
from kintone_export.fields.types.user import member_code


class RecordIdFieldHandler(TextFieldHandler):
    """Handler for the ``$id`` metadata field."""

    field_type = "__ID__"


class RevisionFieldHandler(TextFieldHandler):
    """Handler for the ``$revision`` metadata field."""

    field_type = "__REVISION__"


class CreatorFieldHandler(BaseFieldTypeHandler):
    """
    Handler for the creator field.

    Value structure: ``{"code": "sato", "name": "Noboru Sato"}``.
    """

    field_type = "CREATOR"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Keep the member code."""
        return member_code(value) or cls.default()

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Member code."""
        if not isinstance(value, str):
            return ""
        return value

    @classmethod
    def default(cls) -> Any:
        """Empty code."""
        return ""


class ModifierFieldHandler(CreatorFieldHandler):
    """Handler for the modifier field."""

    field_type = "MODIFIER"


class CreatedTimeFieldHandler(BaseFieldTypeHandler):
    """
    Handler for the created datetime field.

    kintone always sets it, so it renders as an RFC 3339 timestamp.
    """

    field_type = "CREATED_TIME"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to an aware datetime."""
        return parse_timestamp(value)

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """RFC 3339 timestamp."""
        if not isinstance(value, datetime):
            return ""
        return format_rfc3339(value)


class UpdatedTimeFieldHandler(CreatedTimeFieldHandler):
    """Handler for the updated datetime field."""

    field_type = "UPDATED_TIME"
