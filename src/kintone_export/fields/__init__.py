"""Field type handlers for kintone-export.

This module provides a handler for every kintone field type. Each handler
turns the API value into a typed payload and renders it for display.
The registry is closed: unknown types deserialize to their raw value and
display as an empty string.
"""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler

# Text-like types
from kintone_export.fields.types.text import (
    CalcFieldHandler,
    LinkFieldHandler,
    MultiLineTextFieldHandler,
    NumberFieldHandler,
    RadioButtonFieldHandler,
    RecordNumberFieldHandler,
    RichTextFieldHandler,
    StatusFieldHandler,
    TextFieldHandler,
)

# Selection types
from kintone_export.fields.types.single_select import SingleSelectFieldHandler
from kintone_export.fields.types.multi_select import (
    CategoryFieldHandler,
    CheckBoxFieldHandler,
    MultiSelectFieldHandler,
)

# Date/time types
from kintone_export.fields.types.date import DateFieldHandler
from kintone_export.fields.types.time_field import TimeFieldHandler
from kintone_export.fields.types.datetime_field import DateTimeFieldHandler

# Attachments and members
from kintone_export.fields.types.attachment import AttachmentFieldHandler
from kintone_export.fields.types.user import (
    AssigneeFieldHandler,
    GroupFieldHandler,
    OrganizationFieldHandler,
    UserFieldHandler,
)

# System and nested types
from kintone_export.fields.types.system_fields import (
    CreatedTimeFieldHandler,
    CreatorFieldHandler,
    ModifierFieldHandler,
    RecordIdFieldHandler,
    RevisionFieldHandler,
    UpdatedTimeFieldHandler,
)
from kintone_export.fields.types.subtable import SubtableFieldHandler

# Registry of field type handlers
FIELD_HANDLERS: dict[str, type[BaseFieldTypeHandler]] = {
    handler.field_type: handler
    for handler in (
        TextFieldHandler,
        MultiLineTextFieldHandler,
        RichTextFieldHandler,
        NumberFieldHandler,
        CalcFieldHandler,
        RadioButtonFieldHandler,
        LinkFieldHandler,
        StatusFieldHandler,
        RecordNumberFieldHandler,
        SingleSelectFieldHandler,
        MultiSelectFieldHandler,
        CheckBoxFieldHandler,
        CategoryFieldHandler,
        DateFieldHandler,
        TimeFieldHandler,
        DateTimeFieldHandler,
        AttachmentFieldHandler,
        UserFieldHandler,
        OrganizationFieldHandler,
        GroupFieldHandler,
        AssigneeFieldHandler,
        RecordIdFieldHandler,
        RevisionFieldHandler,
        CreatorFieldHandler,
        ModifierFieldHandler,
        CreatedTimeFieldHandler,
        UpdatedTimeFieldHandler,
        SubtableFieldHandler,
    )
}


def get_field_handler(field_type: str) -> type[BaseFieldTypeHandler] | None:
    """
    Get field handler for given field type.

    Args:
        field_type: kintone field type identifier

    Returns:
        Field handler class or None if not found
    """
    return FIELD_HANDLERS.get(field_type)


def list_field_types() -> list[str]:
    """
    List all registered field types.

    Returns:
        List of field type identifiers
    """
    return list(FIELD_HANDLERS.keys())


def deserialize_field(field_type: str, value: Any) -> Any:
    """Convert an API value to the typed payload of its field type."""
    handler = get_field_handler(field_type)
    if handler is None:
        return value
    return handler.deserialize(value)


def format_field(field_type: str, value: Any, delimiter: str | None = None) -> str:
    """
    Render a typed field value as a display string.

    Args:
        field_type: kintone field type identifier
        value: Typed value produced by ``deserialize_field``
        delimiter: Separator for multi-valued fields, "," when not given

    Returns:
        Display string; empty for unknown types
    """
    handler = get_field_handler(field_type)
    if handler is None:
        return ""
    return handler.format_display(value, delimiter or DEFAULT_DELIMITER)


__all__ = [
    "BaseFieldTypeHandler",
    "DEFAULT_DELIMITER",
    "FIELD_HANDLERS",
    "get_field_handler",
    "list_field_types",
    "deserialize_field",
    "format_field",
    # Text-like handlers
    "TextFieldHandler",
    "MultiLineTextFieldHandler",
    "RichTextFieldHandler",
    "NumberFieldHandler",
    "CalcFieldHandler",
    "RadioButtonFieldHandler",
    "LinkFieldHandler",
    "StatusFieldHandler",
    "RecordNumberFieldHandler",
    # Selection handlers
    "SingleSelectFieldHandler",
    "MultiSelectFieldHandler",
    "CheckBoxFieldHandler",
    "CategoryFieldHandler",
    # Date/time handlers
    "DateFieldHandler",
    "TimeFieldHandler",
    "DateTimeFieldHandler",
    # Attachment and member handlers
    "AttachmentFieldHandler",
    "UserFieldHandler",
    "OrganizationFieldHandler",
    "GroupFieldHandler",
    "AssigneeFieldHandler",
    # System and nested handlers
    "RecordIdFieldHandler",
    "RevisionFieldHandler",
    "CreatorFieldHandler",
    "ModifierFieldHandler",
    "CreatedTimeFieldHandler",
    "UpdatedTimeFieldHandler",
    "SubtableFieldHandler",
]
