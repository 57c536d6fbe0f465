"""Member selection field type handlers."""

from typing import Any

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler


def member_code(entity: Any) -> str | None:
    """Extract the code of a ``{"code": ..., "name": ...}`` entity."""
    if isinstance(entity, dict):
        code = entity.get("code")
        return str(code) if code is not None else None
    if isinstance(entity, str):
        return entity
    return None


class UserFieldHandler(BaseFieldTypeHandler):
    """
    Handler for user selection fields.

    Value structure: list of ``{"code": "sato", "name": "Noboru Sato"}``.
    Only the codes are kept; they identify members unambiguously.
    """

    field_type = "USER_SELECT"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to a list of member codes."""
        if not isinstance(value, list):
            return cls.default()
        return [code for code in (member_code(v) for v in value) if code is not None]

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Join member codes with the delimiter."""
        return cls._join(value, delimiter)

    @classmethod
    def default(cls) -> Any:
        """No members."""
        return []


class OrganizationFieldHandler(UserFieldHandler):
    """Handler for department selection fields."""

    field_type = "ORGANIZATION_SELECT"


class GroupFieldHandler(UserFieldHandler):
    """Handler for group selection fields."""

    field_type = "GROUP_SELECT"


class AssigneeFieldHandler(UserFieldHandler):
    """Handler for the process management assignee field."""

    field_type = "STATUS_ASSIGNEE"
