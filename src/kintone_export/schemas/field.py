"""Field metadata schemas and export columns."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """kintone field types."""

    # Synthetic record metadata
    ID = "__ID__"
    REVISION = "__REVISION__"

    # Text Types
    SINGLE_LINE_TEXT = "SINGLE_LINE_TEXT"
    MULTI_LINE_TEXT = "MULTI_LINE_TEXT"
    RICH_TEXT = "RICH_TEXT"
    NUMBER = "NUMBER"
    CALC = "CALC"
    LINK = "LINK"

    # Selection Types
    CHECK_BOX = "CHECK_BOX"
    RADIO_BUTTON = "RADIO_BUTTON"
    DROP_DOWN = "DROP_DOWN"
    MULTI_SELECT = "MULTI_SELECT"
    CATEGORY = "CATEGORY"

    # Date/Time Types
    DATE = "DATE"
    TIME = "TIME"
    DATETIME = "DATETIME"

    # Media Types
    FILE = "FILE"

    # Member Types
    USER_SELECT = "USER_SELECT"
    ORGANIZATION_SELECT = "ORGANIZATION_SELECT"
    GROUP_SELECT = "GROUP_SELECT"

    # Process Management Types
    STATUS = "STATUS"
    STATUS_ASSIGNEE = "STATUS_ASSIGNEE"

    # System Types
    RECORD_NUMBER = "RECORD_NUMBER"
    CREATOR = "CREATOR"
    MODIFIER = "MODIFIER"
    CREATED_TIME = "CREATED_TIME"
    UPDATED_TIME = "UPDATED_TIME"

    # Nested Types
    SUBTABLE = "SUBTABLE"


class FieldInfo(BaseModel):
    """Field metadata as returned by the app form fields API."""

    model_config = ConfigDict(extra="ignore")

    code: str = ""
    type: str
    label: str = ""
    fields: dict[str, "FieldInfo"] = Field(
        default_factory=dict,
        description="Sub-fields keyed by code; only set for SUBTABLE fields",
    )

    @property
    def is_subtable(self) -> bool:
        """Check if this field is a subtable."""
        return self.type == FieldType.SUBTABLE.value

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> dict[str, "FieldInfo"]:
        """Parse the ``properties`` object of a form fields response, keeping its order."""
        return {code: cls.model_validate(info) for code, info in properties.items()}


@dataclass(frozen=True)
class Column:
    """
    One exportable column.

    Sub-field columns live inside the subtable named by ``table`` and are
    never exported on their own.
    """

    code: str
    type: str
    is_sub_field: bool = False
    table: str = ""

    @property
    def is_subtable(self) -> bool:
        """Check if this column holds the subtable row id."""
        return self.type == FieldType.SUBTABLE.value


ID_COLUMN = Column(code="$id", type=FieldType.ID.value)
REVISION_COLUMN = Column(code="$revision", type=FieldType.REVISION.value)
