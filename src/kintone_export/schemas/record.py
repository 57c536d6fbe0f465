"""Record schemas for kintone API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys of the synthetic metadata fields in a record response
ID_KEY = "$id"
REVISION_KEY = "$revision"


def _parse_int(raw: Any) -> int:
    """Read an id-like ``{"value": "12"}`` or bare value, defaulting to 0."""
    if isinstance(raw, dict):
        raw = raw.get("value")
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def parse_field_values(raw_fields: dict[str, Any]) -> dict[str, "FieldValue"]:
    """
    Deserialize every ``{"type": ..., "value": ...}`` entry of a record.

    Args:
        raw_fields: Field mapping from a record or subtable row response

    Returns:
        Field code to typed FieldValue, excluding $id and $revision
    """
    from kintone_export.fields import deserialize_field

    values: dict[str, FieldValue] = {}
    for code, raw in raw_fields.items():
        if code in (ID_KEY, REVISION_KEY) or not isinstance(raw, dict):
            continue
        field_type = raw.get("type", "")
        values[code] = FieldValue(
            type=field_type,
            value=deserialize_field(field_type, raw.get("value")),
        )
    return values


class FileInfo(BaseModel):
    """One file attached to a FILE field."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_key: str = Field(default="", alias="fileKey")
    name: str = ""
    content_type: str = Field(default="", alias="contentType")
    size: int = 0


class FieldValue(BaseModel):
    """A field value tagged with its kintone type."""

    type: str
    value: Any = None


class SubtableRow(BaseModel):
    """One row of a subtable."""

    id: int = 0
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "SubtableRow":
        """Build a row from ``{"id": "1", "value": {...}}``."""
        return cls(
            id=_parse_int(data.get("id")),
            fields=parse_field_values(data.get("value") or {}),
        )


class Record(BaseModel):
    """A kintone record with typed field values and its raw JSON."""

    id: int = 0
    revision: int = 0
    fields: dict[str, FieldValue] = Field(default_factory=dict)
    raw: dict[str, Any] = Field(
        default_factory=dict,
        description="Record exactly as returned by the API, used for JSON export",
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Record":
        """Build a record from one entry of a records API response."""
        return cls(
            id=_parse_int(data.get(ID_KEY)),
            revision=_parse_int(data.get(REVISION_KEY)),
            fields=parse_field_values(data),
            raw=data,
        )

    def subtable(self, code: str) -> list[SubtableRow]:
        """Get the rows of a subtable field, empty if absent."""
        field = self.fields.get(code)
        if field is None or not isinstance(field.value, list):
            return []
        return [row for row in field.value if isinstance(row, SubtableRow)]
