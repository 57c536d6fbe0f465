"""Schemas for kintone field metadata and records."""

from kintone_export.schemas.field import (
    ID_COLUMN,
    REVISION_COLUMN,
    Column,
    FieldInfo,
    FieldType,
)
from kintone_export.schemas.record import FieldValue, FileInfo, Record, SubtableRow

__all__ = [
    "ID_COLUMN",
    "REVISION_COLUMN",
    "Column",
    "FieldInfo",
    "FieldType",
    "FieldValue",
    "FileInfo",
    "Record",
    "SubtableRow",
]
