"""Resolve the ordered export columns from app field metadata."""

import logging
from collections.abc import Iterable, Mapping

from kintone_export.schemas.field import (
    ID_COLUMN,
    REVISION_COLUMN,
    Column,
    FieldInfo,
    FieldType,
)

logger = logging.getLogger(__name__)

Columns = list[Column]


def _subtable_columns(table: FieldInfo) -> Columns:
    """Subtable id column followed by one column per sub-field."""
    columns = [Column(code=table.code, type=table.type)]
    for sub_field in table.fields.values():
        columns.append(
            Column(code=sub_field.code, type=sub_field.type, is_sub_field=True, table=table.code)
        )
    return columns


def resolve_all(field_metadata: Mapping[str, FieldInfo]) -> Columns:
    """
    Build columns for every field of the app.

    Emits ``$id`` and ``$revision`` first, then every field in metadata
    order. A subtable contributes its id column immediately followed by its
    sub-fields. Fields with an empty code are skipped.

    Args:
        field_metadata: Field code to FieldInfo, in form order

    Returns:
        Ordered columns
    """
    columns: Columns = [ID_COLUMN, REVISION_COLUMN]
    for info in field_metadata.values():
        if not info.code:
            continue
        if info.is_subtable:
            columns.extend(_subtable_columns(info))
        else:
            columns.append(Column(code=info.code, type=info.type))
    return columns


def find_column(code: str, field_metadata: Mapping[str, FieldInfo]) -> Column | None:
    """
    Resolve one field code against the metadata.

    Fields are searched in form order, each subtable's sub-fields right
    after the subtable itself; the first field with the code wins.

    Returns:
        The matching column, or None when the code is unknown
    """
    if code == ID_COLUMN.code:
        return ID_COLUMN
    if code == REVISION_COLUMN.code:
        return REVISION_COLUMN

    for info in field_metadata.values():
        if info.code == code:
            return Column(code=code, type=info.type)
        if info.is_subtable:
            for sub_field in info.fields.values():
                if sub_field.code == code:
                    return Column(code=code, type=sub_field.type, is_sub_field=True, table=info.code)
    return None


def resolve_partial(
    field_metadata: Mapping[str, FieldInfo],
    requested_codes: Iterable[str],
) -> Columns:
    """
    Build columns for a requested subset of fields, in request order.

    Unknown codes and bare sub-field codes are dropped. Requesting a
    subtable yields its id column plus all of its sub-fields.

    Args:
        field_metadata: Field code to FieldInfo, in form order
        requested_codes: Field codes as given by the caller

    Returns:
        Ordered columns
    """
    columns: Columns = []
    for code in requested_codes:
        column = find_column(code, field_metadata)
        if column is None:
            logger.debug(f"Dropping unknown field code {code!r}")
            continue
        if column.is_sub_field:
            logger.debug(f"Dropping sub-field {code!r}; request its subtable instead")
            continue
        if column.type == FieldType.SUBTABLE.value:
            table = next(info for info in field_metadata.values() if info.code == code)
            columns.extend(_subtable_columns(table))
        else:
            columns.append(column)
    return columns


def has_subtable(columns: Iterable[Column]) -> bool:
    """Check if any column is a sub-field."""
    return any(column.is_sub_field for column in columns)
