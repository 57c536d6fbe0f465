"""Flatten records with subtables into physical export rows.

A record expands to as many rows as its longest exported subtable. Record
metadata and plain fields are repeated on every row; subtable cells past
the end of their table are left blank.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from kintone_export.fields import format_field
from kintone_export.schemas.field import ID_COLUMN, REVISION_COLUMN, Column, FieldType
from kintone_export.schemas.record import FileInfo, Record

# Multi-valued cells hold one value per line
CSV_VALUE_DELIMITER = "\n"


@dataclass(frozen=True)
class ExportRow:
    """
    One physical output row.

    ``cells`` is aligned to the columns; None marks a blank cell, as opposed
    to a present but empty value. ``is_first`` is set on the first row of a
    record and drives the subtable marker column.
    """

    cells: tuple[str | None, ...]
    is_first: bool = True


@dataclass
class AttachmentTarget:
    """Files of one FILE cell and the directory they are saved under."""

    directory: str
    files: list[FileInfo] = field(default_factory=list)


def record_row_id(record: Record, counter: int) -> int:
    """Identify a record in attachment paths: its id, or the emission counter."""
    return record.id or counter


def subtable_row_count(record: Record, columns: Sequence[Column]) -> int:
    """
    Count the physical rows a record expands to.

    Returns:
        max(1, longest subtable referenced by a sub-field column)
    """
    count = 1
    for column in columns:
        if column.is_sub_field:
            count = max(count, len(record.subtable(column.table)))
    return count


def attachment_targets(
    record: Record,
    columns: Sequence[Column],
    row_id: int,
) -> list[AttachmentTarget]:
    """
    Plan the attachment downloads for a record.

    Plain FILE fields are saved under ``<code>-<row_id>``; FILE sub-fields
    under ``<code>-<row_id>-<row index>``. Targets come out in the order the
    cells are written. A FILE value referenced by more than one column is
    planned once, since downloading renames its files.
    """
    targets: list[AttachmentTarget] = []
    planned: set[int] = set()
    for j in range(subtable_row_count(record, columns)):
        for column in columns:
            if column.type != FieldType.FILE.value:
                continue
            if column.is_sub_field:
                table = record.subtable(column.table)
                if j >= len(table):
                    continue
                value = table[j].fields.get(column.code)
                directory = f"{column.code}-{row_id}-{j}"
            elif j == 0:
                value = record.fields.get(column.code)
                directory = f"{column.code}-{row_id}"
            else:
                continue
            if value is None or value.type != FieldType.FILE.value or not value.value:
                continue
            if id(value) not in planned:
                planned.add(id(value))
                targets.append(AttachmentTarget(directory=directory, files=value.value))
    return targets


def _cell(record: Record, column: Column, j: int, delimiter: str) -> str | None:
    """Render one cell of physical row ``j``."""
    if column.code == ID_COLUMN.code:
        return str(record.id)
    if column.code == REVISION_COLUMN.code:
        return str(record.revision)

    if column.is_sub_field:
        table = record.subtable(column.table)
        if j >= len(table):
            return None
        value = table[j].fields.get(column.code)
        if value is None:
            return ""
        return format_field(value.type, value.value, delimiter)

    if column.is_subtable:
        table = record.subtable(column.code)
        if j >= len(table):
            return None
        return str(table[j].id)

    # Plain fields repeat on every physical row of the record
    value = record.fields.get(column.code)
    if value is None:
        return None
    return format_field(value.type, value.value, delimiter)


def flatten_record(
    record: Record,
    columns: Sequence[Column],
    delimiter: str = CSV_VALUE_DELIMITER,
) -> list[ExportRow]:
    """
    Flatten a record into physical rows.

    Args:
        record: Record to flatten
        columns: Resolved export columns
        delimiter: Separator for multi-valued fields

    Returns:
        One ExportRow per physical row
    """
    return [
        ExportRow(
            cells=tuple(_cell(record, column, j, delimiter) for column in columns),
            is_first=j == 0,
        )
        for j in range(subtable_row_count(record, columns))
    ]
