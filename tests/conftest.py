"""
Pytest configuration and fixtures for kintone-export tests.
"""

import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Optional

import pytest

from kintone_export.schemas.field import FieldInfo
from kintone_export.schemas.record import Record

PAGE_PATTERN = re.compile(r"limit (\d+) offset (\d+)$")
LIMIT_PATTERN = re.compile(r"limit\s+(\d+)")


class FakeKintoneClient:
    """
    In-memory stand-in for KintoneClient.

    Serves records from a list of raw API dicts, honoring the ``limit``
    and ``offset`` the query asks for, and records every call.
    """

    def __init__(
        self,
        properties: Optional[dict[str, Any]] = None,
        records: Optional[list[dict[str, Any]]] = None,
        files: Optional[dict[str, bytes]] = None,
    ) -> None:
        self.properties = properties or {}
        self.records = records or []
        self.files = files or {}
        self.queries: list[str] = []
        self.requested_fields: list[Optional[Sequence[str]]] = []
        self.downloads: list[str] = []
        self.fields_calls = 0

    def fields(self) -> dict[str, FieldInfo]:
        self.fields_calls += 1
        return FieldInfo.from_properties(self.properties)

    def get_records(self, fields: Optional[Sequence[str]], query: str) -> list[Record]:
        self.queries.append(query)
        self.requested_fields.append(fields)

        page = PAGE_PATTERN.search(query)
        if page:
            limit, offset = int(page.group(1)), int(page.group(2))
            selected = self.records[offset : offset + limit]
        else:
            limit_match = LIMIT_PATTERN.search(query)
            selected = self.records[: int(limit_match.group(1))] if limit_match else self.records
        return [Record.from_api(data) for data in selected]

    @contextmanager
    def download(self, file_key: str, chunk_size: Optional[int] = None) -> Iterator[Iterator[bytes]]:
        self.downloads.append(file_key)
        data = self.files[file_key]
        size = chunk_size or max(len(data), 1)
        yield iter([data[i : i + size] for i in range(0, len(data), size)])


def text(value: str) -> dict[str, Any]:
    """Raw SINGLE_LINE_TEXT field."""
    return {"type": "SINGLE_LINE_TEXT", "value": value}


def raw_record(record_id: int, revision: int = 1, **fields: Any) -> dict[str, Any]:
    """Raw record as returned by the records API."""
    data = {
        "$id": {"type": "__ID__", "value": str(record_id)},
        "$revision": {"type": "__REVISION__", "value": str(revision)},
    }
    data.update(fields)
    return data


def subtable(*rows: tuple[int, dict[str, Any]]) -> dict[str, Any]:
    """Raw SUBTABLE field from ``(row_id, fields)`` pairs."""
    return {
        "type": "SUBTABLE",
        "value": [{"id": str(row_id), "value": row_fields} for row_id, row_fields in rows],
    }


@pytest.fixture
def make_client():
    """Factory for FakeKintoneClient instances."""
    return FakeKintoneClient


@pytest.fixture
def make_record():
    """Factory for raw record dicts."""
    return raw_record


@pytest.fixture
def text_field():
    """Factory for raw SINGLE_LINE_TEXT fields."""
    return text


@pytest.fixture
def subtable_field():
    """Factory for raw SUBTABLE fields."""
    return subtable


@pytest.fixture
def plain_properties() -> dict[str, Any]:
    """Form fields of an app without subtables."""
    return {
        "Name": {"type": "SINGLE_LINE_TEXT", "code": "Name", "label": "Name"},
        "Tags": {"type": "CHECK_BOX", "code": "Tags", "label": "Tags"},
    }


@pytest.fixture
def table_properties() -> dict[str, Any]:
    """Form fields of an app with one subtable ``Items`` of ``a`` and ``b``."""
    return {
        "Name": {"type": "SINGLE_LINE_TEXT", "code": "Name", "label": "Name"},
        "Items": {
            "type": "SUBTABLE",
            "code": "Items",
            "fields": {
                "a": {"type": "SINGLE_LINE_TEXT", "code": "a", "label": "A"},
                "b": {"type": "NUMBER", "code": "b", "label": "B"},
            },
        },
        "Attachments": {"type": "FILE", "code": "Attachments", "label": "Attachments"},
    }
