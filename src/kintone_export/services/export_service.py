"""Export service streaming kintone records as CSV or JSON."""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, BinaryIO, Optional

from kintone_export.core.config import ExportConfig
from kintone_export.core.exceptions import UnsupportedFormatError
from kintone_export.schemas.field import Column, FieldInfo
from kintone_export.services.attachment_downloader import AttachmentDownloader
from kintone_export.services.encoding import EncodingTranscoder
from kintone_export.services.record_fetcher import RecordFetcher
from kintone_export.services.row_flattener import (
    ExportRow,
    attachment_targets,
    flatten_record,
    record_row_id,
)
from kintone_export.services.schema_resolver import has_subtable, resolve_all, resolve_partial

if TYPE_CHECKING:
    from kintone_export.services.kintone_client import KintoneClient

logger = logging.getLogger(__name__)

CSV_LINE_END = "\r\n"
SUBTABLE_MARKER = "*"


def csv_quote(value: str) -> str:
    """Wrap a cell in double quotes, doubling embedded quotes."""
    return '"' + value.replace('"', '""') + '"'


def format_csv_header(columns: Sequence[Column]) -> str:
    """Header line, with the marker column when subtables are exported."""
    cells = [csv_quote(column.code) for column in columns]
    if has_subtable(columns):
        cells.insert(0, SUBTABLE_MARKER)
    return ",".join(cells) + CSV_LINE_END


def format_csv_row(row: ExportRow, with_marker: bool) -> str:
    """
    Format one physical row.

    Present values are always quoted; blank cells are left empty.
    """
    cells = ["" if cell is None else csv_quote(cell) for cell in row.cells]
    if with_marker:
        cells.insert(0, SUBTABLE_MARKER if row.is_first else "")
    return ",".join(cells) + CSV_LINE_END


class ExportService:
    """Service exporting one kintone app to a byte sink."""

    def __init__(
        self,
        client: "KintoneClient",
        config: ExportConfig,
        downloader: Optional[AttachmentDownloader] = None,
    ) -> None:
        """Initialize service.

        Args:
            client: kintone API client
            config: Run configuration
            downloader: Attachment downloader; built from the config when omitted
        """
        self.client = client
        self.config = config
        if downloader is None:
            downloader = AttachmentDownloader(client, config.attachment_dir)
        self.downloader = downloader

    def _fetcher(self) -> RecordFetcher:
        return RecordFetcher(self.client, query=self.config.query, fields=self.config.fields)

    def export(self, sink: BinaryIO) -> int:
        """
        Export all matching records.

        Args:
            sink: Binary stream receiving the encoded export

        Returns:
            Number of records exported

        Raises:
            UnsupportedFormatError: If the output format is unknown
            KintoneExportError: If fetching, downloading or writing fails
        """
        writer = EncodingTranscoder(sink, self.config.encoding)
        output_format = self.config.output_format
        if output_format == "csv":
            count = self.write_csv(writer)
        elif output_format == "json":
            count = self.write_json(writer)
        else:
            raise UnsupportedFormatError(output_format)
        writer.flush()

        logger.info(f"Exported {count} records from app {self.config.app_id} as {output_format}")
        return count

    def resolve_columns(self, field_metadata: Mapping[str, FieldInfo]) -> list[Column]:
        """Build the export columns from field metadata."""
        if self.config.fields is None:
            return resolve_all(field_metadata)
        return resolve_partial(field_metadata, self.config.fields)

    def write_csv(self, writer: EncodingTranscoder) -> int:
        """
        Write records as CSV.

        The header is written with the first record, so an empty result
        produces no output at all. Attachments of each record are downloaded
        before its rows are written, so FILE cells show the saved paths.
        """
        # Metadata is fetched before any record
        field_metadata = self.client.fields()
        columns: list[Column] = []
        with_marker = False
        count = 0
        rows_written = 0

        for records in self._fetcher().iter_pages():
            for record in records:
                if count == 0:
                    columns = self.resolve_columns(field_metadata)
                    with_marker = has_subtable(columns)
                    writer.write(format_csv_header(columns))

                row_id = record_row_id(record, count)
                if self.config.downloads_attachments:
                    self.downloader.download_all(attachment_targets(record, columns, row_id))

                for row in flatten_record(record, columns):
                    writer.write(format_csv_row(row, with_marker))
                    rows_written += 1
                count += 1

        logger.info(f"Wrote {rows_written} CSV rows for {count} records")
        return count

    def write_json(self, writer: EncodingTranscoder) -> int:
        """
        Write records as a JSON object with a ``records`` array.

        Records are written as returned by kintone, without flattening.
        """
        count = 0
        writer.write('{"records": [\n')
        for records in self._fetcher().iter_pages():
            for record in records:
                if count > 0:
                    writer.write(",\n")
                writer.write(json.dumps(record.raw, ensure_ascii=False))
                count += 1
        writer.write("\n]}")
        return count
