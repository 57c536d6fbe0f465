"""Download FILE field attachments next to the export."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from kintone_export.core.exceptions import AttachmentError, KintoneExportError
from kintone_export.services.row_flattener import AttachmentTarget

if TYPE_CHECKING:
    from kintone_export.services.kintone_client import KintoneClient

logger = logging.getLogger(__name__)

# Bytes copied per read
CHUNK_SIZE = 256 * 1024


class AttachmentDownloader:
    """
    Save attachments under ``<base_dir>/<target directory>/<file name>``.

    After a file is written, its in-memory name is replaced by the relative
    path ``<target directory>/<file name>`` so the export shows where it went.
    Does nothing when no base directory is configured.
    """

    def __init__(
        self,
        client: "KintoneClient",
        base_dir: str | Path | None,
        chunk_size: int = CHUNK_SIZE,
    ) -> None:
        """Initialize downloader.

        Args:
            client: kintone API client
            base_dir: Directory receiving attachments, None to disable
            chunk_size: Bytes copied per read
        """
        self.client = client
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self.chunk_size = chunk_size

    def download_all(self, targets: Iterable[AttachmentTarget]) -> None:
        """Download every planned target in order."""
        for target in targets:
            self.download(target)

    def download(self, target: AttachmentTarget) -> None:
        """
        Download the files of one FILE cell.

        Raises:
            AttachmentError: If the directory, the download or a write fails
        """
        if self.base_dir is None or not target.files:
            return

        directory = self.base_dir / target.directory
        try:
            directory.mkdir(mode=0o777, parents=True, exist_ok=True)
        except OSError as e:
            raise AttachmentError(
                f"Failed to create attachment directory: {e}", path=str(directory)
            ) from e

        for file in target.files:
            path = directory / file.name
            self._copy(file.file_key, path)
            file.name = f"{target.directory}{os.sep}{file.name}"
            logger.debug(f"Saved attachment {file.file_key} to {path}")

    def _copy(self, file_key: str, path: Path) -> None:
        """Stream one file to disk in fixed-size chunks."""
        try:
            with self.client.download(file_key, chunk_size=self.chunk_size) as chunks:
                with open(path, "wb") as fo:
                    for chunk in chunks:
                        if not chunk:
                            break
                        fo.write(chunk)
        except OSError as e:
            raise AttachmentError(
                f"Failed to write attachment: {e}", path=str(path), file_key=file_key
            ) from e
        except KintoneExportError as e:
            raise AttachmentError(
                f"Failed to download attachment: {e.message}", path=str(path), file_key=file_key
            ) from e
