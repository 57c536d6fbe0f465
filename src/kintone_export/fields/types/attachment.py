"""Attachment (FILE) field type handler."""

from typing import Any

from pydantic import ValidationError

from kintone_export.fields.base import DEFAULT_DELIMITER, BaseFieldTypeHandler
from kintone_export.schemas.record import FileInfo


class AttachmentFieldHandler(BaseFieldTypeHandler):
    """
    Handler for file attachment fields.

    Value structure (list of attachment objects):
    [
        {
            "contentType": "text/plain",
            "fileKey": "201202061155587E339F9067544F1A92C743460E3D12B3297",
            "name": "17to20_VerupLog (1).txt",
            "size": "23175"
        }
    ]

    The display form is the list of file names. After an attachment has been
    downloaded its name is rewritten to the relative path it was saved under.
    """

    field_type = "FILE"

    @classmethod
    def deserialize(cls, value: Any) -> Any:
        """Convert API value to a list of FileInfo."""
        if not isinstance(value, list):
            return cls.default()
        files = []
        for item in value:
            if isinstance(item, FileInfo):
                files.append(item)
                continue
            try:
                files.append(FileInfo.model_validate(item))
            except ValidationError:
                continue
        return files

    @classmethod
    def format_display(cls, value: Any, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Join file names with the delimiter."""
        if not isinstance(value, list):
            return ""
        return delimiter.join(f.name for f in value if isinstance(f, FileInfo))

    @classmethod
    def default(cls) -> Any:
        """No attachments."""
        return []
