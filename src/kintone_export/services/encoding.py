"""Character-set transcoding for export output."""

import codecs
from dataclasses import dataclass
from typing import BinaryIO

from kintone_export.core.exceptions import UnsupportedEncodingError


@dataclass(frozen=True)
class OutputEncoding:
    """Python codec and optional byte-order mark for an encoding name."""

    name: str
    codec: str
    bom: bytes = b""


# Names accepted on the command line
ENCODINGS: dict[str, OutputEncoding] = {
    "utf-8": OutputEncoding("utf-8", "utf-8"),
    "utf-16": OutputEncoding("utf-16", "utf-16-le"),
    "utf-16be-with-signature": OutputEncoding(
        "utf-16be-with-signature", "utf-16-be", codecs.BOM_UTF16_BE
    ),
    "utf-16le-with-signature": OutputEncoding(
        "utf-16le-with-signature", "utf-16-le", codecs.BOM_UTF16_LE
    ),
    "euc-jp": OutputEncoding("euc-jp", "euc_jp"),
    "sjis": OutputEncoding("sjis", "shift_jis"),
}

DEFAULT_ENCODING = "utf-8"


def resolve_encoding(name: str | None) -> OutputEncoding:
    """
    Look up an output encoding by name.

    Args:
        name: Encoding name, None for the default

    Returns:
        The matching OutputEncoding

    Raises:
        UnsupportedEncodingError: If the name is not supported
    """
    encoding = ENCODINGS.get(name or DEFAULT_ENCODING)
    if encoding is None:
        raise UnsupportedEncodingError(name or "")
    return encoding


class EncodingTranscoder:
    """
    Text writer that encodes into a binary sink.

    The byte-order mark, when the encoding has one, is written before the
    first chunk of text. Characters the target charset cannot represent are
    replaced instead of aborting the export.
    """

    def __init__(self, sink: BinaryIO, encoding: str | None = None) -> None:
        self.sink = sink
        self.encoding = resolve_encoding(encoding)
        self._encoder = codecs.getincrementalencoder(self.encoding.codec)(errors="replace")
        self._started = False

    def write(self, text: str) -> int:
        """Encode text and write it to the sink."""
        if not self._started:
            self._started = True
            if self.encoding.bom:
                self.sink.write(self.encoding.bom)
        data = self._encoder.encode(text)
        if data:
            self.sink.write(data)
        return len(text)

    def flush(self) -> None:
        """Flush pending encoder state and the sink."""
        tail = self._encoder.encode("", final=True)
        if tail:
            self.sink.write(tail)
        self.sink.flush()
