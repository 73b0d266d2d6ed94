"""
Properties Reader - Forgiving parser for .properties files.

Reading happens in two layers:
  - LineReader scans the byte stream into logical lines (comments, blank
    lines and backslash continuations handled here)
  - split_pair divides one logical line into a decoded key and value

There is no "malformed file" error: bad escapes decode to substitutions and
every non-blank, non-comment line becomes a record. Only I/O errors from the
underlying stream propagate.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Iterator

from proptab.codec import unescape
from proptab.spec import (
    BACKSLASH,
    COMMENT_PREFIX_BYTES,
    CR,
    LF,
    MAX_FILE_SIZE,
    WHITESPACE_BYTES,
)
from proptab.table import PropertyTable

logger = logging.getLogger(__name__)


class LineReader:
    """Byte-at-a-time scanner with one byte of pushback."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._pending: int | None = None

    def read_byte(self) -> int | None:
        """Next byte, or None at end-of-stream."""
        if self._pending is not None:
            b, self._pending = self._pending, None
            return b
        chunk = self._stream.read(1)
        if not chunk:
            return None
        return chunk[0]

    def unread_byte(self, b: int) -> None:
        self._pending = b

    def _skip_whitespace(self) -> int | None:
        x = self.read_byte()
        while x is not None and x in WHITESPACE_BYTES:
            x = self.read_byte()
        return x

    def read_logical_line(self) -> tuple[bytes, bool]:
        """Read one logical line.

        Returns ``(line, at_eof)``. ``line`` is empty for a blank natural
        line. A comment line is returned whole (starting with ``#`` or
        ``!``) and never continues onto the next natural line.
        """
        buf = bytearray()
        while True:
            x = self._skip_whitespace()
            if x is None:
                return bytes(buf), True

            comment = not buf and x in COMMENT_PREFIX_BYTES
            escaped = False
            while x != LF and x != CR:
                escaped = x == BACKSLASH and not escaped
                buf.append(x)
                x = self.read_byte()
                if x is None:
                    return bytes(buf), True

            if x == CR:
                nxt = self.read_byte()
                if nxt is None:
                    return bytes(buf), True
                if nxt != LF:
                    self.unread_byte(nxt)

            if comment or not escaped:
                return bytes(buf), False
            # Odd run of backslashes: drop the last one and keep going
            del buf[-1]


def is_comment(line: bytes) -> bool:
    return bool(line) and line[0] in COMMENT_PREFIX_BYTES


def iter_logical_lines(stream: BinaryIO, include_comments: bool = False) -> Iterator[bytes]:
    """Yield the logical lines of ``stream`` until end-of-stream.

    Blank lines are dropped. Comment lines are dropped unless
    ``include_comments`` is set.
    """
    reader = LineReader(stream)
    while True:
        line, at_eof = reader.read_logical_line()
        if line and (include_comments or not is_comment(line)):
            yield line
        if at_eof:
            return


def split_pair(line: bytes) -> tuple[str, str]:
    """Split a record line into its decoded key and value."""
    key, offset = unescape(line, split=True)
    value, _ = unescape(line[offset:])
    return key, value


class PropertiesReader:
    """
    .properties reader.

    Usage:
        # Parse a file into a new table
        table = PropertiesReader.read("app.properties")

        # Merge a stream into an existing table
        with open("extra.properties", "rb") as f:
            count = PropertiesReader.load(f, table)
    """

    @staticmethod
    def load(stream: BinaryIO, table: PropertyTable) -> int:
        """Load every record of ``stream`` into ``table``. Returns the record count.

        A key seen twice keeps its last value. If the stream raises, the
        records read so far stay in the table.
        """
        count = 0
        for line in iter_logical_lines(stream):
            key, value = split_pair(line)
            table.set(key, value)
            count += 1
        logger.debug("loaded %d records", count)
        return count

    @classmethod
    def parse(cls, data: bytes | str, table: PropertyTable | None = None) -> PropertyTable:
        """Parse bytes (or text, encoded as UTF-8) into a table."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if table is None:
            table = PropertyTable()
        cls.load(io.BytesIO(data), table)
        return table

    @classmethod
    def read(
        cls,
        path: str | Path,
        table: PropertyTable | None = None,
        max_size: int = MAX_FILE_SIZE,
    ) -> PropertyTable:
        """Parse a .properties file into a table."""
        path = Path(path)
        file_size = path.stat().st_size
        if file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size} bytes. "
                f"Pass max_size= to override."
            )
        if table is None:
            table = PropertyTable()
        with open(path, "rb") as f:
            cls.load(f, table)
        logger.debug("read %s (%d bytes)", path, file_size)
        return table

    @classmethod
    def read_chain(
        cls,
        path: str | Path,
        defaults: list[str | Path] | None = None,
    ) -> PropertyTable:
        """Read ``path`` backed by a chain of defaults files, nearest first.

        ``read_chain("app.properties", ["site.properties", "base.properties"])``
        looks keys up in app, then site, then base.
        """
        parent = None
        for default_path in reversed(defaults or []):
            layer = cls.read(default_path)
            layer.defaults = parent
            parent = layer
        table = cls.read(path)
        table.defaults = parent
        return table
