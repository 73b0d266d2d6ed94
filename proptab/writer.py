"""
Properties Writer - Serializes a PropertyTable to .properties format.

Keys and values are escaped asymmetrically:
  - key:   every space, tab, form-feed, '=', ':', '#' and '!' is backslash-prefixed
  - value: only a leading space/tab/form-feed/'='/':' and every '#'/'!' are
           backslash-prefixed; inner spaces are written raw
  - both:  '\\', '\\n' and '\\r' are written as two-character escapes; in ASCII-safe
           mode everything outside [0x20, 0x7e] becomes '\\uXXXX'

Only the table's own pairs are written, never the defaults chain.
"""

from __future__ import annotations

import io
import logging
import re
from typing import TYPE_CHECKING, BinaryIO

from proptab.codec import encode_escape
from proptab.spec import (
    COMMENT_PREFIXES,
    DELIMITERS,
    LINE_TERMINATOR,
    PAIR_SEPARATOR,
    REPLACEMENT_CHAR,
    WHITESPACE,
    is_comment_prefix,
    is_separator,
)

if TYPE_CHECKING:
    from proptab.table import PropertyTable

logger = logging.getLogger(__name__)

_KEY_PREFIXED = WHITESPACE | DELIMITERS | COMMENT_PREFIXES
_LEADING_VALUE_PREFIXED = WHITESPACE | DELIMITERS
_VALUE_PREFIXED = COMMENT_PREFIXES

_EOL = re.compile(r"\r\n|\r|\n")


def _utf8(ch: str) -> bytes:
    if 0xD800 <= ord(ch) <= 0xDFFF:
        # A lone surrogate has no UTF-8 form
        ch = REPLACEMENT_CHAR
    return ch.encode("utf-8")


def _encode_scalar(ch: str, ascii: bool, prefixed: frozenset[str]) -> bytes:
    if ascii:
        escaped = encode_escape(ch)
        if escaped:
            return escaped
    if ch == "\\":
        return b"\\\\"
    if ch == "\n":
        return b"\\n"
    if ch == "\r":
        return b"\\r"
    if ch in prefixed:
        return b"\\" + _utf8(ch)
    return _utf8(ch)


def encode_pair(key: str, value: str, ascii: bool = False) -> bytes:
    """Encode one record as ``key=value`` bytes, without a line terminator."""
    out = bytearray()
    for ch in key:
        out += _encode_scalar(ch, ascii, _KEY_PREFIXED)
    out += PAIR_SEPARATOR.encode("ascii")
    for i, ch in enumerate(value):
        if i == 0 and is_separator(ch):
            out += _encode_scalar(ch, ascii, _LEADING_VALUE_PREFIXED)
        else:
            out += _encode_scalar(ch, ascii, _VALUE_PREFIXED)
    return bytes(out)


def encode_comment(text: str, ascii: bool = False) -> bytes:
    """Encode a comment block, one ``#`` line per line of ``text``.

    Any end-of-line sequence becomes a single ``\\n``. Lines already starting
    with ``#`` or ``!`` are kept as they are. No trailing terminator.
    """
    lines = []
    for line in _EOL.split(text):
        out = bytearray()
        if not line or not is_comment_prefix(line[0]):
            out += b"#"
        for ch in line:
            escaped = encode_escape(ch) if ascii else b""
            out += escaped or _utf8(ch)
        lines.append(bytes(out))
    return LINE_TERMINATOR.join(lines)


class PropertiesWriter:

    @staticmethod
    def store(table: PropertyTable, stream: BinaryIO, ascii: bool = False) -> int:
        """Write the table's own pairs to ``stream``. Returns the count written.

        A failing write propagates at once; pairs already written stay written.
        """
        count = 0
        for key, value in table.local_items():
            stream.write(encode_pair(key, value, ascii))
            stream.write(LINE_TERMINATOR)
            count += 1
        logger.debug("stored %d records", count)
        return count

    @staticmethod
    def save(
        table: PropertyTable,
        stream: BinaryIO,
        comments: str | None = None,
        ascii: bool = False,
    ) -> int:
        """Write an optional comment block, then the table's pairs."""
        if comments is not None:
            stream.write(encode_comment(comments, ascii))
            stream.write(LINE_TERMINATOR)
        return PropertiesWriter.store(table, stream, ascii)

    @staticmethod
    def serialize(table: PropertyTable, comments: str | None = None, ascii: bool = False) -> bytes:
        """Serialize a table to bytes. Pure - does not mutate the table."""
        buf = io.BytesIO()
        PropertiesWriter.save(table, buf, comments, ascii)
        return buf.getvalue()

    @staticmethod
    def write(
        table: PropertyTable,
        path: str,
        comments: str | None = None,
        ascii: bool = False,
        mode: int = 0o644,
    ) -> int:
        """Write a table to a file atomically. Returns bytes written.

        Uses write-to-temp-then-rename so the target is never left half
        written.
        """
        import os
        import tempfile
        data = PropertiesWriter.serialize(table, comments, ascii)
        dir_name = os.path.dirname(os.path.abspath(path)) or "."
        fd, tmp_path = tempfile.mkstemp(dir=dir_name, suffix=".properties.tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug("wrote %s (%d bytes)", path, len(data))
        return len(data)
