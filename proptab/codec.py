"""
Escape codec - decode and encode the backslash escapes of the properties format.

Decoding works on raw UTF-8 bytes and never raises: every malformed sequence
degrades to a substitution (U+FFFD, a dropped backslash, or a lone surrogate
consumed on its own). Results are small ``(scalar, consumed)`` tuples so the
scanners can thread byte offsets through plain loops.
"""

from __future__ import annotations

from proptab.spec import (
    BACKSLASH,
    ESCAPES,
    PRINTABLE_MAX,
    PRINTABLE_MIN,
    REPLACEMENT_CHAR,
    SURROGATE_PAIR_LEN,
    UNICODE_ESCAPE_LEN,
    is_separator,
)

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_U = ord("u")

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


def decode_rune(data: bytes, pos: int = 0) -> tuple[str, int]:
    """Decode one raw UTF-8 scalar starting at ``data[pos]``.

    Invalid or truncated sequences yield ``(U+FFFD, 1)`` so scanning resumes
    on the next byte. At the end of the data returns ``(U+FFFD, 0)``.
    """
    if pos >= len(data):
        return REPLACEMENT_CHAR, 0
    lead = data[pos]
    if lead < 0x80:
        return chr(lead), 1
    if 0xC2 <= lead <= 0xDF:
        size = 2
    elif 0xE0 <= lead <= 0xEF:
        size = 3
    elif 0xF0 <= lead <= 0xF4:
        size = 4
    else:
        return REPLACEMENT_CHAR, 1
    try:
        return data[pos:pos + size].decode("utf-8"), size
    except UnicodeDecodeError:
        return REPLACEMENT_CHAR, 1


def _parse_hex4(data: bytes, start: int) -> int | None:
    """Value of exactly four hex digits at ``data[start:]``, else None."""
    chunk = data[start:start + 4]
    if len(chunk) != 4 or not all(b in _HEX_DIGITS for b in chunk):
        return None
    return int(chunk, 16)


def decode_escape(data: bytes, pos: int = 0) -> tuple[str | None, int]:
    """Decode the escape sequence starting at ``data[pos]``.

    Returns ``(scalar, consumed)``, or ``(None, 0)`` when ``data[pos]`` is not
    a backslash. Recognized forms:

      - ``\\t \\n \\f \\r``: the control character, 2 bytes
      - ``\\uXXXX``: one code unit, 6 bytes; fewer than four hex digits gives
        U+FFFD for the same 6 bytes (clipped to the end of the data)
      - ``\\uD83D\\uDE00``: a high then low surrogate, combined, 12 bytes;
        a surrogate half without its partner gives U+FFFD for 6 bytes
      - ``\\`` + any other scalar: that scalar
      - a lone trailing ``\\``: U+FFFD, 1 byte
    """
    n = len(data)
    if pos >= n or data[pos] != BACKSLASH:
        return None, 0
    if pos + 1 >= n:
        return REPLACEMENT_CHAR, 1

    marker = data[pos + 1]
    if marker in ESCAPES:
        return ESCAPES[marker], 2
    if marker != _U:
        ch, size = decode_rune(data, pos + 1)
        return ch, size + 1

    consumed = min(UNICODE_ESCAPE_LEN, n - pos)
    unit = _parse_hex4(data, pos + 2)
    if unit is None:
        return REPLACEMENT_CHAR, consumed

    if unit in _HIGH_SURROGATES or unit in _LOW_SURROGATES:
        second = pos + UNICODE_ESCAPE_LEN
        if (unit in _HIGH_SURROGATES
                and data[second:second + 1] == b"\\"
                and data[second + 1:second + 2] == b"u"):
            low = _parse_hex4(data, second + 2)
            if low is not None and low in _LOW_SURROGATES:
                scalar = 0x10000 + ((unit - 0xD800) << 10) + (low - 0xDC00)
                return chr(scalar), SURROGATE_PAIR_LEN
        return REPLACEMENT_CHAR, UNICODE_ESCAPE_LEN

    return chr(unit), UNICODE_ESCAPE_LEN


def _unicode_escape(unit: int) -> bytes:
    return b"\\u%04x" % unit


def encode_escape(ch: str) -> bytes:
    """ASCII-safe escape for one scalar.

    Printable ASCII is left to the caller (returns ``b""``). Scalars above
    U+FFFF become two ``\\uXXXX`` escapes, high surrogate first.
    """
    cp = ord(ch)
    if PRINTABLE_MIN <= cp <= PRINTABLE_MAX:
        return b""
    if cp > 0xFFFF:
        cp -= 0x10000
        return _unicode_escape(0xD800 + (cp >> 10)) + _unicode_escape(0xDC00 + (cp & 0x3FF))
    return _unicode_escape(cp)


def unescape(data: bytes, split: bool = False) -> tuple[str, int]:
    """Decode escapes and raw UTF-8 scalars in ``data``.

    With ``split=True`` decoding stops at the first unescaped whitespace or
    delimiter; that character and every whitespace/delimiter after it are
    consumed. Returns the decoded key and the offset where the value starts.

    With ``split=False`` the whole range is decoded and the offset returned
    is ``len(data)``.
    """
    out: list[str] = []
    pos = 0
    n = len(data)
    while pos < n:
        ch, size = decode_escape(data, pos)
        if size == 0:
            ch, size = decode_rune(data, pos)
            if split and is_separator(ch):
                pos += size
                while pos < n:
                    ch, size = decode_rune(data, pos)
                    if not is_separator(ch):
                        break
                    pos += size
                return "".join(out), pos
        out.append(ch)
        pos += size
    return "".join(out), pos
