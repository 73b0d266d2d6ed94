"""
Properties Format Specification
===============================

Layout (one record per logical line):
    # comment                    <- '#' or '!' as first non-space byte
    ! comment
                                 <- blank (space, tab, form-feed only): ignored
    key=value                    <- key, optional spaces, '=' or ':' or space, value
    key : value
    key value
    long.key = first part, \\     <- odd trailing backslash joins the next line
               second part

Natural and Logical Lines:
    - A natural line ends at '\\n', '\\r', '\\r\\n' or end-of-stream
    - Leading space/tab/form-feed of every natural line is skipped
    - An odd run of trailing backslashes continues the logical line: the last
      backslash, the end-of-line and the next line's leading spaces vanish
    - An even run (2n backslashes) is data and decodes to n backslashes
    - Comments never span several natural lines

Escapes:
    - \\t \\n \\f \\r            control characters
    - \\uXXXX                   one UTF-16 code unit, 4 hex digits, any case
    - \\uD83D\\uDE00            two surrogate escapes form one scalar > U+FFFF
    - \\<any other>             that character (the backslash is dropped)
    - Malformed escapes never fail: they decode to U+FFFD

Encoding:
    - Input is always UTF-8
    - Output is UTF-8, or ASCII-safe: every scalar outside [0x20, 0x7e]
      written as \\uXXXX escape(s)
"""

# Character classes (as byte values and as characters)
WHITESPACE = frozenset(" \t\f")
DELIMITERS = frozenset("=:")
COMMENT_PREFIXES = frozenset("#!")
EOL_CHARS = frozenset("\r\n")

WHITESPACE_BYTES = frozenset(b" \t\f")
COMMENT_PREFIX_BYTES = frozenset(b"#!")

BACKSLASH = 0x5C
CR = 0x0D
LF = 0x0A

# Printable ASCII range left untouched by ASCII-safe output
PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E

# Two-byte escapes understood by the decoder
ESCAPES = {
    ord("t"): "\t",
    ord("n"): "\n",
    ord("f"): "\f",
    ord("r"): "\r",
}

# Unicode escape shape: backslash, 'u', four hex digits
UNICODE_ESCAPE_LEN = 6
SURROGATE_PAIR_LEN = 2 * UNICODE_ESCAPE_LEN
REPLACEMENT_CHAR = "\ufffd"

# Separator written between key and value
PAIR_SEPARATOR = "="

# Terminator written after every record and after the comment block
LINE_TERMINATOR = b"\n"

# Safety limits
MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB max file size for reader

# Environment variable that turns ASCII-safe output on for the CLI
ASCII_ENV_VAR = "PROPTAB_ASCII"

# File extension
EXTENSION = ".properties"


def is_space(ch: str) -> bool:
    return ch in WHITESPACE


def is_delimiter(ch: str) -> bool:
    return ch in DELIMITERS


def is_comment_prefix(ch: str) -> bool:
    return ch in COMMENT_PREFIXES


def is_separator(ch: str) -> bool:
    """Whitespace or delimiter: the characters that end an unescaped key."""
    return ch in WHITESPACE or ch in DELIMITERS


def is_printable_ascii(ch: str) -> bool:
    return PRINTABLE_MIN <= ord(ch) <= PRINTABLE_MAX
