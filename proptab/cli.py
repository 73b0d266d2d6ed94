"""
proptab CLI - Command-line interface for .properties files.

Commands:
  proptab get     - Print the value of a key (defaults files consulted)
  proptab set     - Set a key in a .properties file
  proptab delete  - Remove a key from a .properties file
  proptab keys    - List every key, including keys from defaults files
  proptab dump    - Re-encode a .properties file (optionally ASCII-safe)
  proptab convert - Convert to/from JSON or CSV
  proptab view    - Browse a .properties file in a TUI
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from proptab.spec import ASCII_ENV_VAR


def _ascii_default() -> bool:
    return os.environ.get(ASCII_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load_chain(path: str, defaults: list[str] | None):
    """Read ``path`` backed by the ``--defaults`` files, nearest first."""
    from proptab.reader import PropertiesReader

    return PropertiesReader.read_chain(path, defaults)


def _read_or_empty(path: str):
    from proptab.table import PropertyTable

    if Path(path).exists():
        return PropertyTable.read(path)
    return PropertyTable()


def cmd_get(args: argparse.Namespace) -> None:
    """Print the value of a key."""
    table = _load_chain(args.path, args.defaults)
    value, found = table.lookup(args.key)
    if not found:
        print(f"Key '{args.key}' not found.", file=sys.stderr)
        sys.exit(1)
    print(value)


def cmd_set(args: argparse.Namespace) -> None:
    """Set a key and rewrite the file."""
    table = _read_or_empty(args.path)
    table.set(args.key, args.value)
    nbytes = table.write(args.path, ascii=args.ascii)
    print(f"Updated {args.path} ({nbytes} bytes)")


def cmd_delete(args: argparse.Namespace) -> None:
    """Remove a key and rewrite the file."""
    from proptab.table import PropertyTable

    table = PropertyTable.read(args.path)
    if args.key not in table:
        print(f"Key '{args.key}' not found.", file=sys.stderr)
        sys.exit(1)
    table.delete(args.key)
    nbytes = table.write(args.path, ascii=args.ascii)
    print(f"Updated {args.path} ({nbytes} bytes)")


def cmd_keys(args: argparse.Namespace) -> None:
    """List every distinct key."""
    table = _load_chain(args.path, args.defaults)
    for key in sorted(table.keys()):
        print(key)


def cmd_dump(args: argparse.Namespace) -> None:
    """Re-encode a .properties file to stdout or -o."""
    from proptab.table import PropertyTable

    table = PropertyTable.read(args.path)
    if args.output:
        nbytes = table.write(args.output, comments=args.comment, ascii=args.ascii)
        print(f"Wrote {args.output} ({nbytes} bytes)")
        return
    sys.stdout.flush()
    sys.stdout.buffer.write(table.to_bytes(comments=args.comment, ascii=args.ascii))
    sys.stdout.buffer.flush()


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert to/from JSON or CSV."""
    from proptab.converters import convert_from, convert_to
    from proptab.spec import MAX_FILE_SIZE
    from proptab.table import PropertyTable

    if args.direction == "to":
        table = PropertyTable.read(args.input)
        result = convert_to(table, args.format)
        if args.output:
            Path(args.output).write_text(result, encoding="utf-8")
            print(f"Converted {args.input} -> {args.output}")
        else:
            print(result, end="" if result.endswith("\n") else "\n")
        return

    input_path = Path(args.input)
    if not input_path.is_file():
        _fail(f"File not found: {args.input}")
    file_size = input_path.stat().st_size
    if file_size > MAX_FILE_SIZE:
        _fail(f"File size {file_size} exceeds maximum {MAX_FILE_SIZE} bytes")
    table = convert_from(input_path.read_text(encoding="utf-8"), args.format)
    output = args.output or input_path.stem + ".properties"
    nbytes = table.write(output, ascii=args.ascii)
    print(f"Converted {args.input} -> {output} ({nbytes} bytes)")


def cmd_view(args: argparse.Namespace) -> None:
    """Browse a .properties file in the TUI viewer."""
    try:
        from proptab.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"proptab[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(args.path, args.defaults)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proptab",
        description="proptab - read, edit and convert .properties files.",
    )
    from proptab import __version__
    parser.add_argument("--version", action="version", version=f"proptab {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details to stderr")
    sub = parser.add_subparsers(dest="command")
    ascii_default = _ascii_default()

    def add_ascii(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--ascii", action="store_true", default=ascii_default,
            help=f"Write non-ASCII characters as \\uXXXX escapes (or set {ASCII_ENV_VAR}=1)",
        )

    def add_defaults(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-d", "--defaults", action="append", metavar="FILE",
            help="Defaults file consulted for missing keys (repeatable, nearest first)",
        )

    # get
    p_get = sub.add_parser("get", help="Print the value of a key")
    p_get.add_argument("path", help="Path to .properties file")
    p_get.add_argument("key", help="Key to look up")
    add_defaults(p_get)

    # set
    p_set = sub.add_parser("set", help="Set a key in a .properties file")
    p_set.add_argument("path", help="Path to .properties file (created if missing)")
    p_set.add_argument("key", help="Key to set")
    p_set.add_argument("value", help="New value")
    add_ascii(p_set)

    # delete
    p_delete = sub.add_parser("delete", help="Remove a key from a .properties file")
    p_delete.add_argument("path", help="Path to .properties file")
    p_delete.add_argument("key", help="Key to remove")
    add_ascii(p_delete)

    # keys
    p_keys = sub.add_parser("keys", help="List every key")
    p_keys.add_argument("path", help="Path to .properties file")
    add_defaults(p_keys)

    # dump
    p_dump = sub.add_parser("dump", help="Re-encode a .properties file")
    p_dump.add_argument("path", help="Path to .properties file")
    p_dump.add_argument("-c", "--comment", help="Comment block written before the records")
    p_dump.add_argument("-o", "--output", help="Output file path (default: stdout)")
    add_ascii(p_dump)

    # convert
    p_convert = sub.add_parser("convert", help="Convert to/from JSON or CSV")
    p_convert.add_argument("direction", choices=["to", "from"], help="Conversion direction")
    p_convert.add_argument("format", choices=["json", "csv"], help="Other format")
    p_convert.add_argument("input", help="Input file path")
    p_convert.add_argument("-o", "--output", help="Output file path")
    add_ascii(p_convert)

    # view
    p_view = sub.add_parser("view", help="Browse a .properties file (TUI)")
    p_view.add_argument("path", help="Path to .properties file")
    add_defaults(p_view)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.command:
        print("proptab - .properties files from the command line\n")
        print("Usage:")
        print("  proptab get app.properties server.port")
        print("  proptab get app.properties server.port -d defaults.properties")
        print("  proptab set app.properties server.port 9090")
        print("  proptab delete app.properties server.port")
        print("  proptab keys app.properties -d defaults.properties")
        print("  proptab dump app.properties --ascii -c \"Generated\"")
        print("  proptab convert to json app.properties -o app.json")
        print("  proptab convert from json app.json -o app.properties")
        print("  proptab view app.properties")
        print()
        print("Run 'proptab <command> --help' for details on any command.")
        sys.exit(0)

    commands = {
        "get": cmd_get,
        "set": cmd_set,
        "delete": cmd_delete,
        "keys": cmd_keys,
        "dump": cmd_dump,
        "convert": cmd_convert,
        "view": cmd_view,
    }

    try:
        commands[args.command](args)
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename}")
    except (OSError, ValueError) as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
