"""
Property Table - In-memory key/value map with a chained defaults table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator


@dataclass(eq=False)
class PropertyTable:
    """
    A map of string keys to string values, plus an optional defaults table
    consulted when a key is missing.

    The defaults table is shared, not owned: several tables may point at the
    same one. The chain must not loop back on itself.

    Usage:
        defaults = PropertyTable({"host": "localhost", "port": "8080"})
        table = PropertyTable.with_defaults(defaults)
        table.loads("port = 9090")
        table.get("host")   # "localhost" (from defaults)
        table.get("port")   # "9090"
        table.save_string("Server settings")
    """

    data: dict[str, str] = field(default_factory=dict)
    defaults: PropertyTable | None = None

    @classmethod
    def with_defaults(cls, defaults: PropertyTable) -> PropertyTable:
        """Create an empty table backed by ``defaults``."""
        return cls(defaults=defaults)

    def chain(self) -> Iterator[PropertyTable]:
        """This table, then each table of the defaults chain, once each."""
        seen: set[int] = set()
        table: PropertyTable | None = self
        while table is not None and id(table) not in seen:
            seen.add(id(table))
            yield table
            table = table.defaults

    # -- lookup ---------------------------------------------------------------

    def lookup(self, key: str) -> tuple[str, bool]:
        """Search this table, then the defaults chain.

        Returns ``(value, True)`` when found, ``("", False)`` otherwise.
        """
        for table in self.chain():
            if key in table.data:
                return table.data[key], True
        return "", False

    def get(self, key: str, default: str = "") -> str:
        """Value of ``key`` from this table or its defaults, else ``default``."""
        value, found = self.lookup(key)
        return value if found else default

    def keys(self) -> list[str]:
        """Every distinct key of this table and its defaults chain, unordered."""
        seen: set[str] = set()
        for table in self.chain():
            seen.update(table.data)
        return list(seen)

    def local_items(self) -> list[tuple[str, str]]:
        """Pairs held by this table itself (defaults excluded)."""
        return list(self.data.items())

    # -- mutation (local map only, except clear_all) ---------------------------

    def set(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(
                f"Property keys and values must be str, got "
                f"{type(key).__name__} and {type(value).__name__}"
            )
        self.data[key] = value

    def delete(self, key: str) -> None:
        """Remove ``key`` from this table. Missing keys are ignored."""
        self.data.pop(key, None)

    def clear(self) -> None:
        """Remove every pair of this table. The defaults are left alone."""
        self.data.clear()

    def clear_all(self) -> None:
        """Remove every pair of this table and of every defaults table."""
        for table in self.chain():
            table.data.clear()

    # -- I/O ------------------------------------------------------------------

    def load(self, stream: BinaryIO) -> int:
        """Load records from a binary stream. Returns the record count."""
        from proptab.reader import PropertiesReader
        return PropertiesReader.load(stream, self)

    def loads(self, data: str | bytes) -> int:
        """Load records from text or UTF-8 bytes. Returns the record count."""
        import io
        from proptab.reader import PropertiesReader
        if isinstance(data, str):
            data = data.encode("utf-8")
        return PropertiesReader.load(io.BytesIO(data), self)

    @classmethod
    def read(cls, path: str | Path) -> PropertyTable:
        """Read a .properties file into a new table."""
        from proptab.reader import PropertiesReader
        return PropertiesReader.read(path, cls())

    def store(self, stream: BinaryIO, ascii: bool = False) -> int:
        """Write this table's own pairs to a binary stream."""
        from proptab.writer import PropertiesWriter
        return PropertiesWriter.store(self, stream, ascii)

    def save(self, stream: BinaryIO, comments: str | None = None, ascii: bool = False) -> int:
        """Write a comment block (if any) and this table's own pairs."""
        from proptab.writer import PropertiesWriter
        return PropertiesWriter.save(self, stream, comments, ascii)

    def save_string(self, comments: str | None = None, ascii: bool = False) -> str:
        return self.to_bytes(comments, ascii).decode("utf-8")

    def to_bytes(self, comments: str | None = None, ascii: bool = False) -> bytes:
        from proptab.writer import PropertiesWriter
        return PropertiesWriter.serialize(self, comments, ascii)

    def write(self, path: str, comments: str | None = None, ascii: bool = False) -> int:
        """Write this table to a .properties file. Returns bytes written."""
        from proptab.writer import PropertiesWriter
        return PropertiesWriter.write(self, path, comments, ascii)

    # -- container protocol (local map) ---------------------------------------

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __str__(self) -> str:
        return self.save_string()

    def __repr__(self) -> str:
        has_defaults = self.defaults is not None
        return f"PropertyTable(keys={len(self.data)}, defaults={has_defaults})"
