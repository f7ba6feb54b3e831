"""Typed column access for objects positioned on a result row."""

from __future__ import annotations

import ctypes

from . import global_config as g
from .native import load_library


class Reader:
    """Mixin reading columns of the current row.

    The host class must provide ``get_abi()`` returning a ``sqlite3_stmt *``
    that the last ``step()`` left on a row. Type coercion and NULL handling
    are SQLite's; nothing here raises.
    """

    def get_abi(self) -> int | None:
        raise NotImplementedError

    def get_int(self, column: int = 0) -> int:
        """Return the column as a 64-bit integer."""
        return load_library().sqlite3_column_int64(self.get_abi(), column)

    def get_string(self, column: int = 0) -> str | None:
        """Return the column as UTF-8 text, or None for SQL NULL."""
        lib = load_library()
        abi = self.get_abi()
        # text must be fetched before its length, see sqlite3_column_bytes docs
        pointer = lib.sqlite3_column_text(abi, column)
        if pointer is None:
            return None
        size = lib.sqlite3_column_bytes(abi, column)
        return ctypes.string_at(pointer, size).decode("utf-8", errors="replace")

    def get_string_length(self, column: int = 0) -> int:
        """Length of the UTF-8 text in bytes."""
        return load_library().sqlite3_column_bytes(self.get_abi(), column)

    def get_wide_string(self, column: int = 0) -> str | None:
        """Return the column as UTF-16 text, or None for SQL NULL."""
        lib = load_library()
        abi = self.get_abi()
        pointer = lib.sqlite3_column_text16(abi, column)
        if pointer is None:
            return None
        size = lib.sqlite3_column_bytes16(abi, column)
        return ctypes.string_at(pointer, size).decode(g.WIDE_ENCODING, errors="replace")

    def get_wide_string_length(self, column: int = 0) -> int:
        """Length of the UTF-16 text in code units."""
        return load_library().sqlite3_column_bytes16(self.get_abi(), column) // g.WIDE_CHAR_SIZE
