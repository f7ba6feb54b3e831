"""SQLite connection owning one ``sqlite3 *`` handle.

A :class:`Connection` is either closed (empty handle) or open. Opening
builds the native connection inside a temporary and only swaps it in on
success, so a failed open never leaves a half-open connection behind and
never leaks the errored handle SQLite hands back.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any, NoReturn

from . import global_config as g
from .errors import DatabaseError
from .handle import Handle, HandleTraits
from .native import SQLITE_OK, encode_narrow, encode_wide, load_library

logger = logging.getLogger(__name__)

Filename = str | bytes | os.PathLike[Any]


class _ConnectionHandleTraits(HandleTraits[int]):
    def close(self, value: int) -> None:
        result = load_library().sqlite3_close(value)
        if result != SQLITE_OK:
            logger.error("sqlite3_close of 0x%x failed (result %d)", value, result)
        else:
            logger.debug("Closed SQLite connection 0x%x", value)
        assert result == SQLITE_OK, f"sqlite3_close failed with result code {result}"


CONNECTION_TRAITS = _ConnectionHandleTraits()


class Connection:
    """An open (or closed) SQLite database session.

    Args:
        filename: Database to open. Leaves the connection closed when None.
        wide: Open through the UTF-16 entry point instead of UTF-8.

    Raises:
        DatabaseError: If ``filename`` is given and cannot be opened.
    """

    def __init__(self, filename: Filename | None = None, *, wide: bool = False) -> None:
        self._handle: Handle[int] = Handle(CONNECTION_TRAITS)
        if filename is not None:
            if wide:
                self.open_wide(filename)
            else:
                self.open(filename)

    @classmethod
    def memory(cls) -> Connection:
        """Open a private in-memory database."""
        return cls(g.MEMORY_FILENAME)

    @classmethod
    def wide_memory(cls) -> Connection:
        """Open a private in-memory database through the UTF-16 entry point."""
        return cls(g.MEMORY_FILENAME, wide=True)

    def __bool__(self) -> bool:
        return bool(self._handle)

    def __repr__(self) -> str:
        if not self:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} 0x{self.get_abi():x}>"

    def get_abi(self) -> int | None:
        """Return the raw ``sqlite3 *`` value; ownership stays here."""
        return self._handle.get()

    def raise_last_error(self) -> NoReturn:
        """Raise the last error SQLite recorded on this connection.

        Raises:
            DatabaseError: Always.
        """
        raise DatabaseError.from_connection(self.get_abi())

    def open(self, filename: Filename) -> None:
        """Open ``filename`` through ``sqlite3_open`` (UTF-8).

        Any connection this object already owned is closed on success and
        kept unchanged on failure.

        Args:
            filename: Database path, or ``":memory:"``.

        Raises:
            DatabaseError: If SQLite cannot open the database.

        Logs:
            - DEBUG: "Opened SQLite database at {filename}" on success.
        """
        self._open(load_library().sqlite3_open, encode_narrow(filename), filename)

    def open_wide(self, filename: Filename) -> None:
        """Open ``filename`` through ``sqlite3_open16`` (UTF-16).

        Same semantics as :meth:`open`.
        """
        self._open(load_library().sqlite3_open16, encode_wide(filename), filename)

    def _open(self, open_function: Callable[..., int], encoded: bytes, filename: Any) -> None:
        temp = Connection()
        with temp:
            result = open_function(encoded, temp._handle.set())
            if result != SQLITE_OK:
                logger.debug("Failed to open SQLite database at %s (result %d)", filename, result)
                temp.raise_last_error()
            self._handle.swap(temp._handle)
        logger.debug("Opened SQLite database at %s", filename)

    def close(self) -> None:
        """Close the connection. Safe to call on a closed connection.

        All statements prepared against this connection must be closed
        first.
        """
        self._handle.close()

    def move(self) -> Connection:
        """Transfer the native connection into a new object; this one closes."""
        moved = Connection()
        moved._handle.swap(self._handle)
        return moved

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __copy__(self) -> Connection:
        msg = f"{type(self).__name__} cannot be copied; use move()"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> Connection:
        return self.__copy__()
