"""Prepared statement owning one ``sqlite3_stmt *`` handle.

Lifecycle: empty -> prepared -> stepped row by row -> done. The statement
does not keep a reference to its connection; errors are looked up through
``sqlite3_db_handle``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, NoReturn

from .connection import Connection
from .errors import ContractError, DatabaseError
from .handle import Handle, HandleTraits
from .native import (
    SQLITE_DONE,
    SQLITE_MISUSE,
    SQLITE_OK,
    SQLITE_ROW,
    encode_narrow,
    encode_wide,
    load_library,
)
from .reader import Reader

logger = logging.getLogger(__name__)


class _StatementHandleTraits(HandleTraits[int]):
    def close(self, value: int) -> None:
        result = load_library().sqlite3_finalize(value)
        if result & 0xFF == SQLITE_MISUSE:
            logger.error("sqlite3_finalize of 0x%x failed (result %d)", value, result)
        else:
            logger.debug("Finalized SQLite statement 0x%x", value)
        # finalize repeats the last step() error; only misuse is a bug here
        assert result & 0xFF != SQLITE_MISUSE, f"sqlite3_finalize misuse (result code {result})"


STATEMENT_TRAITS = _StatementHandleTraits()


class Statement(Reader):
    """A compiled SQL statement.

    Args:
        connection: Open connection to prepare against. Leaves the
            statement empty when None.
        text: SQL text of a single statement.
        wide: Prepare through the UTF-16 entry point instead of UTF-8.

    Raises:
        DatabaseError: If ``text`` does not compile.
        ContractError: If ``connection`` is closed.
    """

    def __init__(
        self,
        connection: Connection | None = None,
        text: str | bytes | None = None,
        *,
        wide: bool = False,
    ) -> None:
        self._handle: Handle[int] = Handle(STATEMENT_TRAITS)
        # prepared text that compiled to no statement (blank or comment only)
        self._blank = False
        if connection is not None and text is not None:
            if wide:
                self.prepare_wide(connection, text)
            else:
                self.prepare(connection, text)

    def __bool__(self) -> bool:
        return bool(self._handle)

    def __repr__(self) -> str:
        if not self:
            return f"<{type(self).__name__} empty>"
        return f"<{type(self).__name__} 0x{self.get_abi():x}>"

    def get_abi(self) -> int | None:
        """Return the raw ``sqlite3_stmt *`` value; ownership stays here."""
        return self._handle.get()

    def raise_last_error(self) -> NoReturn:
        """Raise the last error recorded on the connection owning this statement.

        Raises:
            DatabaseError: Always.
        """
        raise DatabaseError.from_connection(load_library().sqlite3_db_handle(self.get_abi()))

    def prepare(self, connection: Connection, text: str | bytes) -> None:
        """Compile ``text`` through ``sqlite3_prepare_v2`` (UTF-8).

        A previously prepared plan is finalized first. Text holding only
        whitespace or comments leaves the statement empty; stepping it then
        reports completion immediately.

        Args:
            connection: Open connection.
            text: SQL text. Only the first statement is compiled.

        Raises:
            ContractError: If ``connection`` is closed.
            DatabaseError: If SQLite rejects the text.

        Logs:
            - DEBUG: "Prepared statement: {text}" on success.
        """
        self._prepare(connection, load_library().sqlite3_prepare_v2, encode_narrow(text), text)

    def prepare_wide(self, connection: Connection, text: str | bytes) -> None:
        """Compile ``text`` through ``sqlite3_prepare16_v2`` (UTF-16).

        Same semantics as :meth:`prepare`.
        """
        self._prepare(connection, load_library().sqlite3_prepare16_v2, encode_wide(text), text)

    def _prepare(
        self,
        connection: Connection,
        prepare_function: Callable[..., int],
        encoded: bytes,
        text: Any,
    ) -> None:
        if not connection:
            msg = "Cannot prepare a statement against a closed connection"
            raise ContractError(msg)

        self._blank = False
        result = prepare_function(connection.get_abi(), encoded, -1, self._handle.set(), None)
        if result != SQLITE_OK:
            logger.debug("Failed to prepare statement %r (result %d)", text, result)
            connection.raise_last_error()
        if not self._handle:
            self._blank = True
            logger.debug("Prepared text holds no statement: %r", text)
            return
        logger.debug("Prepared statement: %s", text)

    def step(self) -> bool:
        """Advance one row.

        Returns:
            True if a row is available for reading, False when the
            statement has finished.

        Raises:
            ContractError: If the statement was never prepared.
            DatabaseError: For any other result, including SQLITE_BUSY;
                retrying is left to the caller.
        """
        if not self:
            if self._blank:
                return False
            msg = "Cannot step a statement that has not been prepared"
            raise ContractError(msg)

        result = load_library().sqlite3_step(self.get_abi())
        if result == SQLITE_ROW:
            return True
        if result == SQLITE_DONE:
            return False
        logger.debug("Statement step failed (result %d)", result)
        self.raise_last_error()

    def execute(self) -> None:
        """Run a statement that is not expected to produce rows.

        Raises:
            ContractError: If the statement produced a row.
            DatabaseError: If the step fails.
        """
        if self.step():
            msg = "Statement produced a row; use step() to read results"
            raise ContractError(msg)

    def close(self) -> None:
        """Finalize the statement. Safe to call on an empty statement."""
        self._blank = False
        self._handle.close()

    def move(self) -> Statement:
        """Transfer the native statement into a new object; this one empties."""
        moved = Statement()
        moved._handle.swap(self._handle)
        moved._blank, self._blank = self._blank, False
        return moved

    def __enter__(self) -> Statement:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __copy__(self) -> Statement:
        msg = f"{type(self).__name__} cannot be copied; use move()"
        raise TypeError(msg)

    def __deepcopy__(self, memo: dict[int, Any]) -> Statement:
        return self.__copy__()
