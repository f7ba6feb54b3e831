"""Exception types for the project."""

from __future__ import annotations

from .native import load_library


class DatabaseError(Exception):
    """Raised when a native SQLite call reports failure.

    Holds a snapshot of the extended result code and the error message
    associated with the connection at the moment of failure.

    Attributes:
        result: Extended result code (e.g. 1 for SQLITE_ERROR, 2067 for
            SQLITE_CONSTRAINT_UNIQUE).
        message: Native error message text.
    """

    def __init__(self, result: int, message: str) -> None:
        super().__init__(f"{message} (result code {result})")
        self.result = result
        self.message = message

    @property
    def primary_result(self) -> int:
        """Primary result code with the extended bits masked off."""
        return self.result & 0xFF

    @classmethod
    def from_connection(cls, connection: int | None) -> DatabaseError:
        """Build an error from the last failure recorded on a connection.

        Args:
            connection: Raw ``sqlite3 *`` value. SQLite reports an
                out-of-memory condition for a NULL connection.

        Returns:
            DatabaseError carrying the native code and message.
        """
        lib = load_library()
        result = lib.sqlite3_extended_errcode(connection)
        raw = lib.sqlite3_errmsg(connection)
        if raw:
            message = raw.decode("utf-8", errors="replace")
        else:
            message = lib.sqlite3_errstr(result).decode("utf-8", errors="replace")
        return cls(result, message)


class ContractError(AssertionError):
    """Raised when the API is used in a way its contract forbids."""
