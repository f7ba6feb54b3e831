"""Tests for typed column readers."""

from __future__ import annotations

import pytest

from sqlitehandle import Connection, Reader, Statement


def run(conn: Connection, sql: str) -> None:
    with Statement(conn, sql) as stmt:
        stmt.execute()


@pytest.mark.integration
class TestScalarColumns:
    """Tests for single-row reads."""

    def test_int_and_string_columns(self, memory: Connection) -> None:
        with Statement(memory, "SELECT 42, 'hello'") as stmt:
            assert stmt.step()
            assert stmt.get_int() == 42
            assert stmt.get_int(0) == 42
            assert stmt.get_string(1) == "hello"
            assert stmt.get_string_length(1) == 5

    def test_int_is_64_bit(self, memory: Connection) -> None:
        """Test that integers beyond 32 bits are read without wrapping."""
        with Statement(memory, "SELECT 3000000000, -9223372036854775808") as stmt:
            assert stmt.step()
            assert stmt.get_int(0) == 3_000_000_000
            assert stmt.get_int(1) == -(2**63)

    def test_string_length_is_bytes(self, memory: Connection) -> None:
        """Test that narrow length counts UTF-8 bytes, not characters."""
        with Statement(memory, "SELECT 'héllo'") as stmt:
            assert stmt.step()
            assert stmt.get_string() == "héllo"
            assert stmt.get_string_length() == 6

    def test_wide_string_length_is_code_units(self, memory: Connection) -> None:
        """Test that wide length counts UTF-16 code units."""
        with Statement(memory, "SELECT 'héllo', '🙂'") as stmt:
            assert stmt.step()
            assert stmt.get_wide_string() == "héllo"
            assert stmt.get_wide_string_length() == 5
            assert stmt.get_wide_string(1) == "🙂"
            assert stmt.get_wide_string_length(1) == 2

    def test_null_text_is_none(self, memory: Connection) -> None:
        with Statement(memory, "SELECT NULL") as stmt:
            assert stmt.step()
            assert stmt.get_string() is None
            assert stmt.get_wide_string() is None
            assert stmt.get_string_length() == 0
            assert stmt.get_int() == 0

    def test_sqlite_coercions(self, memory: Connection) -> None:
        """Test that type conversion is left to SQLite."""
        with Statement(memory, "SELECT '17', 3") as stmt:
            assert stmt.step()
            assert stmt.get_int(0) == 17
            assert stmt.get_string(1) == "3"


@pytest.mark.integration
class TestRowAdvance:
    """Tests that values never leak between rows."""

    def test_values_are_per_row(self, memory: Connection) -> None:
        run(memory, "CREATE TABLE words(id INTEGER, word TEXT)")
        run(memory, "INSERT INTO words VALUES (1, 'a much longer first word')")
        run(memory, "INSERT INTO words VALUES (2, 'b')")

        with Statement(memory, "SELECT id, word FROM words ORDER BY id") as stmt:
            assert stmt.step()
            first = (stmt.get_int(0), stmt.get_string(1), stmt.get_wide_string(1))
            assert stmt.step()
            second = (stmt.get_int(0), stmt.get_string(1), stmt.get_wide_string(1))
            assert stmt.get_string_length(1) == 1
            assert not stmt.step()

        assert first == (1, "a much longer first word", "a much longer first word")
        assert second == (2, "b", "b")


@pytest.mark.integration
class TestCustomHost:
    """Tests that any type exposing get_abi() can mix in Reader."""

    def test_reader_on_borrowed_handle(self, memory: Connection) -> None:
        class Borrowed(Reader):
            def __init__(self, statement: Statement) -> None:
                self._statement = statement

            def get_abi(self) -> int | None:
                return self._statement.get_abi()

        with Statement(memory, "SELECT 9, 'nine'") as stmt:
            assert stmt.step()
            view = Borrowed(stmt)
            assert view.get_int() == 9
            assert view.get_string(1) == "nine"
