"""ctypes bindings for the handful of SQLite entry points this package uses.

The shared library is located and loaded once per process. Every function
gets explicit ``argtypes``/``restype`` declarations so pointers are never
truncated to ``int`` on 64-bit platforms.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import logging
import os
from ctypes import POINTER, c_char_p, c_int, c_int64, c_void_p
from typing import Any

from . import global_config as g

logger = logging.getLogger(__name__)

# Result codes (sqlite3.h)
SQLITE_OK = 0
SQLITE_ERROR = 1
SQLITE_BUSY = 5
SQLITE_LOCKED = 6
SQLITE_CANTOPEN = 14
SQLITE_CONSTRAINT = 19
SQLITE_MISUSE = 21
SQLITE_ROW = 100
SQLITE_DONE = 101

# name -> (restype, argtypes)
_SIGNATURES: dict[str, tuple[Any, list[Any]]] = {
    # connection lifecycle
    "sqlite3_open": (c_int, [c_char_p, POINTER(c_void_p)]),
    "sqlite3_open16": (c_int, [c_char_p, POINTER(c_void_p)]),
    "sqlite3_close": (c_int, [c_void_p]),
    # statement lifecycle
    "sqlite3_prepare_v2": (
        c_int,
        [c_void_p, c_char_p, c_int, POINTER(c_void_p), POINTER(c_void_p)],
    ),
    "sqlite3_prepare16_v2": (
        c_int,
        [c_void_p, c_char_p, c_int, POINTER(c_void_p), POINTER(c_void_p)],
    ),
    "sqlite3_step": (c_int, [c_void_p]),
    "sqlite3_finalize": (c_int, [c_void_p]),
    "sqlite3_db_handle": (c_void_p, [c_void_p]),
    # column accessors; text is returned as a raw pointer and copied with
    # an explicit byte count so embedded NULs survive
    "sqlite3_column_int64": (c_int64, [c_void_p, c_int]),
    "sqlite3_column_text": (c_void_p, [c_void_p, c_int]),
    "sqlite3_column_text16": (c_void_p, [c_void_p, c_int]),
    "sqlite3_column_bytes": (c_int, [c_void_p, c_int]),
    "sqlite3_column_bytes16": (c_int, [c_void_p, c_int]),
    # diagnostics
    "sqlite3_errmsg": (c_char_p, [c_void_p]),
    "sqlite3_extended_errcode": (c_int, [c_void_p]),
    "sqlite3_errstr": (c_char_p, [c_int]),
    "sqlite3_libversion": (c_char_p, []),
}

_library: ctypes.CDLL | None = None


def _candidates(path: str | os.PathLike[str] | None) -> list[str]:
    """Return library locations to try, most specific first."""
    if path is not None:
        return [os.fspath(path)]

    found = ctypes.util.find_library(g.LIBRARY_NAME)
    candidates = [found] if found else []
    candidates.extend(g.LIBRARY_NAMES)

    # The interpreter's own sqlite3 extension links the library, and symbol
    # lookup through its handle also searches its dependencies.
    try:
        import _sqlite3
    except ImportError:
        pass
    else:
        module_file = getattr(_sqlite3, "__file__", None)
        if module_file:
            candidates.append(module_file)
    return candidates


def _bind(lib: ctypes.CDLL) -> None:
    for name, (restype, argtypes) in _SIGNATURES.items():
        function = getattr(lib, name)
        function.restype = restype
        function.argtypes = argtypes


def load_library(path: str | os.PathLike[str] | None = None) -> ctypes.CDLL:
    """Load the SQLite shared library and declare its signatures.

    The first successfully loaded library is cached; later calls return it
    regardless of ``path``.

    Args:
        path: Explicit location of the shared library. When omitted the
            system library search path is used, falling back to the
            library the interpreter's ``sqlite3`` module is linked against.

    Returns:
        The loaded library with signatures declared.

    Raises:
        OSError: If no candidate exposes the SQLite API.

    Logs:
        - DEBUG: "Loaded SQLite {version} from {location}" on success.
    """
    global _library
    if _library is not None:
        return _library

    candidates = _candidates(path)
    errors: list[str] = []
    for candidate in candidates:
        try:
            lib = ctypes.CDLL(candidate)
            _bind(lib)
        except (OSError, AttributeError) as exc:
            errors.append(f"{candidate}: {exc}")
            continue
        _library = lib
        logger.debug(
            "Loaded SQLite %s from %s", lib.sqlite3_libversion().decode("ascii"), candidate
        )
        return lib

    msg = "Could not load the SQLite library. Tried: " + "; ".join(errors or candidates)
    raise OSError(msg)


def library_version() -> str:
    """Return the version string of the loaded SQLite library."""
    return load_library().sqlite3_libversion().decode("ascii")


def encode_narrow(text: str | bytes | os.PathLike[Any]) -> bytes:
    """Encode text for the narrow (UTF-8) entry points.

    ctypes appends the terminating NUL when passing ``bytes`` as ``char *``.
    """
    if isinstance(text, bytes):
        return text
    if isinstance(text, str):
        return text.encode("utf-8")
    return os.fsencode(text)


def encode_wide(text: str | bytes | os.PathLike[Any]) -> bytes:
    """Encode text for the wide (UTF-16) entry points, NUL-terminated.

    ``bytes`` are taken as UTF-8, the same convention as the narrow entry points.
    """
    text = os.fspath(text)
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return text.encode(g.WIDE_ENCODING) + b"\x00" * g.WIDE_CHAR_SIZE
