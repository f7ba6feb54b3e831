"""Global, project-wide configuration constants.

This module intentionally contains **no business logic** – only simple,
shared anchors and cross-cutting constants that many modules can import.
"""

import sys
from pathlib import Path

# Core roots
PACKAGE_ROOT: Path = Path(__file__).resolve().parent
# From src/sqlitehandle/global_config.py, go up two levels: src/sqlitehandle -> src -> repo root
PROJECT_ROOT: Path = PACKAGE_ROOT.parent.parent

# Core Names
PROJECT_NAME = "sqlitehandle"
PACKAGE_NAME = "sqlitehandle"

# Reserved filename selecting a non-persistent, in-memory database
MEMORY_FILENAME = ":memory:"

# Native library lookup
LIBRARY_NAME = "sqlite3"
if sys.platform == "darwin":
    LIBRARY_NAMES: tuple[str, ...] = ("libsqlite3.dylib", "libsqlite3.0.dylib")
elif sys.platform == "win32":
    LIBRARY_NAMES = ("sqlite3.dll", "winsqlite3.dll")
else:
    LIBRARY_NAMES = ("libsqlite3.so.0", "libsqlite3.so")

# Wide text is UTF-16 in native byte order (what the *16 entry points expect)
WIDE_ENCODING = "utf-16-le" if sys.byteorder == "little" else "utf-16-be"
WIDE_CHAR_SIZE = 2
