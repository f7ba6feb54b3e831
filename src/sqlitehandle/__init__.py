"""
sqlitehandle core package.

Safe ownership of native SQLite handles through ctypes:
- `Handle` / `HandleTraits`: single-owner wrapper releasing a native value
  exactly once (`sqlitehandle.handle`)
- `Connection`: open/close lifecycle over `sqlite3 *`
- `Statement`: prepare/step/execute over `sqlite3_stmt *`, with typed
  column readers from `Reader`
- `DatabaseError`: native result code and message of a failed call

Configuration:
- Shared constants (in-memory filename, library names, wide encoding) live
  in `sqlitehandle.global_config`.
"""

from .connection import Connection
from .errors import ContractError, DatabaseError
from .handle import Handle, HandleTraits
from .native import library_version, load_library
from .reader import Reader
from .statement import Statement

__all__ = [
    "Connection",
    "Statement",
    "Reader",
    "Handle",
    "HandleTraits",
    "DatabaseError",
    "ContractError",
    "load_library",
    "library_version",
]
