from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from sqlitehandle import Connection


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """
    A dedicated temp root directory for each test.
    All filesystem writes in tests should be under this root (or tmp_path directly).
    """
    root = tmp_path / "proj"
    (root / "data" / "out").mkdir(parents=True)
    return root


@pytest.fixture(autouse=True)
def chdir_to_project_root(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Automatically change working directory to project_root for all tests.
    This ensures relative-path operations go into the temp directory by default.
    """
    monkeypatch.chdir(project_root)


@pytest.fixture
def sqlite_path(project_root: Path) -> Path:
    """
    On-disk SQLite DB under the temp project root (more realistic than :memory:).
    """
    path = project_root / "data" / "out" / "test.sqlite"
    # Assert DB path is under project_root (fail fast if misconfigured)
    try:
        path.resolve().relative_to(project_root.resolve())
    except ValueError:
        raise AssertionError(
            f"SQLite path {path} is not under project_root {project_root}. "
            "This prevents accidental writes to real databases."
        )
    return path


@pytest.fixture
def memory() -> Iterator[Connection]:
    """
    An in-memory connection that is always closed after each test.
    Statements prepared in a test must be closed before the test returns.
    """
    with Connection.memory() as conn:
        yield conn
