"""Local key-value storage backends holding the board snapshot."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

import duckdb

from opportunity_board.config import Settings
from opportunity_board.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def close(self) -> None: ...


class MemoryStorage:
    """Process-local storage, mostly for tests and throwaway boards."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def close(self) -> None:
        pass


class JsonFileStorage:
    """One file per key inside ``directory``.

    Writes go to a temp file in the same directory and are moved over the
    target with ``os.replace`` so readers never see a half-written snapshot.
    """

    def __init__(self, directory: Path, filenames: dict[str, str] | None = None) -> None:
        self.directory = directory
        self._filenames = dict(filenames or {})

    def path_for(self, key: str) -> Path:
        return self.directory / self._filenames.get(key, f"{key}.json")

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=self.directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def close(self) -> None:
        pass


class DuckDBStorage:
    """Key-value table in a local DuckDB database."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = db_path
        if str(db_path) != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._con: duckdb.DuckDBPyConnection | None = duckdb.connect(str(db_path))
        _initialize_tables(self._con)
        logger.info("DuckDB connected at %s", db_path)

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        if self._con is None:
            raise PersistenceError("DuckDB storage is closed")
        return self._con

    def get_item(self, key: str) -> str | None:
        row = self.connection.execute("SELECT payload FROM kv_store WHERE name = ?", [key]).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            self.connection.execute(
                """
                INSERT INTO kv_store (name, payload, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT (name) DO UPDATE SET payload = excluded.payload, updated_at = excluded.updated_at
                """,
                [key, value],
            )
        except duckdb.Error as e:
            raise PersistenceError(f"Could not write key {key!r} to {self.db_path}: {e}") from e

    def close(self) -> None:
        if self._con:
            self._con.close()
            self._con = None


def _initialize_tables(con: duckdb.DuckDBPyConnection) -> None:
    con.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
            name VARCHAR PRIMARY KEY,
            payload VARCHAR NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)


def open_storage(settings: Settings) -> KeyValueStorage:
    """Build the storage backend selected in settings."""
    if settings.storage_backend == "duckdb":
        return DuckDBStorage(settings.db_path)
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return JsonFileStorage(
        settings.snapshot_path.parent,
        filenames={settings.storage_key: settings.snapshot_path.name},
    )
