"""Tests for the key-value storage backends."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from opportunity_board.config import Settings
from opportunity_board.errors import PersistenceError
from opportunity_board.services.repository import OpportunityRepository
from opportunity_board.services.store import OpportunityStore
from opportunity_board.storage import DuckDBStorage, JsonFileStorage, MemoryStorage, open_storage


def test_json_storage_round_trip(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "data", filenames={"board": "board.json"})
    assert storage.get_item("board") is None

    storage.set_item("board", '{"a": 1}')
    storage.set_item("board", '{"a": 2}')

    assert storage.get_item("board") == '{"a": 2}'
    assert (tmp_path / "data" / "board.json").exists()
    assert os.listdir(tmp_path / "data") == ["board.json"]


def test_json_storage_write_failure_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    storage = JsonFileStorage(blocker)
    with pytest.raises(PersistenceError):
        storage.set_item("board", "{}")


def test_duckdb_storage_round_trip(tmp_path: Path) -> None:
    storage = DuckDBStorage(tmp_path / "board.duckdb")
    try:
        assert storage.get_item("board") is None
        storage.set_item("board", "first")
        storage.set_item("board", "second")
        assert storage.get_item("board") == "second"
    finally:
        storage.close()


def test_duckdb_storage_survives_reopen(tmp_path: Path) -> None:
    db_path = tmp_path / "board.duckdb"
    storage = DuckDBStorage(db_path)
    repo = OpportunityRepository(OpportunityStore(storage))
    repo.add("Engineer", "Acme")
    storage.close()

    reopened = DuckDBStorage(db_path)
    try:
        snapshot = OpportunityStore(reopened).load()
        assert [opp.title for opp in snapshot.opportunities] == ["Engineer"]
        assert snapshot.current_id == 2
    finally:
        reopened.close()


def test_closed_duckdb_storage_raises(tmp_path: Path) -> None:
    storage = DuckDBStorage(tmp_path / "board.duckdb")
    storage.close()
    with pytest.raises(PersistenceError):
        storage.set_item("board", "{}")


def test_open_storage_selects_backend(settings: Settings) -> None:
    assert isinstance(open_storage(settings), MemoryStorage)

    json_storage = open_storage(settings.model_copy(update={"storage_backend": "json"}))
    assert isinstance(json_storage, JsonFileStorage)
    assert json_storage.path_for(settings.storage_key) == settings.snapshot_path

    duck = open_storage(settings.model_copy(update={"storage_backend": "duckdb"}))
    try:
        assert isinstance(duck, DuckDBStorage)
    finally:
        duck.close()


def test_file_paths_default_to_data_dir(tmp_path: Path) -> None:
    configured = Settings(data_dir=tmp_path / "boards")
    assert configured.snapshot_path == tmp_path / "boards" / "board.json"
    assert configured.db_path == tmp_path / "boards" / "board.duckdb"
    assert configured.seed_path == tmp_path / "boards" / "seed.yaml"

    assert Settings(data_dir=tmp_path, snapshot_path=tmp_path / "x.json").snapshot_path == tmp_path / "x.json"
