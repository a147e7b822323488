from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from opportunity_board.config import Settings
from opportunity_board.errors import PersistenceError
from opportunity_board.services.board_service import BoardContext
from opportunity_board.services.repository import OpportunityRepository
from opportunity_board.services.store import OpportunityStore
from opportunity_board.storage import MemoryStorage


class FakeClock:
    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)) -> None:
        self.now = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


class FlakyStorage(MemoryStorage):
    """Memory storage whose writes can be switched off."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False
        self.writes = 0

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("quota exceeded")
        self.writes += 1
        super().set_item(key, value)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def store(storage: FlakyStorage) -> OpportunityStore:
    return OpportunityStore(storage)


@pytest.fixture
def repo(store: OpportunityStore, clock: FakeClock) -> OpportunityRepository:
    return OpportunityRepository(store, clock=clock)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path,
        snapshot_path=tmp_path / "board.json",
        db_path=tmp_path / "board.duckdb",
        seed_path=tmp_path / "seed.yaml",
        storage_backend="memory",
        seed_on_first_run=False,
    )


@pytest.fixture
def board(storage: FlakyStorage, settings: Settings, clock: FakeClock) -> BoardContext:
    return BoardContext(storage, settings, clock=clock).open()
