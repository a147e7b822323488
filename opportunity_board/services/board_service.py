"""Board context: owns storage, store and repository, and applies user intents."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel

from opportunity_board.config import Settings
from opportunity_board.models.board import BoardView
from opportunity_board.models.intents import (
    AddIntent,
    BoardIntent,
    DeleteIntent,
    MoveIntent,
    ResetIntent,
    SearchIntent,
)
from opportunity_board.models.opportunity import NonBlank, OpportunityStatus, utcnow
from opportunity_board.services.projector import project_board
from opportunity_board.services.repository import OpportunityRepository
from opportunity_board.services.store import OpportunityStore
from opportunity_board.storage import KeyValueStorage, open_storage

logger = logging.getLogger(__name__)


class SeedEntry(BaseModel):
    title: NonBlank
    company: NonBlank
    status: OpportunityStatus = OpportunityStatus.SAVED


SAMPLE_OPPORTUNITIES = [
    SeedEntry(title="Senior Frontend Developer", company="TechCorp"),
    SeedEntry(title="Full Stack Engineer", company="Innovation Labs"),
    SeedEntry(title="Product Manager", company="StartupXYZ"),
]


def load_seed_file(path: Path) -> list[SeedEntry]:
    """Read sample opportunities from a YAML file with an ``opportunities`` list.

    Every entry is validated before anything is seeded; invalid entries are
    logged and skipped.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    entries = data.get("opportunities", []) if isinstance(data, dict) else data
    valid: list[SeedEntry] = []
    for index, entry in enumerate(entries or []):
        try:
            valid.append(SeedEntry.model_validate(entry))
        except pydantic.ValidationError as e:
            logger.warning("Skipping seed entry %d in %s: %s", index, path, e)
    return valid


class BoardContext:
    def __init__(
        self,
        storage: KeyValueStorage,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.settings = settings
        self.storage = storage
        self.store = OpportunityStore(storage, key=settings.storage_key)
        self._clock = clock
        self.repository = OpportunityRepository(self.store, clock=clock)

    @classmethod
    def from_settings(cls, settings: Settings, clock: Callable[[], datetime] = utcnow) -> BoardContext:
        return cls(open_storage(settings), settings, clock=clock)

    def open(self) -> BoardContext:
        """Load the stored board, seeding samples on a first run."""
        first_run = not self.store.exists()
        self.repository = OpportunityRepository.load(self.store, clock=self._clock)
        if first_run and self.settings.seed_on_first_run:
            self.seed()
        return self

    def seed(self) -> int:
        if self.settings.seed_path.exists():
            entries = load_seed_file(self.settings.seed_path)
            logger.info("Seeding %d opportunities from %s", len(entries), self.settings.seed_path)
        else:
            entries = SAMPLE_OPPORTUNITIES
            logger.info("Seeding %d sample opportunities", len(entries))
        for entry in entries:
            opp = self.repository.add(entry.title, entry.company)
            if entry.status is not OpportunityStatus.SAVED:
                self.repository.update_status(opp.id, entry.status)
        return len(entries)

    def close(self) -> None:
        self.storage.close()

    def view(self, query: str | None = None) -> BoardView:
        view = project_board(self.repository.all(), query)
        if self.repository.persistence_error is not None:
            view.persistence_warning = str(self.repository.persistence_error)
        return view

    def dispatch(self, intent: BoardIntent, query: str = "") -> BoardView:
        """Apply one user intent and return the refreshed board filtered by
        the caller's active ``query``.

        A search intent replaces that query and a reset clears it; the
        returned view carries the query the caller should keep.
        """
        if isinstance(intent, AddIntent):
            self.repository.add(intent.title, intent.company)
        elif isinstance(intent, MoveIntent):
            self.repository.update_status(intent.id, intent.status)
        elif isinstance(intent, DeleteIntent):
            self.repository.delete(intent.id)
        elif isinstance(intent, SearchIntent):
            query = intent.query
        elif isinstance(intent, ResetIntent):
            self.repository.reset()
            query = ""
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")
        return self.view(query)
