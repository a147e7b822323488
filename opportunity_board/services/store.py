"""Loads and saves the board snapshot through a key-value storage."""
from __future__ import annotations

import json
import logging
from collections.abc import Sequence

import pydantic

from opportunity_board.errors import CorruptStateError
from opportunity_board.models.opportunity import BoardSnapshot, Opportunity
from opportunity_board.storage import KeyValueStorage

logger = logging.getLogger(__name__)


class OpportunityStore:
    def __init__(self, storage: KeyValueStorage, key: str = "opportunityBoard") -> None:
        self.storage = storage
        self.key = key

    def exists(self) -> bool:
        return self.storage.get_item(self.key) is not None

    def load(self, strict: bool = False) -> BoardSnapshot:
        """Read the snapshot.

        A missing entry is a normal first run and yields an empty board with the
        counter at 1. An unreadable entry raises ``CorruptStateError`` when
        ``strict`` is set; otherwise it is logged and treated as a first run.
        """
        raw = self.storage.get_item(self.key)
        if raw is None:
            logger.info("No stored board under %r, starting empty", self.key)
            return BoardSnapshot()

        try:
            snapshot = self._parse(raw)
        except CorruptStateError as e:
            if strict:
                raise
            logger.warning("Discarding corrupt board snapshot: %s", e)
            return BoardSnapshot()

        if snapshot.current_id <= snapshot.max_id:
            logger.warning(
                "Stored id counter %d is not above highest id %d, repairing",
                snapshot.current_id,
                snapshot.max_id,
            )
            snapshot.current_id = snapshot.max_id + 1

        logger.info("Loaded %d opportunities (next id %d)", len(snapshot.opportunities), snapshot.current_id)
        return snapshot

    def _parse(self, raw: str) -> BoardSnapshot:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"snapshot is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStateError(f"snapshot must be an object, got {type(data).__name__}")
        # Older snapshots may lack either key; a bad counter is rebuilt from the ids
        if data.get("opportunities") is None:
            data["opportunities"] = []
        current_id = data.get("currentId")
        if isinstance(current_id, bool) or not isinstance(current_id, int) or current_id < 1:
            data.pop("currentId", None)
        try:
            return BoardSnapshot.model_validate(data)
        except pydantic.ValidationError as e:
            raise CorruptStateError(f"snapshot has an unexpected shape: {e}") from e

    def save(self, opportunities: Sequence[Opportunity], current_id: int) -> None:
        """Replace the stored snapshot. Raises ``PersistenceError`` on failure."""
        snapshot = BoardSnapshot(opportunities=list(opportunities), current_id=current_id)
        self.storage.set_item(self.key, snapshot.to_json())
        logger.debug("Saved %d opportunities (next id %d)", len(opportunities), current_id)
