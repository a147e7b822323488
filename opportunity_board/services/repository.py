"""In-memory opportunity collection kept in sync with the store."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from opportunity_board.errors import PersistenceError, ValidationError
from opportunity_board.models.opportunity import BoardSnapshot, Opportunity, OpportunityStatus, utcnow
from opportunity_board.services.projector import filter_by_query
from opportunity_board.services.store import OpportunityStore

logger = logging.getLogger(__name__)


def parse_status(value: OpportunityStatus | str) -> OpportunityStatus:
    try:
        return OpportunityStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OpportunityStatus.ordered())
        raise ValidationError(f"Unknown status {value!r}; expected one of: {allowed}") from None


class OpportunityRepository:
    """CRUD over the live collection.

    Every mutation writes the full snapshot before returning. A failed write
    leaves the in-memory change in place and is kept in ``persistence_error``
    until a later save succeeds.
    """

    def __init__(
        self,
        store: OpportunityStore,
        snapshot: BoardSnapshot | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self._clock = clock
        snapshot = snapshot or BoardSnapshot()
        self._opportunities: list[Opportunity] = list(snapshot.opportunities)
        self._current_id = snapshot.current_id
        self.persistence_error: PersistenceError | None = None

    @classmethod
    def load(cls, store: OpportunityStore, clock: Callable[[], datetime] = utcnow) -> OpportunityRepository:
        return cls(store, store.load(), clock=clock)

    @property
    def current_id(self) -> int:
        return self._current_id

    def __len__(self) -> int:
        return len(self._opportunities)

    def all(self) -> list[Opportunity]:
        return list(self._opportunities)

    def add(self, title: str, company: str) -> Opportunity:
        title = (title or "").strip()
        company = (company or "").strip()
        if not title:
            raise ValidationError("Title cannot be blank")
        if not company:
            raise ValidationError("Company cannot be blank")

        now = self._clock()
        opportunity = Opportunity(
            id=self._current_id,
            title=title,
            company=company,
            status=OpportunityStatus.SAVED,
            created_at=now,
            updated_at=now,
        )
        self._current_id += 1
        self._opportunities.append(opportunity)
        logger.debug("Added opportunity %d: %s at %s", opportunity.id, title, company)
        self._persist()
        return opportunity

    def update_status(self, opportunity_id: int, new_status: OpportunityStatus | str) -> Opportunity | None:
        """Move an opportunity to ``new_status``.

        An unknown id is ignored and returns None: the card may already have
        been deleted by the time the move arrives.
        """
        status = parse_status(new_status)
        index = next((i for i, opp in enumerate(self._opportunities) if opp.id == opportunity_id), None)
        if index is None:
            logger.debug("Ignoring status change for unknown opportunity %s", opportunity_id)
            return None

        current = self._opportunities[index]
        opportunity = current.model_copy(
            update={"status": status, "updated_at": max(self._clock(), current.created_at)}
        )
        self._opportunities[index] = opportunity
        logger.debug("Opportunity %d moved to %s", opportunity_id, status.value)
        self._persist()
        return opportunity

    def delete(self, opportunity_id: int) -> bool:
        remaining = [opp for opp in self._opportunities if opp.id != opportunity_id]
        if len(remaining) == len(self._opportunities):
            logger.debug("Ignoring delete of unknown opportunity %s", opportunity_id)
            return False
        self._opportunities = remaining
        logger.debug("Deleted opportunity %d", opportunity_id)
        self._persist()
        return True

    def reset(self) -> None:
        """Drop every opportunity and restart ids at 1."""
        self._opportunities = []
        self._current_id = 1
        logger.info("Board reset")
        self._persist()

    def find_by_id(self, opportunity_id: int) -> Opportunity | None:
        for opp in self._opportunities:
            if opp.id == opportunity_id:
                return opp
        return None

    def filter_by_status(self, status: OpportunityStatus | str) -> list[Opportunity]:
        status = parse_status(status)
        return [opp for opp in self._opportunities if opp.status is status]

    def search(self, query: str | None) -> list[Opportunity]:
        """Case-insensitive substring search on title or company.

        A blank query means no filter and returns the whole collection.
        """
        return filter_by_query(self._opportunities, query)

    def _persist(self) -> None:
        try:
            self.store.save(self._opportunities, self._current_id)
        except PersistenceError as e:
            logger.warning("Board changes kept in memory only, save failed: %s", e)
            self.persistence_error = e
            return
        if self.persistence_error is not None:
            logger.info("Board saved after earlier failure")
        self.persistence_error = None
