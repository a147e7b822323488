from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, Field, PositiveInt, StringConstraints, field_validator, model_validator

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OpportunityStatus(str, Enum):
    SAVED = "saved"
    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def ordered(cls) -> list[OpportunityStatus]:
        """Board column order, left to right."""
        return [cls.SAVED, cls.APPLIED, cls.INTERVIEW, cls.OFFER]


class Opportunity(BaseModel):
    """A tracked job application. Instances are immutable; status changes go
    through the repository, which swaps in an updated copy."""

    id: PositiveInt
    title: NonBlank
    company: NonBlank
    status: OpportunityStatus = OpportunityStatus.SAVED
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Snapshots written without an offset are read as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _updated_not_before_created(self) -> Opportunity:
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt cannot be earlier than createdAt")
        return self

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match against title or company."""
        needle = query.lower()
        return needle in self.title.lower() or needle in self.company.lower()


class BoardSnapshot(BaseModel):
    """Everything the store persists: the ordered collection and the id counter."""

    opportunities: list[Opportunity] = []
    current_id: int = Field(1, alias="currentId", ge=1)

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _unique_ids(self) -> BoardSnapshot:
        seen: set[int] = set()
        for opp in self.opportunities:
            if opp.id in seen:
                raise ValueError(f"duplicate opportunity id {opp.id}")
            seen.add(opp.id)
        return self

    @property
    def max_id(self) -> int:
        return max((opp.id for opp in self.opportunities), default=0)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
