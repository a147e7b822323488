from __future__ import annotations

from pydantic import BaseModel, Field

from opportunity_board.models.opportunity import Opportunity, OpportunityStatus


class BoardColumn(BaseModel):
    status: OpportunityStatus
    label: str
    count: int = Field(description="Opportunities in this status across the whole board")
    opportunities: list[Opportunity] = []


class BoardView(BaseModel):
    """Read-only projection of the board for display."""

    columns: list[BoardColumn]
    query: str = ""
    total: int = 0
    matched: int = 0
    persistence_warning: str | None = None

    def column(self, status: OpportunityStatus | str) -> BoardColumn:
        status = OpportunityStatus(status)
        for col in self.columns:
            if col.status is status:
                return col
        raise KeyError(status)


class AddOpportunityRequest(BaseModel):
    title: str
    company: str


class UpdateStatusRequest(BaseModel):
    status: str
