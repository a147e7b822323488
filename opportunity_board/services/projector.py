"""Pure derivations of the board for display."""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from opportunity_board.models.board import BoardColumn, BoardView
from opportunity_board.models.opportunity import Opportunity, OpportunityStatus


def group_by_status(opportunities: Iterable[Opportunity]) -> dict[OpportunityStatus, list[Opportunity]]:
    groups: dict[OpportunityStatus, list[Opportunity]] = {s: [] for s in OpportunityStatus.ordered()}
    for opp in opportunities:
        groups[opp.status].append(opp)
    return groups


def count_by_status(opportunities: Iterable[Opportunity]) -> dict[OpportunityStatus, int]:
    return {status: len(group) for status, group in group_by_status(opportunities).items()}


def filter_by_query(opportunities: Sequence[Opportunity], query: str | None) -> list[Opportunity]:
    if not (query or "").strip():
        return list(opportunities)
    return [opp for opp in opportunities if opp.matches(query)]


def project_board(opportunities: Sequence[Opportunity], query: str | None = None) -> BoardView:
    """Build the four columns for ``opportunities``.

    Cards are filtered by ``query`` when one is active, but column counts are
    always taken over the full collection.
    """
    visible = filter_by_query(opportunities, query)
    groups = group_by_status(visible)
    counts = count_by_status(opportunities)
    columns = [
        BoardColumn(
            status=status,
            label=status.label,
            count=counts[status],
            opportunities=groups[status],
        )
        for status in OpportunityStatus.ordered()
    ]
    return BoardView(
        columns=columns,
        query=query or "",
        total=len(opportunities),
        matched=len(visible),
    )
