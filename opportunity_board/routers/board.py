"""Board REST endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from opportunity_board.models.board import AddOpportunityRequest, BoardView, UpdateStatusRequest
from opportunity_board.models.intents import DeleteIntent, MoveIntent, ResetIntent
from opportunity_board.models.opportunity import Opportunity
from opportunity_board.services.board_service import BoardContext

router = APIRouter(prefix="/api", tags=["board"])


def get_board(request: Request) -> BoardContext:
    return request.app.state.board


@router.get("/board", response_model=BoardView)
async def get_board_view(q: str = "", board: BoardContext = Depends(get_board)) -> BoardView:
    return board.view(q)


@router.post("/board/reset", response_model=BoardView)
async def reset_board(board: BoardContext = Depends(get_board)) -> BoardView:
    return board.dispatch(ResetIntent())


@router.get("/opportunities", response_model=list[Opportunity])
async def list_opportunities(
    q: str = "",
    status: str | None = None,
    board: BoardContext = Depends(get_board),
) -> list[Opportunity]:
    results = board.repository.search(q)
    if status is not None:
        keep = {opp.id for opp in board.repository.filter_by_status(status)}
        results = [opp for opp in results if opp.id in keep]
    return results


@router.get("/opportunities/{opportunity_id}", response_model=Opportunity)
async def get_opportunity(opportunity_id: int, board: BoardContext = Depends(get_board)) -> Opportunity:
    opportunity = board.repository.find_by_id(opportunity_id)
    if opportunity is None:
        raise HTTPException(status_code=404, detail=f"Opportunity {opportunity_id} not found")
    return opportunity


@router.post("/opportunities", response_model=Opportunity, status_code=201)
async def add_opportunity(payload: AddOpportunityRequest, board: BoardContext = Depends(get_board)) -> Opportunity:
    return board.repository.add(payload.title, payload.company)


@router.patch("/opportunities/{opportunity_id}", response_model=BoardView)
async def move_opportunity(
    opportunity_id: int,
    payload: UpdateStatusRequest,
    board: BoardContext = Depends(get_board),
) -> BoardView:
    """Move a card to another column. Unknown ids are ignored."""
    return board.dispatch(MoveIntent(id=opportunity_id, status=payload.status))


@router.delete("/opportunities/{opportunity_id}", response_model=BoardView)
async def delete_opportunity(opportunity_id: int, board: BoardContext = Depends(get_board)) -> BoardView:
    return board.dispatch(DeleteIntent(id=opportunity_id))

