from .opportunity import BoardSnapshot, Opportunity, OpportunityStatus
from .board import AddOpportunityRequest, BoardColumn, BoardView, UpdateStatusRequest
from .intents import AddIntent, BoardIntent, DeleteIntent, MoveIntent, ResetIntent, SearchIntent

__all__ = [
    "Opportunity",
    "OpportunityStatus",
    "BoardSnapshot",
    "BoardColumn",
    "BoardView",
    "AddOpportunityRequest",
    "UpdateStatusRequest",
    "BoardIntent",
    "AddIntent",
    "MoveIntent",
    "DeleteIntent",
    "SearchIntent",
    "ResetIntent",
]
