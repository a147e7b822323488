"""Typed user intents forwarded from the presentation layer."""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class AddIntent(BaseModel):
    type: Literal["add"] = "add"
    title: str
    company: str


class MoveIntent(BaseModel):
    """Drag-and-drop completion: ``status`` is the drop target's column."""

    type: Literal["move"] = "move"
    id: int
    status: str


class DeleteIntent(BaseModel):
    type: Literal["delete"] = "delete"
    id: int


class SearchIntent(BaseModel):
    type: Literal["search"] = "search"
    query: str = ""


class ResetIntent(BaseModel):
    type: Literal["reset"] = "reset"


BoardIntent = Annotated[
    Union[AddIntent, MoveIntent, DeleteIntent, SearchIntent, ResetIntent],
    Field(discriminator="type"),
]

intent_adapter: TypeAdapter[BoardIntent] = TypeAdapter(BoardIntent)
