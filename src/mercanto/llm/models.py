from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HistoryTurn(BaseModel):
    """One role-tagged turn of conversation history sent to the remote model."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "model"] = Field(description="Who produced the turn")
    text: str = Field(description="Turn text")
