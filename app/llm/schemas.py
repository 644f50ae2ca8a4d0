from __future__ import annotations

from pydantic import BaseModel, Field


class BotReply(BaseModel):
    """Structured output from LLM for a chat reply."""

    response: str = Field(..., description="Reply text shown to the user")
    relevant_sources: list[int] = Field(
        default_factory=list,
        description="1-based indices of the context sources the reply draws on",
    )
