"""
API Models

Pydantic models for request/response validation on the chat endpoints.

Design Goals
------------
- Strong typing
- Safe defaults (no shared mutable state)
- A single ``{"error": ...}`` shape for every failure response
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from ..retrieval.models import SourceRef


# ---------------------------------------------------------------------
# Chat Models
# ---------------------------------------------------------------------

class ChatMessage(BaseModel):
    """
    Single message in a chat session.
    """
    role: Literal["user", "assistant"]
    content: str
    sources: List[SourceRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ChatRequest(BaseModel):
    """
    Chat request payload. ``message`` is validated by the pipeline so that
    missing and blank questions share one error path.
    """
    message: Optional[StrictStr] = None
    session_id: Optional[str] = Field(default=None, min_length=1, max_length=128)

    model_config = ConfigDict(extra="ignore")


class ChatResponse(BaseModel):
    """
    Successful chat response payload.
    """
    answer: str
    sources: List[SourceRef] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ErrorResponse(BaseModel):
    error: str


# ---------------------------------------------------------------------
# Session Models
# ---------------------------------------------------------------------

class SessionStatus(BaseModel):
    """
    Snapshot of a chat session's question budget and history.
    """
    session_id: str
    turn_count: int = Field(..., ge=0)
    max_turns: int = Field(..., ge=0)
    remaining: int = Field(..., ge=0)
    messages: List[ChatMessage] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")
