"""Pydantic schemas for agent assignments and their conversation history."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from engagement.constants.engagement import ConversationRole
from engagement.schemas.base import APIModel


class HistoryMessage(APIModel):
    """History entry as fed to an LLM (no timestamp)."""

    role: ConversationRole
    content: str


class HistoryEntry(HistoryMessage):
    timestamp: datetime


class AgentAssignmentRead(APIModel):
    id: UUID
    contact_id: str
    phone: str
    agent_id: str
    agent_name: Optional[str] = None
    conversation_history: list[HistoryEntry] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AgentAssignmentUpsert(APIModel):
    """Request body for assigning (or reassigning) an agent to a contact."""

    contact_id: str = ""
    agent_id: str = Field(..., min_length=1)
    agent_name: Optional[str] = None
