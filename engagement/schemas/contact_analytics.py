"""Pydantic schemas for LLM interest assessments and contact reports."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from engagement.constants.engagement import (
    AnalysisMethod,
    ConversationRole,
    InterestLevel,
    MessageDirection,
)
from engagement.schemas.base import APIModel


class ConversationMessage(APIModel):
    """
    One message of a conversation handed to the analyzer.

    Accepts either a direction (inbound/outbound) or a history role
    (user/assistant); a role is translated to the matching direction.
    """

    direction: MessageDirection
    content: str = ""
    timestamp: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def _role_to_direction(cls, data: Any) -> Any:
        if isinstance(data, dict) and "direction" not in data and "role" in data:
            data = dict(data)
            role = data.pop("role")
            data["direction"] = (
                MessageDirection.INBOUND
                if role == ConversationRole.USER
                else MessageDirection.OUTBOUND
            )
        return data

    @property
    def is_inbound(self) -> bool:
        return self.direction == MessageDirection.INBOUND


class AgentInteraction(APIModel):
    agent_id: str
    agent_name: str = ""
    messages_count: int = 0
    first_interaction: datetime
    last_interaction: datetime
    duration_minutes: int = 0


class InterestAssessment(APIModel):
    """Semantic assessment of a conversation (AI, keyword fallback or none)."""

    interest_level: InterestLevel = InterestLevel.NEUTRAL
    interest_score: int = 50
    interest_reason: str = "Unable to determine"
    key_topics: list[str] = Field(default_factory=list)
    objections: list[str] = Field(default_factory=list)
    positive_signals: list[str] = Field(default_factory=list)
    negative_signals: list[str] = Field(default_factory=list)
    analysis_method: AnalysisMethod = AnalysisMethod.AI

    @field_validator("interest_level", mode="before")
    @classmethod
    def _default_level(cls, value: Any) -> Any:
        if value is None or value == "":
            return InterestLevel.NEUTRAL
        return value

    @field_validator("interest_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> int:
        if value is None:
            return 50
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise ValueError(f"interest score must be a number, got {type(value).__name__}")
        try:
            number = float(value)
        except (ValueError, OverflowError) as exc:
            raise ValueError(f"interest score is not numeric: {value!r}") from exc
        if not math.isfinite(number):
            raise ValueError(f"interest score is not finite: {value!r}")
        return max(0, min(100, int(round(number))))

    @field_validator("interest_reason", mode="before")
    @classmethod
    def _default_reason(cls, value: Any) -> str:
        if value is None or value == "":
            return "Unable to determine"
        return str(value)

    @field_validator(
        "key_topics", "objections", "positive_signals", "negative_signals", mode="before"
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ContactAnalyticsRead(APIModel):
    id: UUID
    contact_id: str
    phone: str
    contact_name: str
    interest_level: InterestLevel
    interest_score: int
    interest_reason: str
    analysis_method: AnalysisMethod
    total_messages: int
    inbound_messages: int
    outbound_messages: int
    ai_agent_interactions: list[AgentInteraction] = Field(default_factory=list)
    first_contact_time: datetime
    last_contact_time: datetime
    conversation_duration: int
    key_topics: list[str] = Field(default_factory=list)
    objections: list[str] = Field(default_factory=list)
    positive_signals: list[str] = Field(default_factory=list)
    negative_signals: list[str] = Field(default_factory=list)
    last_analyzed_at: Optional[datetime] = None
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ContactReportList(APIModel):
    reports: list[ContactAnalyticsRead]
    total: int


class AnalyzeContactRequest(APIModel):
    contact_id: Optional[str] = None
    contact_name: Optional[str] = None
    messages: list[ConversationMessage] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Summary
# -----------------------------------------------------------------------------


class InterestLevelCount(APIModel):
    level: InterestLevel
    count: int
    percentage: int


class TopAgent(APIModel):
    agent_id: str
    agent_name: str
    contacts_handled: int


class ContactAnalyticsSummary(APIModel):
    total: int = 0
    by_interest_level: list[InterestLevelCount] = Field(default_factory=list)
    average_score: int = 0
    top_agents: list[TopAgent] = Field(default_factory=list)


class AnalyzedContact(APIModel):
    phone: str
    name: Optional[str] = None
    interest_level: InterestLevel
    interest_score: int


class AnalyzeAllResult(APIModel):
    analyzed: int
    results: list[AnalyzedContact] = Field(default_factory=list)
