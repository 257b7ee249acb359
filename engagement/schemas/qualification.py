"""Pydantic schemas for keyword qualifications and their reports."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from engagement.constants.engagement import QualificationCategory, QualificationSource
from engagement.schemas.base import APIModel


class MessageAnalysis(APIModel):
    """Classifier output for a single message."""

    category: QualificationCategory
    score: int = Field(ge=0, le=100)
    keywords: list[str] = Field(default_factory=list)


class QualificationOptions(APIModel):
    """Optional identifying fields supplied alongside a message."""

    contact_id: Optional[str] = None
    campaign_id: Optional[str] = None
    campaign_name: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    user_id: Optional[str] = None


class QualificationRead(APIModel):
    id: UUID
    contact_id: str
    phone: str
    name: str
    source: QualificationSource
    campaign_id: Optional[str] = None
    campaign_name: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    category: QualificationCategory
    score: int
    total_messages: int
    keywords: list[str]
    first_contact_at: datetime
    last_message_at: datetime
    notes: str
    user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class QualificationCategoryUpdate(APIModel):
    """Manual override of the category by an operator."""

    category: QualificationCategory
    notes: Optional[str] = None


class QualificationNotesUpdate(APIModel):
    notes: str


# -----------------------------------------------------------------------------
# Reports
# -----------------------------------------------------------------------------


class QualificationStats(APIModel):
    total: int = 0
    interested: int = 0
    not_interested: int = 0
    pending: int = 0
    interested_percent: int = 0
    not_interested_percent: int = 0
    pending_percent: int = 0


class CampaignQualificationStats(QualificationStats):
    campaign_name: str


class AgentQualificationStats(QualificationStats):
    agent_name: str


class QualificationReport(APIModel):
    by_source: dict[str, QualificationStats]
    by_campaign: dict[str, CampaignQualificationStats]
    by_agent: dict[str, AgentQualificationStats]
    overall: QualificationStats
