"""Qualification model: fast keyword-derived interest record, one per contact."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid

from engagement.constants.engagement import QualificationCategory, QualificationSource
from engagement.db import Base
from engagement.models.mixins import JSONType, TimestampMixin, utcnow


class Qualification(Base, TimestampMixin):
    """Keyword classifier output merged across every inbound message of a contact."""

    __tablename__ = "ai_qualifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    source = Column(
        String(32), nullable=False, default=QualificationSource.AI_CHAT.value, index=True
    )
    campaign_id = Column(String(255), nullable=True, index=True)
    campaign_name = Column(String(255), nullable=True)
    agent_id = Column(String(255), nullable=True, index=True)
    agent_name = Column(String(255), nullable=True)
    category = Column(
        String(32), nullable=False, default=QualificationCategory.PENDING.value
    )
    score = Column(Integer, nullable=False, default=50)
    total_messages = Column(Integer, nullable=False, default=0)
    keywords = Column(JSONType, nullable=False, default=list)
    first_contact_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_message_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    notes = Column(Text, nullable=False, default="")
    user_id = Column(String(255), nullable=True)  # tenant tag
