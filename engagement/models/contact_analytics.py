"""ContactAnalytics model: LLM-derived interest record, one per contact."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid

from engagement.constants.engagement import AnalysisMethod, InterestLevel
from engagement.db import Base
from engagement.models.mixins import JSONType, TimestampMixin, utcnow


class ContactAnalytics(Base, TimestampMixin):
    """
    Semantic assessment of a contact's conversation.

    Maintained independently of Qualification; the two may disagree.
    ai_agent_interactions is a list of per-agent dicts
    (agent_id, agent_name, messages_count, first_interaction,
    last_interaction, duration_minutes).
    """

    __tablename__ = "contact_analytics"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=False, index=True)
    contact_name = Column(String(255), nullable=False, default="")
    interest_level = Column(
        String(32), nullable=False, default=InterestLevel.PENDING.value, index=True
    )
    interest_score = Column(Integer, nullable=False, default=0)
    interest_reason = Column(Text, nullable=False, default="Not yet analyzed")
    analysis_method = Column(
        String(16), nullable=False, default=AnalysisMethod.NONE.value
    )
    total_messages = Column(Integer, nullable=False, default=0)
    inbound_messages = Column(Integer, nullable=False, default=0)
    outbound_messages = Column(Integer, nullable=False, default=0)
    ai_agent_interactions = Column(JSONType, nullable=False, default=list)
    first_contact_time = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_contact_time = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    conversation_duration = Column(Integer, nullable=False, default=0)
    key_topics = Column(JSONType, nullable=False, default=list)
    objections = Column(JSONType, nullable=False, default=list)
    positive_signals = Column(JSONType, nullable=False, default=list)
    negative_signals = Column(JSONType, nullable=False, default=list)
    last_analyzed_at = Column(DateTime(timezone=True), nullable=True)
    user_id = Column(String(255), nullable=True)  # tenant tag
