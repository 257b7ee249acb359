"""AgentAssignment model: the sticky agent-to-contact routing decision."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, Index, String, Uuid

from engagement.db import Base
from engagement.models.mixins import JSONType, TimestampMixin


class AgentAssignment(Base, TimestampMixin):
    """
    One row per contact phone. At most one row per normalized phone is active.

    conversation_history holds the most recent turns as
    {"role", "content", "timestamp"} dicts; deactivation never clears it.
    """

    __tablename__ = "contact_agents"

    __table_args__ = (Index("ix_contact_agents_phone_active", "phone", "is_active"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(String(255), nullable=False, default="")
    phone = Column(String(32), nullable=False, index=True)
    agent_id = Column(String(255), nullable=False)
    agent_name = Column(String(255), nullable=True)
    conversation_history = Column(JSONType, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
