"""Message event delivered by the ingestion layer, one per message."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from engagement.constants.engagement import MessageDirection, QualificationSource
from engagement.schemas.base import APIModel


class MessageEvent(APIModel):
    contact_id: str = ""
    phone: str
    name: str = ""
    content: str = ""
    direction: MessageDirection
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: QualificationSource = QualificationSource.AI_CHAT
    campaign_id: Optional[str] = None
    campaign_name: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
