"""Per-message orchestration of routing, qualification and periodic analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from engagement.config import get_settings
from engagement.constants.engagement import ConversationRole, MessageDirection
from engagement.core.phone import require_phone
from engagement.infra.logging_config import get_logger
from engagement.models.agent_assignment import AgentAssignment
from engagement.models.contact_analytics import ContactAnalytics
from engagement.models.qualification import Qualification
from engagement.schemas.contact_analytics import ConversationMessage
from engagement.schemas.events import MessageEvent
from engagement.schemas.qualification import QualificationOptions
from engagement.services.agent_assignment_service import AgentAssignmentService
from engagement.services.contact_analytics_service import ContactAnalyticsService
from engagement.services.interest_analyzer import InterestAnalyzer
from engagement.services.qualification_service import QualificationService
from engagement.utils.db.db_session_helper import db_session

logger = get_logger("pipeline")


@dataclass
class PipelineResult:
    phone: str
    assignment: Optional[AgentAssignment] = None
    qualification: Optional[Qualification] = None
    analytics: Optional[ContactAnalytics] = None
    analyzed: bool = False


class EngagementPipeline:
    """Applies one message event to every engine component, in order."""

    def __init__(
        self,
        db: Session,
        analyzer: Optional[InterestAnalyzer] = None,
        analysis_interval: Optional[int] = None,
    ) -> None:
        self._assignments = AgentAssignmentService(db)
        self._qualifications = QualificationService(db)
        self._analytics = ContactAnalyticsService(db, analyzer=analyzer)
        self.analysis_interval = (
            analysis_interval or get_settings().analysis_message_interval
        )

    def _should_analyze(self, qualification: Qualification) -> bool:
        return (qualification.total_messages or 0) % self.analysis_interval == 0

    async def handle_message(
        self, event: MessageEvent, user_id: Optional[str] = None
    ) -> PipelineResult:
        phone = require_phone(event.phone)
        inbound = event.direction == MessageDirection.INBOUND
        result = PipelineResult(phone=phone)

        if event.agent_id:
            result.assignment = self._assignments.assign(
                event.contact_id, phone, event.agent_id, event.agent_name
            )
        else:
            result.assignment = self._assignments.get_agent_for_contact(phone)

        if result.assignment is not None:
            role = ConversationRole.USER if inbound else ConversationRole.ASSISTANT
            self._assignments.add_message_to_history(
                phone, role, event.content, event.timestamp
            )

        result.analytics = self._analytics.get_or_create_contact_analytics(
            event.contact_id, phone, event.name, user_id
        )
        if not inbound and result.assignment is not None:
            result.analytics = self._analytics.track_agent_interaction(
                phone, result.assignment.agent_id, result.assignment.agent_name
            )

        if not inbound:
            return result

        result.qualification = self._qualifications.create_or_update_qualification(
            phone,
            event.name,
            event.content,
            source=event.source,
            options=QualificationOptions(
                contact_id=event.contact_id or None,
                campaign_id=event.campaign_id,
                campaign_name=event.campaign_name,
                agent_id=event.agent_id,
                agent_name=event.agent_name,
                user_id=user_id,
            ),
        )

        if self._should_analyze(result.qualification):
            history = self._assignments.get_history_entries(phone)
            if history:
                logger.info(
                    "Analyzing %s after %s messages",
                    phone,
                    result.qualification.total_messages,
                )
                result.analytics = await self._analytics.analyze_and_update_contact(
                    event.contact_id,
                    phone,
                    event.name,
                    [
                        ConversationMessage(
                            role=entry.role,
                            content=entry.content,
                            timestamp=entry.timestamp,
                        )
                        for entry in history
                    ],
                    user_id=user_id,
                )
                result.analyzed = True
        return result


async def process_message_event(
    event: MessageEvent,
    analyzer: Optional[InterestAnalyzer] = None,
    user_id: Optional[str] = None,
) -> PipelineResult:
    """Entry point for ingestion workers: runs one event in its own session."""
    with db_session() as db:
        return await EngagementPipeline(db, analyzer=analyzer).handle_message(
            event, user_id=user_id
        )
