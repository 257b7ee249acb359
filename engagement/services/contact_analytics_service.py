"""Contact analytics records: LLM assessments, message counts and agent interactions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from engagement.constants.engagement import AnalysisMethod, InterestLevel
from engagement.core.phone import normalize_phone, phone_filter, pick_match, require_phone
from engagement.exceptions import EngagementError
from engagement.infra.logging_config import get_logger
from engagement.models.contact_analytics import ContactAnalytics
from engagement.models.mixins import as_utc
from engagement.schemas.agent_assignment import HistoryEntry
from engagement.schemas.contact_analytics import (
    AgentInteraction,
    AnalyzeAllResult,
    AnalyzedContact,
    ConversationMessage,
)
from engagement.services.agent_assignment_service import AgentAssignmentService
from engagement.services.base_service import BaseService
from engagement.services.interest_analyzer import InterestAnalyzer, coerce_messages

logger = get_logger("contact_analytics")

DEFAULT_REPORT_LIMIT = 50
NOT_ANALYZED_REASON = "Not yet analyzed"

UPDATABLE_FIELDS = frozenset(
    {
        "contact_id",
        "contact_name",
        "interest_level",
        "interest_score",
        "interest_reason",
        "analysis_method",
        "total_messages",
        "inbound_messages",
        "outbound_messages",
        "ai_agent_interactions",
        "first_contact_time",
        "last_contact_time",
        "conversation_duration",
        "key_topics",
        "objections",
        "positive_signals",
        "negative_signals",
        "last_analyzed_at",
        "user_id",
    }
)


def _minutes_between(start: datetime, end: datetime) -> int:
    return round((as_utc(end) - as_utc(start)).total_seconds() / 60)


class ContactAnalyticsService(BaseService[ContactAnalytics]):
    def __init__(self, db: Session, analyzer: Optional[InterestAnalyzer] = None) -> None:
        super().__init__(db, ContactAnalytics)
        self._analyzer = analyzer

    @property
    def analyzer(self) -> InterestAnalyzer:
        if self._analyzer is None:
            self._analyzer = InterestAnalyzer()
        return self._analyzer

    def get_contact_report(self, phone: str) -> Optional[ContactAnalytics]:
        normalized = normalize_phone(phone)
        if not normalized:
            return None
        candidates = (
            self.db.query(ContactAnalytics)
            .filter(phone_filter(ContactAnalytics.phone, normalized))
            .order_by(ContactAnalytics.updated_at.desc())
            .all()
        )
        return pick_match(normalized, candidates)

    def get_all_contact_reports(
        self,
        interest_level: Optional[str] = None,
        limit: int = DEFAULT_REPORT_LIMIT,
        offset: int = 0,
    ) -> Tuple[List[ContactAnalytics], int]:
        """Reports newest first. interest_level "all" (or None) disables the filter."""
        query = self.db.query(ContactAnalytics)
        if interest_level and interest_level != "all":
            query = query.filter(ContactAnalytics.interest_level == interest_level)
        total = query.count()
        reports = (
            query.order_by(ContactAnalytics.updated_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return reports, total

    def get_or_create_contact_analytics(
        self,
        contact_id: Optional[str],
        phone: str,
        contact_name: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> ContactAnalytics:
        normalized = require_phone(phone)
        record = self.get_contact_report(normalized)
        if record is not None:
            return record

        now = datetime.now(timezone.utc)
        record = ContactAnalytics(
            contact_id=contact_id or normalized,
            phone=normalized,
            contact_name=contact_name or "",
            interest_level=InterestLevel.PENDING,
            interest_score=0,
            interest_reason=NOT_ANALYZED_REASON,
            analysis_method=AnalysisMethod.NONE,
            total_messages=0,
            inbound_messages=0,
            outbound_messages=0,
            ai_agent_interactions=[],
            first_contact_time=now,
            last_contact_time=now,
            conversation_duration=0,
            key_topics=[],
            objections=[],
            positive_signals=[],
            negative_signals=[],
            user_id=user_id,
        )
        self.save(record)
        logger.info("Created contact analytics for %s", normalized)
        return record

    def update_contact_analytics(
        self, phone: str, **fields: Any
    ) -> Optional[ContactAnalytics]:
        """Overwrite the given columns of the contact's record; None when there is none."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown contact analytics fields: {sorted(unknown)}")
        record = self.get_contact_report(require_phone(phone))
        if record is None:
            return None
        for key, value in fields.items():
            setattr(record, key, value)
        return self.save(record)

    async def analyze_and_update_contact(
        self,
        contact_id: Optional[str],
        phone: str,
        contact_name: Optional[str],
        messages: Iterable[Union[ConversationMessage, dict[str, Any]]],
        user_id: Optional[str] = None,
    ) -> ContactAnalytics:
        """Run the analyzer over the conversation and replace the stored assessment."""
        record = self.get_or_create_contact_analytics(
            contact_id, phone, contact_name, user_id
        )
        conversation = coerce_messages(messages)
        assessment = await self.analyzer.analyze_contact_conversation(
            record.phone, conversation, user_id=user_id
        )

        inbound = sum(1 for m in conversation if m.is_inbound)
        timestamps = [as_utc(m.timestamp) for m in conversation if m.timestamp]
        first_contact = min(timestamps) if timestamps else as_utc(record.first_contact_time)
        last_contact = max(timestamps) if timestamps else as_utc(record.last_contact_time)

        record.interest_level = assessment.interest_level
        record.interest_score = assessment.interest_score
        record.interest_reason = assessment.interest_reason
        record.analysis_method = assessment.analysis_method
        record.key_topics = list(assessment.key_topics)
        record.objections = list(assessment.objections)
        record.positive_signals = list(assessment.positive_signals)
        record.negative_signals = list(assessment.negative_signals)
        record.total_messages = len(conversation)
        record.inbound_messages = inbound
        record.outbound_messages = len(conversation) - inbound
        record.first_contact_time = first_contact
        record.last_contact_time = last_contact
        record.conversation_duration = _minutes_between(first_contact, last_contact)
        record.last_analyzed_at = datetime.now(timezone.utc)
        if contact_id:
            record.contact_id = contact_id
        if contact_name:
            record.contact_name = contact_name
        if user_id:
            record.user_id = user_id
        return self.save(record)

    async def analyze_all_contacts(
        self, user_id: Optional[str] = None
    ) -> AnalyzeAllResult:
        """
        Re-analyze every contact that has a stored conversation history.

        A contact that fails is logged and skipped; the batch carries on.
        """
        results: List[AnalyzedContact] = []
        seen: set[str] = set()
        for assignment in AgentAssignmentService(self.db).get_all_contact_agents():
            if assignment.phone in seen or not assignment.conversation_history:
                continue
            seen.add(assignment.phone)
            history = [
                HistoryEntry.model_validate(item)
                for item in assignment.conversation_history
            ]
            history.sort(key=lambda entry: as_utc(entry.timestamp))
            messages = [
                ConversationMessage.model_validate(
                    {"role": entry.role, "content": entry.content, "timestamp": entry.timestamp}
                )
                for entry in history
            ]
            try:
                record = await self.analyze_and_update_contact(
                    assignment.contact_id or None,
                    assignment.phone,
                    None,
                    messages,
                    user_id=user_id,
                )
            except EngagementError as exc:
                logger.error("Failed to analyze contact %s: %s", assignment.phone, exc)
                continue
            results.append(
                AnalyzedContact(
                    phone=record.phone,
                    name=record.contact_name or None,
                    interest_level=record.interest_level,
                    interest_score=record.interest_score,
                )
            )
        logger.info("Analyzed %s contacts", len(results))
        return AnalyzeAllResult(analyzed=len(results), results=results)

    def track_agent_interaction(
        self, phone: str, agent_id: str, agent_name: Optional[str] = None
    ) -> Optional[ContactAnalytics]:
        """Count one more message handled by the agent. None when the contact has no record."""
        record = self.get_contact_report(require_phone(phone))
        if record is None:
            return None
        record = self.lock_record(record.id)

        now = datetime.now(timezone.utc)
        interactions = [
            AgentInteraction.model_validate(item)
            for item in record.ai_agent_interactions or []
        ]
        entry = next((i for i in interactions if i.agent_id == agent_id), None)
        if entry is None:
            entry = AgentInteraction(
                agent_id=agent_id,
                agent_name=agent_name or "",
                messages_count=0,
                first_interaction=now,
                last_interaction=now,
            )
            interactions.append(entry)
        entry.messages_count += 1
        entry.last_interaction = now
        entry.duration_minutes = _minutes_between(entry.first_interaction, now)
        if agent_name:
            entry.agent_name = agent_name

        record.ai_agent_interactions = [i.model_dump(mode="json") for i in interactions]
        record.last_contact_time = now
        return self.save(record)
