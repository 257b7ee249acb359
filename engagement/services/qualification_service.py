"""Keyword qualification records: create, merge and manual overrides."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Query, Session

from engagement.constants.engagement import QualificationCategory, QualificationSource
from engagement.core.classifier import analyze_message
from engagement.core.phone import normalize_phone, phone_filter, pick_match, require_phone
from engagement.infra.logging_config import get_logger
from engagement.models.qualification import Qualification
from engagement.schemas.qualification import MessageAnalysis, QualificationOptions
from engagement.services.base_service import BaseService

logger = get_logger("qualification")

OPTION_FIELDS = ("campaign_id", "campaign_name", "agent_id", "agent_name")


def merge_keywords(existing: List[str], new: List[str]) -> List[str]:
    """Order-preserving union; existing keywords are never dropped."""
    merged = list(existing or [])
    for keyword in new:
        if keyword not in merged:
            merged.append(keyword)
    return merged


def next_category(
    current: QualificationCategory, current_score: int, analysis: MessageAnalysis
) -> tuple[QualificationCategory, int]:
    """
    Merge one message analysis into the stored category and score.

    A negative analysis always wins; a positive one only when it raises the
    score; a pending record adopts any non-pending analysis. Automatic merges
    never move a record back to pending.
    """
    if (
        analysis.category == QualificationCategory.INTERESTED
        and analysis.score > current_score
    ):
        return QualificationCategory.INTERESTED, analysis.score
    if analysis.category == QualificationCategory.NOT_INTERESTED:
        return QualificationCategory.NOT_INTERESTED, analysis.score
    if (
        current == QualificationCategory.PENDING
        and analysis.category != QualificationCategory.PENDING
    ):
        return analysis.category, analysis.score
    return current, current_score


class QualificationService(BaseService[Qualification]):
    def __init__(self, db: Session) -> None:
        super().__init__(db, Qualification)

    def get_qualification(self, qualification_id: UUID) -> Optional[Qualification]:
        return self.get_record(qualification_id)

    def get_qualification_by_phone(self, phone: str) -> Optional[Qualification]:
        normalized = normalize_phone(phone)
        if not normalized:
            return None
        candidates = (
            self.db.query(Qualification)
            .filter(phone_filter(Qualification.phone, normalized))
            .order_by(Qualification.updated_at.desc())
            .all()
        )
        return pick_match(normalized, candidates)

    def get_qualifications(self) -> List[Qualification]:
        return self.get_qualifications_query().all()

    def get_qualifications_query(
        self, source: Optional[QualificationSource] = None
    ) -> Query[Qualification]:
        """Get a query for qualifications, newest first (for pagination)."""
        query = self.db.query(Qualification)
        if source:
            query = query.filter(Qualification.source == source)
        return query.order_by(Qualification.created_at.desc())

    def get_qualifications_by_category(
        self, category: QualificationCategory
    ) -> List[Qualification]:
        return (
            self.get_qualifications_query()
            .filter(Qualification.category == category)
            .all()
        )

    def get_qualifications_by_source(
        self, source: QualificationSource
    ) -> List[Qualification]:
        return self.get_qualifications_query(source=source).all()

    def get_qualifications_by_campaign(self, campaign_id: str) -> List[Qualification]:
        return (
            self.get_qualifications_query()
            .filter(Qualification.campaign_id == campaign_id)
            .all()
        )

    def get_qualifications_by_agent(self, agent_id: str) -> List[Qualification]:
        return (
            self.get_qualifications_query()
            .filter(Qualification.agent_id == agent_id)
            .all()
        )

    def create_or_update_qualification(
        self,
        phone: str,
        name: Optional[str],
        message: str,
        source: QualificationSource = QualificationSource.AI_CHAT,
        options: Optional[QualificationOptions] = None,
    ) -> Qualification:
        """Classify an inbound message and fold it into the contact's qualification."""
        normalized = require_phone(phone)
        options = options or QualificationOptions()
        analysis = analyze_message(message)
        now = datetime.now(timezone.utc)

        qualification = self.get_qualification_by_phone(normalized)
        if qualification is None:
            qualification = Qualification(
                contact_id=options.contact_id or normalized,
                phone=normalized,
                name=name or f"+{normalized}",
                source=source,
                campaign_id=options.campaign_id,
                campaign_name=options.campaign_name,
                agent_id=options.agent_id,
                agent_name=options.agent_name,
                category=analysis.category,
                score=analysis.score,
                total_messages=1,
                keywords=list(analysis.keywords),
                first_contact_at=now,
                last_message_at=now,
                notes="",
                user_id=options.user_id,
            )
            self.save(qualification)
            logger.info(
                "Created qualification %s: %s (%s)",
                normalized,
                analysis.category,
                analysis.score,
            )
            return qualification

        qualification = self.lock_record(qualification.id)
        previous = QualificationCategory(qualification.category)
        category, score = next_category(previous, qualification.score, analysis)
        qualification.category = category
        qualification.score = score
        qualification.keywords = merge_keywords(
            qualification.keywords, analysis.keywords
        )
        # Incremented in SQL, not from the value read above.
        qualification.total_messages = Qualification.total_messages + 1
        qualification.last_message_at = now
        for field in OPTION_FIELDS:
            value = getattr(options, field)
            if value:
                setattr(qualification, field, value)
        self.save(qualification)

        if category != previous:
            logger.info(
                "Qualification %s moved %s -> %s (%s)",
                normalized,
                previous,
                category,
                score,
            )
        return qualification

    def update_qualification_category(
        self,
        qualification_id: UUID,
        category: QualificationCategory,
        notes: Optional[str] = None,
    ) -> Optional[Qualification]:
        """Manual override; any category is allowed, including pending."""
        qualification = self.get_qualification(qualification_id)
        if qualification is None:
            return None
        qualification.category = category
        if notes is not None:
            qualification.notes = notes
        return self.save(qualification)

    def update_qualification_notes(
        self, qualification_id: UUID, notes: str
    ) -> Optional[Qualification]:
        qualification = self.get_qualification(qualification_id)
        if qualification is None:
            return None
        qualification.notes = notes
        return self.save(qualification)

    def delete_qualification(self, qualification_id: UUID) -> bool:
        return self.delete_record(qualification_id)
