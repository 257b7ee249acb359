"""Read-only aggregates over qualifications and contact analytics."""

from __future__ import annotations

import math
from collections import OrderedDict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from engagement.constants.engagement import (
    InterestLevel,
    QualificationCategory,
    QualificationSource,
)
from engagement.models.contact_analytics import ContactAnalytics
from engagement.models.qualification import Qualification
from engagement.schemas.contact_analytics import (
    ContactAnalyticsSummary,
    InterestLevelCount,
    TopAgent,
)
from engagement.schemas.qualification import (
    AgentQualificationStats,
    CampaignQualificationStats,
    QualificationReport,
    QualificationStats,
)

UNKNOWN_CAMPAIGN = "Unknown Campaign"
UNKNOWN_AGENT = "Unknown Agent"
TOP_AGENTS_LIMIT = 5

SUMMARY_LEVEL_ORDER = (
    InterestLevel.HIGHLY_INTERESTED,
    InterestLevel.INTERESTED,
    InterestLevel.NEUTRAL,
    InterestLevel.NOT_INTERESTED,
    InterestLevel.PENDING,
)


def percent(count: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when total is 0."""
    if not total:
        return 0
    return math.floor(count * 100 / total + 0.5)


def compute_stats(records: Iterable[Qualification]) -> Dict[str, int]:
    records = list(records)
    total = len(records)
    counts = {category: 0 for category in QualificationCategory}
    for record in records:
        counts[QualificationCategory(record.category)] += 1
    interested = counts[QualificationCategory.INTERESTED]
    not_interested = counts[QualificationCategory.NOT_INTERESTED]
    pending = counts[QualificationCategory.PENDING]
    return {
        "total": total,
        "interested": interested,
        "not_interested": not_interested,
        "pending": pending,
        "interested_percent": percent(interested, total),
        "not_interested_percent": percent(not_interested, total),
        "pending_percent": percent(pending, total),
    }


def _group_by(records: Iterable[Qualification], attr: str) -> "OrderedDict[str, List[Qualification]]":
    groups: "OrderedDict[str, List[Qualification]]" = OrderedDict()
    for record in records:
        key = getattr(record, attr)
        if key:
            groups.setdefault(key, []).append(record)
    return groups


class ReportService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _qualifications(self) -> List[Qualification]:
        return (
            self.db.query(Qualification)
            .order_by(Qualification.created_at.asc())
            .all()
        )

    def get_qualification_stats(self) -> QualificationStats:
        return QualificationStats(**compute_stats(self._qualifications()))

    def get_qualification_report(self) -> QualificationReport:
        records = self._qualifications()

        by_source = {
            source.value: QualificationStats(
                **compute_stats(r for r in records if r.source == source)
            )
            for source in QualificationSource
        }
        by_campaign = {
            campaign_id: CampaignQualificationStats(
                campaign_name=group[0].campaign_name or UNKNOWN_CAMPAIGN,
                **compute_stats(group),
            )
            for campaign_id, group in _group_by(records, "campaign_id").items()
        }
        by_agent = {
            agent_id: AgentQualificationStats(
                agent_name=group[0].agent_name or UNKNOWN_AGENT,
                **compute_stats(group),
            )
            for agent_id, group in _group_by(records, "agent_id").items()
        }
        return QualificationReport(
            by_source=by_source,
            by_campaign=by_campaign,
            by_agent=by_agent,
            overall=QualificationStats(**compute_stats(records)),
        )

    def get_contact_analytics_summary(self) -> ContactAnalyticsSummary:
        records = self.db.query(ContactAnalytics).all()
        total = len(records)

        level_counts = {level: 0 for level in SUMMARY_LEVEL_ORDER}
        for record in records:
            level = InterestLevel(record.interest_level)
            level_counts[level] += 1

        average = (
            math.floor(sum(r.interest_score or 0 for r in records) / total + 0.5)
            if total
            else 0
        )

        agents: "OrderedDict[str, dict]" = OrderedDict()
        for record in records:
            for interaction in record.ai_agent_interactions or []:
                agent_id = interaction.get("agent_id")
                if not agent_id:
                    continue
                agent = agents.setdefault(
                    agent_id,
                    {
                        "agent_id": agent_id,
                        "agent_name": interaction.get("agent_name") or UNKNOWN_AGENT,
                        "contacts_handled": 0,
                    },
                )
                agent["contacts_handled"] += 1
        top_agents = sorted(
            agents.values(), key=lambda a: a["contacts_handled"], reverse=True
        )[:TOP_AGENTS_LIMIT]

        return ContactAnalyticsSummary(
            total=total,
            by_interest_level=[
                InterestLevelCount(
                    level=level, count=count, percentage=percent(count, total)
                )
                for level, count in level_counts.items()
            ],
            average_score=average,
            top_agents=[TopAgent(**agent) for agent in top_agents],
        )
