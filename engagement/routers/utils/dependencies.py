from uuid import UUID

from fastapi import Depends
from sqlalchemy.orm import Session

from engagement.db import get_db
from engagement.exceptions import NotFoundError
from engagement.models.agent_assignment import AgentAssignment
from engagement.models.contact_analytics import ContactAnalytics
from engagement.models.qualification import Qualification
from engagement.services.agent_assignment_service import AgentAssignmentService
from engagement.services.contact_analytics_service import ContactAnalyticsService
from engagement.services.interest_analyzer import InterestAnalyzer
from engagement.services.qualification_service import QualificationService


def get_qualification_by_id(
    qualification_id: UUID,
    db: Session = Depends(get_db),
) -> Qualification:
    """FastAPI dependency to get a qualification by ID."""
    qualification = QualificationService(db).get_qualification(qualification_id)
    if qualification is None:
        raise NotFoundError("Qualification not found")
    return qualification


def get_contact_report_by_phone(
    phone: str,
    db: Session = Depends(get_db),
) -> ContactAnalytics:
    """FastAPI dependency to get a contact analytics record by phone."""
    report = ContactAnalyticsService(db).get_contact_report(phone)
    if report is None:
        raise NotFoundError("Contact analytics not found")
    return report


def get_assignment_by_phone(
    phone: str,
    db: Session = Depends(get_db),
) -> AgentAssignment:
    """FastAPI dependency to get any assignment (active or not) by phone."""
    assignment = AgentAssignmentService(db).get_assignment(phone)
    if assignment is None:
        raise NotFoundError("Agent assignment not found")
    return assignment


def get_interest_analyzer() -> InterestAnalyzer:
    return InterestAnalyzer()
